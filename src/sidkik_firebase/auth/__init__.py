"""
sidkik_firebase.auth

Authentication package.

Responsibilities:
- Resolve configured secrets into google-auth credentials (token sources).
- Report the effective caller identity at startup.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here issues rule or config requests; the transport package consumes the
# resolved credentials.
