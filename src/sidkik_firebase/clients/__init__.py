"""
sidkik_firebase.clients

API client boundary.

Responsibilities:
- Typed wrappers over the Firebase Rules and Identity Platform REST endpoints.
- Uniform mapping of HTTP outcomes onto the error taxonomy.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Clients hold no state beyond the shared httpx client and their base path.
