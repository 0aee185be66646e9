"""
sidkik_firebase.identity_platform

Identity Platform (Firebase Auth) project configuration.

Responsibilities:
- Typed auth config payloads.
- Read / update / no-op delete of email sign-in and authorized domains.
"""

# Package marker.
