"""
sidkik_firebase.emulator

In-memory emulator of the Firebase Rules and Identity Platform endpoints.

Responsibilities:
- Serve the REST surface the clients call, backed by process memory.
- Give local development and end-to-end tests a server to talk to.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Run with `python -m sidkik_firebase.emulator`; point the client base paths at it.
