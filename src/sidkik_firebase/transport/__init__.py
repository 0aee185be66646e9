"""
sidkik_firebase.transport

HTTP transport chain.

Responsibilities:
- Wrap an httpx transport with auth, logging, retry and header layers.
- Build the final `httpx.AsyncClient` shared by every API client.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Layer order is fixed in `chain.build_client`; do not compose layers elsewhere.
