"""
tests.test_smoke

Minimal smoke tests to validate the emulator can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts, answers its health check and rejects
  unauthenticated API calls.
"""

from __future__ import annotations

import httpx
import pytest

from sidkik_firebase.emulator.app import create_app
from sidkik_firebase.emulator.settings import EmulatorSettings


@pytest.mark.asyncio
async def test_health_endpoint() -> None:
    app = create_app(settings=EmulatorSettings())

    # ASGITransport does not run lifespan events; drive them explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/healthz")
            assert r.status_code == 200
            assert r.json()["status"] == "ok"
            assert r.headers["x-request-id"]

            r = await client.get("/readyz")
            assert r.json() == {"status": "ready", "projects": 0}

            r = await client.get("/v1/projects/p/releases")
            assert r.status_code == 401
            assert r.json()["error"]["status"] == "UNAUTHENTICATED"


# --- Module Notes -----------------------------------------------------------
# End-to-end client behavior against the emulator lives in test_rules_service.py and
# test_auth_config.py.
