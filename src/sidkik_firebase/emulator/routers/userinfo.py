"""
sidkik_firebase.emulator.routers.userinfo

OpenID userinfo endpoint.

Responsibilities:
- Report the configured emulator identity for any bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sidkik_firebase.emulator.deps import require_bearer, settings_dep
from sidkik_firebase.emulator.settings import EmulatorSettings

router = APIRouter(prefix="/v1", tags=["userinfo"])


@router.get("/userinfo")
async def userinfo(
    _: str = Depends(require_bearer),
    settings: EmulatorSettings = Depends(settings_dep),
) -> dict[str, object]:
    return {"sub": settings.identity_email, "email": settings.identity_email, "email_verified": True}
