"""
sidkik_firebase.emulator.routers.identity_platform

Identity Platform project config surface (`/v2`).

Responsibilities:
- Read the project auth config.
- Patch it, honoring the update mask.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from sidkik_firebase.emulator.deps import require_bearer, store_dep
from sidkik_firebase.emulator.errors import invalid_argument
from sidkik_firebase.emulator.store import InMemoryRulesStore

router = APIRouter(prefix="/v2", tags=["identity-platform"], dependencies=[Depends(require_bearer)])

SUPPORTED_MASK_PATHS = frozenset({"signIn.email", "authorizedDomains"})


@router.get("/projects/{project}/config")
async def get_config(
    project: str,
    store: InMemoryRulesStore = Depends(store_dep),
) -> dict[str, Any]:
    return store.get_auth_config(project)


@router.patch("/projects/{project}/config")
async def patch_config(
    project: str,
    body: dict[str, Any] = Body(...),
    update_mask: str = Query(alias="updateMask"),
    store: InMemoryRulesStore = Depends(store_dep),
) -> dict[str, Any]:
    paths = [p.strip() for p in update_mask.split(",") if p.strip()]
    unsupported = sorted(set(paths) - SUPPORTED_MASK_PATHS)
    if not paths or unsupported:
        raise invalid_argument(f"Unsupported update mask paths: {unsupported or update_mask!r}.")
    return store.patch_auth_config(project, body, paths)
