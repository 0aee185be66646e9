"""
sidkik_firebase.emulator.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide a liveness check (`/healthz`).
- Report how many projects the store has materialized (`/readyz`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sidkik_firebase.emulator.deps import store_dep
from sidkik_firebase.emulator.store import InMemoryRulesStore

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(store: InMemoryRulesStore = Depends(store_dep)) -> dict[str, object]:
    return {"status": "ready", "projects": store.project_count}
