"""
sidkik_firebase.emulator.routers.rules

Firebase Rules API surface (`/v1`).

Responsibilities:
- Create and fetch rulesets.
- List the release history (paged) and repoint releases.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from sidkik_firebase.emulator.deps import require_bearer, store_dep
from sidkik_firebase.emulator.errors import invalid_argument
from sidkik_firebase.emulator.store import InMemoryRulesStore
from sidkik_firebase.rules.models import Ruleset, UpdateReleaseRequest

router = APIRouter(prefix="/v1", tags=["rules"], dependencies=[Depends(require_bearer)])


@router.post("/projects/{project}/rulesets")
async def create_ruleset(
    project: str,
    body: Ruleset,
    store: InMemoryRulesStore = Depends(store_dep),
) -> dict[str, Any]:
    # Any client-supplied name is ignored; the server assigns it.
    files = [f.model_dump(by_alias=True, exclude_none=True) for f in body.source.files]
    return store.create_ruleset(project, files)


@router.get("/projects/{project}/rulesets/{ruleset_id}")
async def get_ruleset(
    project: str,
    ruleset_id: str,
    store: InMemoryRulesStore = Depends(store_dep),
) -> dict[str, Any]:
    return store.get_ruleset(project, ruleset_id)


@router.get("/projects/{project}/releases")
async def list_releases(
    project: str,
    page_size: int | None = Query(default=None, alias="pageSize", ge=1),
    page_token: str | None = Query(default=None, alias="pageToken"),
    store: InMemoryRulesStore = Depends(store_dep),
) -> dict[str, Any]:
    return store.list_releases(project, page_size=page_size, page_token=page_token)


@router.patch("/projects/{project}/releases/{release_id:path}")
async def patch_release(
    project: str,
    release_id: str,
    body: UpdateReleaseRequest,
    update_mask: str | None = Query(default=None, alias="updateMask"),
    store: InMemoryRulesStore = Depends(store_dep),
) -> dict[str, Any]:
    name = f"projects/{project}/releases/{release_id}"
    if body.release.name != name:
        raise invalid_argument(f"Release name {body.release.name} does not match {name}.")
    mask = update_mask or body.update_mask
    if mask != "rulesetName":
        raise invalid_argument(f"Unsupported update mask {mask!r}; only 'rulesetName' may change.")
    return store.patch_release(project, name, body.release.ruleset_name)
