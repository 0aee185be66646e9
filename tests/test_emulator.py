"""
tests.test_emulator

Emulator routes: wire shapes, validation and Google-style errors.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from sidkik_firebase.emulator.app import create_app
from sidkik_firebase.emulator.settings import EmulatorSettings
from sidkik_firebase.emulator.store import InMemoryRulesStore

PROJECT = "demo-project"
AUTH = {"Authorization": "Bearer any-token"}


@pytest_asyncio.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(
        settings=EmulatorSettings(),
        store=InMemoryRulesStore(seed_default_rules=False),
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test", headers=AUTH) as c:
        yield c


async def _create(client: httpx.AsyncClient, content: str = "rules") -> dict:
    r = await client.post(
        f"/v1/projects/{PROJECT}/rulesets",
        json={"source": {"files": [{"name": "firestore.rules", "content": content}]}},
    )
    assert r.status_code == 200
    return r.json()


@pytest.mark.asyncio
async def test_unseeded_project_has_no_releases(client: httpx.AsyncClient) -> None:
    r = await client.get(f"/v1/projects/{PROJECT}/releases")
    assert r.json() == {"releases": []}


@pytest.mark.asyncio
async def test_ruleset_name_is_server_assigned(client: httpx.AsyncClient) -> None:
    r = await client.post(
        f"/v1/projects/{PROJECT}/rulesets",
        json={
            "name": "projects/demo-project/rulesets/mine",
            "source": {"files": [{"name": "firestore.rules", "content": "x"}]},
        },
    )
    body = r.json()
    assert body["name"] != "projects/demo-project/rulesets/mine"
    assert body["name"].startswith(f"projects/{PROJECT}/rulesets/")
    assert body["createTime"].endswith("Z")

    ruleset_id = body["name"].rsplit("/", 1)[-1]
    fetched = await client.get(f"/v1/projects/{PROJECT}/rulesets/{ruleset_id}")
    assert fetched.json() == body


@pytest.mark.asyncio
async def test_empty_source_is_invalid(client: httpx.AsyncClient) -> None:
    r = await client.post(f"/v1/projects/{PROJECT}/rulesets", json={"source": {"files": []}})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_missing_ruleset_is_google_not_found(client: httpx.AsyncClient) -> None:
    r = await client.get(f"/v1/projects/{PROJECT}/rulesets/nope")

    assert r.status_code == 404
    assert r.json()["error"] == {
        "code": 404,
        "message": f"Ruleset projects/{PROJECT}/rulesets/nope not found.",
        "status": "NOT_FOUND",
    }


@pytest.mark.asyncio
async def test_patching_unknown_release_is_not_found(client: httpx.AsyncClient) -> None:
    ruleset = await _create(client)
    name = f"projects/{PROJECT}/releases/cloud.firestore"

    r = await client.patch(
        f"/v1/{name}",
        params={"updateMask": "rulesetName"},
        json={"release": {"name": name, "rulesetName": ruleset["name"]}},
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_patch_rejects_mismatched_name_and_mask(client: httpx.AsyncClient) -> None:
    name = f"projects/{PROJECT}/releases/cloud.firestore"

    r = await client.patch(
        f"/v1/{name}",
        json={"release": {"name": "projects/other/releases/cloud.firestore", "rulesetName": "x"}},
    )
    assert r.status_code == 400
    assert r.json()["error"]["status"] == "INVALID_ARGUMENT"

    r = await client.patch(
        f"/v1/{name}",
        params={"updateMask": "name"},
        json={"release": {"name": name, "rulesetName": "x"}},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_storage_release_path_with_bucket() -> None:
    store = InMemoryRulesStore()
    app = create_app(settings=EmulatorSettings(), store=store)
    name = f"projects/{PROJECT}/releases/firebase.storage/{PROJECT}.appspot.com"

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test", headers=AUTH
    ) as client:
        ruleset = await _create(client, "storage v2")
        r = await client.patch(
            f"/v1/{name}",
            params={"updateMask": "rulesetName"},
            json={"release": {"name": name, "rulesetName": ruleset["name"]}},
        )

    assert r.status_code == 200
    assert r.json()["rulesetName"] == ruleset["name"]
    assert r.json()["updateTime"] >= r.json()["createTime"]


@pytest.mark.asyncio
async def test_invalid_page_token(client: httpx.AsyncClient) -> None:
    r = await client.get(f"/v1/projects/{PROJECT}/releases", params={"pageToken": "abc"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_auth_config_patch_honors_mask(client: httpx.AsyncClient) -> None:
    r = await client.patch(
        f"/v2/projects/{PROJECT}/config",
        params={"updateMask": "signIn.email"},
        json={"signIn": {"email": {"enabled": True}}, "authorizedDomains": ["ignored.dev"]},
    )
    body = r.json()

    assert body["signIn"]["email"] == {"enabled": True}
    # Not in the mask, so untouched.
    assert "ignored.dev" not in body["authorizedDomains"]
    # Siblings of the masked path survive.
    assert body["signIn"]["allowDuplicateEmails"] is False


@pytest.mark.asyncio
async def test_auth_config_rejects_unknown_mask(client: httpx.AsyncClient) -> None:
    r = await client.patch(
        f"/v2/projects/{PROJECT}/config",
        params={"updateMask": "mfa"},
        json={"mfa": {"state": "ENABLED"}},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_userinfo_reports_configured_identity(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/userinfo")
    assert r.json()["email"] == "developer@example.com"

    r = await client.get("/v1/userinfo", headers={"Authorization": ""})
    assert r.status_code == 401
