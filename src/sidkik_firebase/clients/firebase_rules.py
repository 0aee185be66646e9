"""
sidkik_firebase.clients.firebase_rules

HTTP client for the Firebase Rules API.

Responsibilities:
- Create rulesets, fetch rulesets, list the release history and repoint releases.
- Follow release-history pagination until exhausted.
"""

from __future__ import annotations

from typing import Any

import httpx

from sidkik_firebase.clients.http import decode, encode, send_request
from sidkik_firebase.rules.families import RuleFamily
from sidkik_firebase.rules.models import (
    ListReleasesResponse,
    Release,
    ReleaseRef,
    Ruleset,
    Source,
    SourceFile,
    UpdateReleaseRequest,
)


class FirebaseRulesClient:
    def __init__(self, *, http: httpx.AsyncClient, base_path: str) -> None:
        self._http = http
        self._base_path = base_path

    def _url(self, path: str) -> str:
        return f"{self._base_path}{path}"

    async def create_ruleset(self, *, project: str, family: RuleFamily, content: str) -> Ruleset:
        # One source file, named after the family.
        body = Ruleset(source=Source(files=[SourceFile(name=family.file_name, content=content)]))
        payload = await send_request(
            self._http,
            "POST",
            self._url(f"projects/{project}/rulesets"),
            json=encode(body),
        )
        return decode(Ruleset, payload)

    async def get_ruleset(self, name: str) -> Ruleset:
        payload = await send_request(self._http, "GET", self._url(name))
        return decode(Ruleset, payload)

    async def list_releases(self, *, project: str, page_size: int | None = None) -> list[Release]:
        releases: list[Release] = []
        params: dict[str, Any] = {}
        if page_size is not None:
            params["pageSize"] = page_size
        while True:
            payload = await send_request(
                self._http,
                "GET",
                self._url(f"projects/{project}/releases"),
                params=params or None,
            )
            page = decode(ListReleasesResponse, payload)
            releases.extend(page.releases)
            if not page.next_page_token:
                return releases
            params["pageToken"] = page.next_page_token

    async def patch_release(
        self,
        *,
        project: str,
        family: RuleFamily,
        ruleset_name: str,
    ) -> Release:
        release_name = family.release_name(project)
        body = UpdateReleaseRequest(release=ReleaseRef(name=release_name, ruleset_name=ruleset_name))
        payload = await send_request(
            self._http,
            "PATCH",
            self._url(release_name),
            json=encode(body),
            # Only the ruleset reference may change.
            params={"updateMask": body.update_mask},
        )
        return decode(Release, payload)


# --- Module Notes -----------------------------------------------------------
# Ruleset names returned by the API are full resource names
# ("projects/{p}/rulesets/{id}") and are appended to the base path as-is.
