"""
sidkik_firebase.clients.identity_platform

HTTP client for the Identity Platform project config.

Responsibilities:
- Read and patch `projects/{project}/config`.
"""

from __future__ import annotations

import httpx

from sidkik_firebase.clients.http import decode, encode, send_request
from sidkik_firebase.identity_platform.models import AuthConfig, AuthConfigPatch

UPDATE_MASK = "signIn.email,authorizedDomains"


class IdentityPlatformClient:
    def __init__(self, *, http: httpx.AsyncClient, base_path: str) -> None:
        self._http = http
        self._base_path = base_path

    async def get_config(self, *, project: str) -> AuthConfig:
        payload = await send_request(self._http, "GET", f"{self._base_path}projects/{project}/config")
        return decode(AuthConfig, payload)

    async def update_config(self, *, project: str, patch: AuthConfigPatch) -> AuthConfig:
        payload = await send_request(
            self._http,
            "PATCH",
            f"{self._base_path}projects/{project}/config",
            json=encode(patch),
            params={"updateMask": UPDATE_MASK},
        )
        return decode(AuthConfig, payload)


# --- Module Notes -----------------------------------------------------------
# The update mask is fixed: this client only manages email sign-in and the
# authorized domain list.
