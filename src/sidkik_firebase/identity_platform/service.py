"""
sidkik_firebase.identity_platform.service

Auth config lifecycle.

Responsibilities:
- Read the flattened auth config state.
- Apply updates (create is an update; the config always exists).
- Treat delete as a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass

from sidkik_firebase.clients.identity_platform import IdentityPlatformClient
from sidkik_firebase.errors import NotFoundError
from sidkik_firebase.identity_platform.models import AuthConfig, AuthConfigPatch
from sidkik_firebase.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AuthConfigState:
    project: str
    name: str
    email_enabled: bool
    authorized_domains: tuple[str, ...]

    @classmethod
    def from_config(cls, project: str, config: AuthConfig) -> AuthConfigState:
        return cls(
            project=project,
            name=config.name,
            email_enabled=config.email_enabled,
            authorized_domains=tuple(config.authorized_domains),
        )


class AuthConfigService:
    def __init__(self, *, client: IdentityPlatformClient) -> None:
        self._client = client

    async def read(self, *, project: str) -> AuthConfigState | None:
        try:
            config = await self._client.get_config(project=project)
        except NotFoundError:
            log.warning("auth_config_not_found", project=project)
            return None
        log.debug("auth_config_read", project=project, name=config.name)
        return AuthConfigState.from_config(project, config)

    async def update(
        self,
        *,
        project: str,
        email_enabled: bool,
        authorized_domains: list[str],
    ) -> AuthConfigState | None:
        patch = AuthConfigPatch.build(email_enabled=email_enabled, authorized_domains=authorized_domains)
        await self._client.update_config(project=project, patch=patch)
        log.info("auth_config_updated", project=project, email_enabled=email_enabled)
        return await self.read(project=project)

    async def create(
        self,
        *,
        project: str,
        email_enabled: bool,
        authorized_domains: list[str],
    ) -> AuthConfigState | None:
        # Every project already has a config.
        return await self.update(
            project=project,
            email_enabled=email_enabled,
            authorized_domains=authorized_domains,
        )

    async def delete(self, *, project: str) -> None:
        log.info("auth_config_delete_skipped", project=project)


# --- Module Notes -----------------------------------------------------------
# Read-after-write keeps the returned state equal to what the server stored.
