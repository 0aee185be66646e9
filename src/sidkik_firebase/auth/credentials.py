"""
sidkik_firebase.auth.credentials

Credential resolution with a fixed fallback order.

Responsibilities:
- Turn configured secrets (access token, JSON key material, impersonation target)
  plus environment defaults into google-auth credentials.
- Express the fallback order as an ordered list of strategies; the first strategy
  that applies wins.
- Honor `initial_credentials_only` so callers can obtain the pre-impersonation
  identity even when impersonation is configured.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

import google.auth
import google.oauth2.credentials
from google.auth import impersonated_credentials
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError, GoogleAuthError
from google.oauth2 import service_account

from sidkik_firebase.auth.models import ImpersonationRequest, ResolvedCredentials
from sidkik_firebase.errors import CredentialError
from sidkik_firebase.observability.logging import get_logger
from sidkik_firebase.settings import Settings

log = get_logger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

ADC_HINT = (
    "Attempted to load application default credentials since neither `credentials` "
    "nor `access_token` was set. No credentials loaded. To use your gcloud "
    "credentials, run 'gcloud auth application-default login'."
)


def path_or_contents(value: str, *, what: str) -> tuple[str, bool]:
    """
    Return `(contents, was_path)`.

    A value naming an existing file is read from disk; anything else (including a
    path that does not exist) is returned verbatim as inline content.
    """
    try:
        path = Path(value).expanduser()
        is_file = path.is_file()
    except (OSError, ValueError):
        # Inline JSON is routinely too long or odd to be a valid path.
        return value, False
    if not is_file:
        return value, False
    try:
        return path.read_text(encoding="utf-8"), True
    except OSError as e:
        raise CredentialError(f"error loading {what} from {value}: {e}") from e


def credentials_from_info(
    info: dict[str, Any],
    *,
    scopes: Sequence[str],
) -> tuple[Credentials, str | None]:
    """Build credentials from a parsed key file; returns `(credentials, project_id)`."""
    kind = info.get("type")
    if kind == "service_account":
        creds = service_account.Credentials.from_service_account_info(info, scopes=list(scopes))
        return creds, info.get("project_id")
    if kind == "authorized_user":
        return (
            google.oauth2.credentials.Credentials.from_authorized_user_info(info, scopes=list(scopes)),
            None,
        )
    raise ValueError(f"unsupported credential type {kind!r}, expected service_account or authorized_user")


def impersonate(
    source: Credentials,
    request: ImpersonationRequest,
    *,
    strategy: str,
) -> ResolvedCredentials:
    creds = impersonated_credentials.Credentials(
        source_credentials=source,
        target_principal=request.target_service_account,
        target_scopes=list(request.scopes),
        delegates=list(request.delegates) or None,
    )
    log.info(
        "credentials_resolved",
        method=strategy,
        impersonate=request.target_service_account,
        delegates=list(request.delegates),
        scopes=list(request.scopes),
    )
    return ResolvedCredentials(
        credentials=creds,
        source=strategy,
        impersonated=True,
        scopes=request.scopes,
    )


class CredentialStrategy(Protocol):
    name: str

    def applies(self, settings: Settings, *, initial_credentials_only: bool) -> bool: ...

    def load(
        self,
        settings: Settings,
        *,
        scopes: Sequence[str],
        impersonation: ImpersonationRequest | None,
    ) -> ResolvedCredentials: ...


class AccessTokenStrategy:
    name = "access_token"

    def applies(self, settings: Settings, *, initial_credentials_only: bool) -> bool:
        return bool(settings.access_token)

    def load(
        self,
        settings: Settings,
        *,
        scopes: Sequence[str],
        impersonation: ImpersonationRequest | None,
    ) -> ResolvedCredentials:
        contents, _ = path_or_contents(settings.access_token or "", what="access token")
        static = google.oauth2.credentials.Credentials(token=contents.strip())
        if impersonation is not None:
            return impersonate(static, impersonation, strategy=self.name)

        log.info("credentials_resolved", method=self.name, scopes=list(scopes))
        return ResolvedCredentials(credentials=static, source=self.name, scopes=tuple(scopes))


class JsonCredentialsStrategy:
    name = "credentials"

    def applies(self, settings: Settings, *, initial_credentials_only: bool) -> bool:
        return bool(settings.credentials)

    def load(
        self,
        settings: Settings,
        *,
        scopes: Sequence[str],
        impersonation: ImpersonationRequest | None,
    ) -> ResolvedCredentials:
        contents, _ = path_or_contents(settings.credentials or "", what="credentials")
        try:
            info = json.loads(contents)
        except ValueError as e:
            raise CredentialError(
                f"unable to parse credentials from '{contents}': {e}", content=contents
            ) from e
        if not isinstance(info, dict):
            raise CredentialError(
                f"unable to parse credentials from '{contents}': expected a JSON object",
                content=contents,
            )

        # The source of an impersonation chain only needs IAM access.
        load_scopes = [CLOUD_PLATFORM_SCOPE] if impersonation is not None else list(scopes)
        try:
            creds, project_id = credentials_from_info(info, scopes=load_scopes)
        except (GoogleAuthError, ValueError) as e:
            raise CredentialError(
                f"unable to parse credentials from '{contents}': {e}", content=contents
            ) from e

        if impersonation is not None:
            return impersonate(creds, impersonation, strategy=self.name)

        log.info("credentials_resolved", method=self.name, scopes=list(scopes))
        return ResolvedCredentials(
            credentials=creds,
            source=self.name,
            project_id=project_id,
            scopes=tuple(scopes),
        )


class ImpersonationOnlyStrategy:
    name = "impersonation"

    def applies(self, settings: Settings, *, initial_credentials_only: bool) -> bool:
        return bool(settings.impersonate_service_account) and not initial_credentials_only

    def load(
        self,
        settings: Settings,
        *,
        scopes: Sequence[str],
        impersonation: ImpersonationRequest | None,
    ) -> ResolvedCredentials:
        if impersonation is None:
            raise CredentialError("impersonation requested without a target service account")
        try:
            source, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        except DefaultCredentialsError as e:
            raise CredentialError(f"{ADC_HINT} Original error: {e}") from e
        return impersonate(source, impersonation, strategy=self.name)


class ApplicationDefaultStrategy:
    name = "application_default"

    def applies(self, settings: Settings, *, initial_credentials_only: bool) -> bool:
        return True

    def load(
        self,
        settings: Settings,
        *,
        scopes: Sequence[str],
        impersonation: ImpersonationRequest | None,
    ) -> ResolvedCredentials:
        try:
            creds, project_id = google.auth.default(scopes=list(scopes))
        except DefaultCredentialsError as e:
            raise CredentialError(f"{ADC_HINT} Original error: {e}") from e

        log.info("credentials_resolved", method=self.name, scopes=list(scopes))
        return ResolvedCredentials(
            credentials=creds,
            source=self.name,
            project_id=project_id,
            scopes=tuple(scopes),
        )


DEFAULT_STRATEGIES: tuple[CredentialStrategy, ...] = (
    AccessTokenStrategy(),
    JsonCredentialsStrategy(),
    ImpersonationOnlyStrategy(),
    ApplicationDefaultStrategy(),
)


class CredentialResolver:
    """
    Resolution order, first match wins:
    1. access token (optionally re-derived through impersonation)
    2. JSON credentials, inline or by path (same impersonation override)
    3. impersonation of ambient default credentials
    4. ambient default credentials
    """

    def __init__(
        self,
        settings: Settings,
        *,
        strategies: Sequence[CredentialStrategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self._settings = settings
        self._strategies = tuple(strategies)

    @property
    def impersonating(self) -> bool:
        return bool(self._settings.impersonate_service_account)

    def impersonation_request(self, scopes: Sequence[str]) -> ImpersonationRequest | None:
        target = self._settings.impersonate_service_account
        if not target:
            return None
        return ImpersonationRequest(
            target_service_account=target,
            delegates=tuple(self._settings.impersonate_service_account_delegates),
            scopes=tuple(scopes),
        )

    def resolve(
        self,
        scopes: Sequence[str] | None = None,
        *,
        initial_credentials_only: bool = False,
    ) -> ResolvedCredentials:
        client_scopes = list(scopes) if scopes else self._settings.client_scopes
        impersonation = (
            None if initial_credentials_only else self.impersonation_request(client_scopes)
        )

        for strategy in self._strategies:
            if not strategy.applies(self._settings, initial_credentials_only=initial_credentials_only):
                continue
            try:
                return strategy.load(
                    self._settings,
                    scopes=client_scopes,
                    impersonation=impersonation,
                )
            except GoogleAuthError as e:
                raise CredentialError(f"{strategy.name}: {e}") from e

        raise CredentialError("no credential source is configured or discoverable")


# --- Module Notes -----------------------------------------------------------
# Strategies are plain objects so each rule of the fallback order can be tested on
# its own; `CredentialResolver` only owns the ordering.
