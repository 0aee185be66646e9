"""
sidkik_firebase.auth.identity

Startup identity reporting.

Responsibilities:
- Look up the email of the identity behind the configured credentials.
- When impersonating, report both the original and the impersonated identity and
  hand back the impersonated credentials for the real client.
- Never fail initialization because the lookup itself failed.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import httpx
from google.auth.exceptions import GoogleAuthError

from sidkik_firebase.auth.credentials import CredentialResolver
from sidkik_firebase.auth.models import ResolvedCredentials
from sidkik_firebase.observability.logging import get_logger
from sidkik_firebase.transport.layers import AuthorizedTransport

log = get_logger(__name__)

TransportFactory = Callable[[], httpx.AsyncBaseTransport]


@dataclass(frozen=True, slots=True)
class IdentityReport:
    original_email: str | None
    impersonated_email: str | None
    # Credentials the final client must use.
    credentials: ResolvedCredentials


async def fetch_identity_email(
    resolved: ResolvedCredentials,
    *,
    userinfo_url: str,
    transport: httpx.AsyncBaseTransport,
) -> str:
    # Short-lived client: auth layer only, so this call never shows up in request logs.
    async with httpx.AsyncClient(transport=AuthorizedTransport(transport, resolved.credentials)) as client:
        r = await client.get(userinfo_url)
        r.raise_for_status()
        payload = r.json()
    if not isinstance(payload, dict):
        raise ValueError(f"userinfo response is {type(payload).__name__}, expected an object")
    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise ValueError("userinfo response has no email")
    return email


async def _lookup(
    resolved: ResolvedCredentials,
    *,
    userinfo_url: str,
    transport_factory: TransportFactory,
) -> str | None:
    try:
        return await fetch_identity_email(
            resolved, userinfo_url=userinfo_url, transport=transport_factory()
        )
    except (httpx.HTTPError, GoogleAuthError, ValueError) as e:
        log.warning(
            "identity_lookup_failed",
            hint="is the 'https://www.googleapis.com/auth/userinfo.email' scope enabled?",
            error=str(e),
        )
        return None


async def report_identities(
    resolver: CredentialResolver,
    *,
    scopes: Sequence[str],
    userinfo_url: str,
    transport_factory: TransportFactory,
) -> IdentityReport:
    """
    Credential resolution errors propagate; identity lookup errors are only logged.
    """

    original = resolver.resolve(scopes, initial_credentials_only=True)
    email = await _lookup(original, userinfo_url=userinfo_url, transport_factory=transport_factory)

    request = resolver.impersonation_request(scopes)
    if request is None:
        log.info("using_identity", identity=email)
        return IdentityReport(original_email=email, impersonated_email=None, credentials=original)

    log.info(
        "using_impersonated_identity",
        original_identity=email,
        impersonated_identity=request.target_service_account,
    )
    # Put impersonation back for the operational credentials.
    operational = resolver.resolve(scopes, initial_credentials_only=False)
    return IdentityReport(
        original_email=email,
        impersonated_email=request.target_service_account,
        credentials=operational,
    )


# --- Module Notes -----------------------------------------------------------
# `Config.load_and_validate` runs this before the logging transport is installed.
