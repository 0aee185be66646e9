"""
sidkik_firebase.transport.chain

Composition of the HTTP transport chain.

Responsibilities:
- Wrap a base transport in the fixed layer order:
  1. auth  2. logging  3. retry  4. header injection
- Apply the per-request timeout and User-Agent to the final client.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from google.auth.credentials import Credentials

from sidkik_firebase import __version__
from sidkik_firebase.observability.logging import LoggingConfig
from sidkik_firebase.settings import Settings
from sidkik_firebase.transport.google_request import HttpxAuthRequest
from sidkik_firebase.transport.layers import (
    AuthorizedTransport,
    HeaderTransport,
    LoggingTransport,
    RetryTransport,
)
from sidkik_firebase.transport.retry import RetryPolicy

REQUEST_REASON_HEADER = "X-Goog-Request-Reason"
USER_PROJECT_HEADER = "X-Goog-User-Project"


@dataclass(frozen=True, slots=True)
class HeaderConfig:
    request_reason: str | None = None
    user_project_override: bool = False
    billing_project: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> HeaderConfig:
        return cls(
            request_reason=settings.request_reason,
            user_project_override=settings.user_project_override,
            billing_project=settings.billing_project,
        )


def user_agent(extension: str | None = None) -> str:
    ua = f"sidkik-firebase/{__version__}"
    return f"{ua} {extension}" if extension else ua


def build_client(
    credentials: Credentials,
    *,
    logging_config: LoggingConfig,
    header_config: HeaderConfig,
    timeout: float,
    base_transport: httpx.AsyncBaseTransport | None = None,
    retry_policy: RetryPolicy | None = None,
    auth_request: HttpxAuthRequest | None = None,
    ua: str | None = None,
) -> httpx.AsyncClient:
    # 1. Auth transport - sets the bearer token on every outgoing attempt.
    transport: httpx.AsyncBaseTransport = AuthorizedTransport(
        base_transport or httpx.AsyncHTTPTransport(),
        credentials,
        auth_request=auth_request,
    )

    # 2. Logging transport - observes each attempt as it leaves the retry layer.
    transport = LoggingTransport(transport, logging_config=logging_config)

    # 3. Retry transport - retries common temporary errors.
    transport = RetryTransport(transport, policy=retry_policy)

    # 4. Header transport - outer wrapper so injected headers survive retries.
    headers = HeaderTransport(transport)
    if header_config.request_reason:
        headers.set(REQUEST_REASON_HEADER, header_config.request_reason)
    # Bill quota to the configured project only when explicitly requested.
    if header_config.user_project_override and header_config.billing_project:
        headers.set(USER_PROJECT_HEADER, header_config.billing_project)

    # Timeout per HTTP round trip, not per logical operation.
    return httpx.AsyncClient(
        transport=headers,
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": ua or user_agent()},
    )


# --- Module Notes -----------------------------------------------------------
# The client is treated as immutable once built; concurrent operations share it
# without extra locking.
