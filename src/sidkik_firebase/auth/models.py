"""
sidkik_firebase.auth.models

Auth domain models.

Responsibilities:
- Describe an impersonation request (target, delegate chain, scopes).
- Describe the outcome of one credential resolution call.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from google.auth.credentials import Credentials


@dataclass(frozen=True, slots=True)
class ImpersonationRequest:
    """
    Service account impersonation target.

    Each delegate must grant token-creator rights to the next identity in the chain,
    the last one to `target_service_account`.
    """

    target_service_account: str
    delegates: tuple[str, ...] = ()
    scopes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolvedCredentials:
    credentials: Credentials
    # Name of the strategy that produced these credentials.
    source: str
    impersonated: bool = False
    project_id: str | None = None
    scopes: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_static(self) -> bool:
        return self.source == "access_token" and not self.impersonated


# --- Module Notes -----------------------------------------------------------
# Resolved credentials are never mutated after resolution; google-auth refreshes the
# token in place but the identity behind it stays fixed.
