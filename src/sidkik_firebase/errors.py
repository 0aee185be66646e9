"""
sidkik_firebase.errors

Exception taxonomy shared by every layer of the client.

Responsibilities:
- Give each failure class a distinct type so callers can branch on it.
- Carry the diagnostic context operators need (offending content, phase,
  orphaned ruleset name).
"""

from __future__ import annotations

from typing import Literal

DeployPhase = Literal["create", "release"]


class SidkikError(Exception):
    """Base class for all client errors."""


class CredentialError(SidkikError):
    """Credentials are missing, unreadable or malformed."""

    def __init__(self, message: str, *, content: str | None = None) -> None:
        super().__init__(message)
        self.content = content


class TransportError(SidkikError):
    """Network-level failure that survived the retry layer."""

    def __init__(self, message: str, *, transient: bool) -> None:
        super().__init__(message)
        self.transient = transient


class ApiError(SidkikError):
    """The backing API answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int, status: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status = status


class NotFoundError(ApiError):
    """The backing resource does not exist (HTTP 404)."""


class ResponseShapeError(SidkikError):
    """A response body did not match the expected schema."""


class DeploymentError(SidkikError):
    """
    A rule deployment failed.

    `phase` tells whether the failure happened while creating the ruleset or while
    repointing the release. When it is "release", `ruleset_name` names the ruleset
    that was created but never released.
    """

    def __init__(
        self,
        message: str,
        *,
        phase: DeployPhase,
        ruleset_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.phase = phase
        self.ruleset_name = ruleset_name


# --- Module Notes -----------------------------------------------------------
# An empty rule family is a valid state for a fresh project; lookups that find no
# matching release return None instead of raising.
