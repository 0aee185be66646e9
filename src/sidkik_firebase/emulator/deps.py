"""
sidkik_firebase.emulator.deps

FastAPI dependency wiring for the emulator.

Responsibilities:
- Require a bearer token on every API route.
- Encapsulate app.state access (store, settings).
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sidkik_firebase.emulator.errors import EmulatorError
from sidkik_firebase.emulator.settings import EmulatorSettings
from sidkik_firebase.emulator.store import InMemoryRulesStore

_bearer = HTTPBearer(auto_error=False)


def require_bearer(creds: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> str:
    # Any token is accepted; only its presence is checked.
    if creds is None or not creds.credentials:
        raise EmulatorError(401, "UNAUTHENTICATED", "Request is missing required authentication credential.")
    return creds.credentials


def store_dep(request: Request) -> InMemoryRulesStore:
    return request.app.state.store  # type: ignore[no-any-return]


def settings_dep(request: Request) -> EmulatorSettings:
    return request.app.state.settings  # type: ignore[no-any-return]
