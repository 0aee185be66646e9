"""
sidkik_firebase.emulator.errors

Google-style API errors for the emulator.

Responsibilities:
- Raise errors with an HTTP status and a canonical status string.
- Render them as `{"error": {"code", "message", "status"}}` bodies.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import JSONResponse


@dataclass(frozen=True, slots=True)
class EmulatorError(Exception):
    code: int
    status: str
    message: str


def not_found(message: str) -> EmulatorError:
    return EmulatorError(404, "NOT_FOUND", message)


def invalid_argument(message: str) -> EmulatorError:
    return EmulatorError(400, "INVALID_ARGUMENT", message)


async def emulator_error_handler(_: Request, exc: EmulatorError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.code,
        content={"error": {"code": exc.code, "message": exc.message, "status": exc.status}},
    )
