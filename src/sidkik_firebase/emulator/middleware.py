"""
sidkik_firebase.emulator.middleware

Request-scoped logging context for the emulator.

Responsibilities:
- Generate/propagate request IDs.
- Bind request metadata, including the Google quota/reason headers a client sent,
  into structlog contextvars.
- Emit one access line per request with status and latency.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from sidkik_firebase.observability.logging import get_logger

log = get_logger(__name__)

# Request header -> log key.
TRACED_HEADERS = {
    "x-goog-request-reason": "request_reason",
    "x-goog-user-project": "user_project",
    "user-agent": "user_agent",
}


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        traced = {key: request.headers[h] for h, key in TRACED_HEADERS.items() if h in request.headers}

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path, **traced
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            log.info(
                "emulator_request",
                status_code=response.status_code,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# The access line is how header injection by the client chain is observed when the
# emulator runs as a separate process.
