"""
sidkik_firebase.transport.retry

Retry policy for the transport chain.

Responsibilities:
- Classify failures as transient (worth retrying) or fatal.
- Compute bounded exponential backoff with jitter.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

import httpx

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

# Network resets and connection-level timeouts; a ReadTimeout is not retried because
# the server may already have applied a non-idempotent request.
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.PoolTimeout,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, RETRYABLE_EXCEPTIONS)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 5
    initial_backoff: float = 0.5
    max_backoff: float = 16.0
    multiplier: float = 2.0
    # Fraction of the computed delay added or removed at random.
    jitter: float = 0.2
    retryable_statuses: frozenset[int] = field(default=RETRYABLE_STATUS_CODES)

    def should_retry_status(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses

    def backoff(self, attempt: int, *, retry_after: float | None = None) -> float:
        """Delay before attempt `attempt + 1` (attempts are 1-based)."""
        if retry_after is not None:
            return min(max(retry_after, 0.0), self.max_backoff)
        delay = min(self.initial_backoff * self.multiplier ** (attempt - 1), self.max_backoff)
        if self.jitter:
            delay += delay * random.uniform(-self.jitter, self.jitter)
        return max(delay, 0.0)


def retry_after_seconds(response: httpx.Response) -> float | None:
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        # HTTP-date form is not worth parsing for a bounded backoff.
        return None


# --- Module Notes -----------------------------------------------------------
# The retry layer in `layers.RetryTransport` consumes this policy; the API request
# helper reuses `is_transient` to tag surfaced errors.
