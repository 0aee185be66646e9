"""
sidkik_firebase.transport.layers

The individual wrappers of the transport chain.

Responsibilities:
- `AuthorizedTransport`: attach bearer credentials derived from google-auth.
- `LoggingTransport`: record request/response pairs in verbose mode.
- `RetryTransport`: resend on transient failures with bounded backoff.
- `HeaderTransport`: inject static headers on every (re)sent request.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping

import httpx
from google.auth.credentials import Credentials

from sidkik_firebase.observability.logging import LoggingConfig, get_logger
from sidkik_firebase.transport.google_request import HttpxAuthRequest
from sidkik_firebase.transport.retry import RetryPolicy, is_transient, retry_after_seconds

log = get_logger(__name__)

REDACTED_HEADERS = frozenset({"authorization", "x-goog-iam-authorization-token", "cookie"})


class AuthorizedTransport(httpx.AsyncBaseTransport):
    """
    Innermost layer: every request leaves with a valid bearer token.
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        credentials: Credentials,
        *,
        auth_request: HttpxAuthRequest | None = None,
    ) -> None:
        self._inner = inner
        self._credentials = credentials
        self._auth_request = auth_request or HttpxAuthRequest()
        self._refresh_lock = asyncio.Lock()

    async def _ensure_valid(self) -> None:
        if self._credentials.valid:
            return
        async with self._refresh_lock:
            # Another request may have refreshed while we waited.
            if not self._credentials.valid:
                await asyncio.to_thread(self._credentials.refresh, self._auth_request)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await self._ensure_valid()
        self._credentials.apply(request.headers)
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        self._auth_request.close()
        await self._inner.aclose()


class LoggingTransport(httpx.AsyncBaseTransport):
    """
    Logs each request/response pair when `LoggingConfig.verbose` is set.
    Sits inside the retry layer so every retried attempt is logged.
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        *,
        logging_config: LoggingConfig,
        api_name: str = "Google",
    ) -> None:
        self._inner = inner
        self._cfg = logging_config
        self._api_name = api_name

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if not self._cfg.verbose:
            return await self._inner.handle_async_request(request)

        log.debug(
            "http_request",
            api=self._api_name,
            method=request.method,
            url=str(request.url),
            headers=redact_headers(request.headers),
            body=_request_body(request),
        )
        started = time.perf_counter()
        try:
            response = await self._inner.handle_async_request(request)
        except httpx.HTTPError as e:
            log.debug(
                "http_request_failed",
                api=self._api_name,
                method=request.method,
                url=str(request.url),
                error=repr(e),
            )
            raise
        log.debug(
            "http_response",
            api=self._api_name,
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            headers=redact_headers(response.headers),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    async def aclose(self) -> None:
        await self._inner.aclose()


class RetryTransport(httpx.AsyncBaseTransport):
    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        *,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._inner = inner
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 1
        while True:
            retry_after: float | None = None
            try:
                response = await self._inner.handle_async_request(request)
            except httpx.TransportError as e:
                if not is_transient(e) or attempt >= self._policy.max_attempts:
                    raise
                reason = repr(e)
            else:
                if (
                    not self._policy.should_retry_status(response.status_code)
                    or attempt >= self._policy.max_attempts
                ):
                    return response
                reason = f"HTTP {response.status_code}"
                retry_after = retry_after_seconds(response)
                await response.aclose()

            delay = self._policy.backoff(attempt, retry_after=retry_after)
            log.info(
                "retrying_request",
                method=request.method,
                url=str(request.url),
                attempt=attempt,
                max_attempts=self._policy.max_attempts,
                reason=reason,
                delay_s=round(delay, 3),
            )
            await self._sleep(delay)
            attempt += 1

    async def aclose(self) -> None:
        await self._inner.aclose()


class HeaderTransport(httpx.AsyncBaseTransport):
    """
    Outermost layer: headers set here also apply to every retried attempt.
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._inner = inner
        self._headers: dict[str, str] = dict(headers or {})

    def set(self, name: str, value: str) -> None:
        self._headers[name] = value

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        for name, value in self._headers.items():
            request.headers[name] = value
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        await self._inner.aclose()


def redact_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        name: ("<redacted>" if name.lower() in REDACTED_HEADERS else value)
        for name, value in headers.items()
    }


def _request_body(request: httpx.Request) -> str | None:
    try:
        content = request.content
    except httpx.RequestNotRead:
        return "<streaming>"
    if not content:
        return None
    return content.decode("utf-8", errors="replace")


# --- Module Notes -----------------------------------------------------------
# Each layer only delegates `aclose` inward; the base transport owns the pool.
