"""
sidkik_firebase.transport.google_request

google-auth transport adapter backed by httpx.

Responsibilities:
- Let google-auth refresh tokens (OAuth, IAM credentials) over an httpx client so
  the whole stack shares one HTTP library.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import google.auth.exceptions
import google.auth.transport
import httpx


class _Response(google.auth.transport.Response):
    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return dict(self._response.headers)

    @property
    def data(self) -> bytes:
        return self._response.content


class HttpxAuthRequest(google.auth.transport.Request):
    """Synchronous request callable handed to `Credentials.refresh`."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client()

    def __call__(
        self,
        url: str,
        method: str = "GET",
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> google.auth.transport.Response:
        try:
            response = self._client.request(
                method,
                url,
                content=body,
                headers=headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.HTTPError as e:
            raise google.auth.exceptions.TransportError(e) from e
        return _Response(response)

    def close(self) -> None:
        self._client.close()


# --- Module Notes -----------------------------------------------------------
# Refreshes are blocking calls; `layers.AuthorizedTransport` runs them in a worker
# thread so the event loop keeps serving other requests.
