"""
sidkik_firebase.clients.http

Request helper shared by the API clients.

Responsibilities:
- Send one request through the composed client.
- Map transport failures, HTTP error statuses and malformed bodies onto the
  `sidkik_firebase.errors` taxonomy.
- Validate JSON bodies into typed models.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from google.auth.exceptions import GoogleAuthError
from pydantic import BaseModel, ValidationError

from sidkik_firebase.errors import (
    ApiError,
    CredentialError,
    NotFoundError,
    ResponseShapeError,
    TransportError,
)
from sidkik_firebase.transport.retry import is_transient

M = TypeVar("M", bound=BaseModel)


async def send_request(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    json: Any = None,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    try:
        r = await http.request(method, url, json=json, params=params)
    except httpx.TransportError as e:
        raise TransportError(f"{method} {url} failed: {e!r}", transient=is_transient(e)) from e
    except GoogleAuthError as e:
        raise CredentialError(f"unable to obtain an access token: {e}") from e

    if r.is_error:
        message, status = _error_details(r)
        text = f"{method} {url} returned {r.status_code}: {message}"
        if r.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(text, status_code=r.status_code, status=status)
        raise ApiError(text, status_code=r.status_code, status=status)

    if not r.content:
        return {}
    try:
        payload = r.json()
    except ValueError as e:
        raise ResponseShapeError(f"{method} {url} returned a non-JSON body") from e
    if not isinstance(payload, dict):
        raise ResponseShapeError(f"{method} {url} returned {type(payload).__name__}, expected an object")
    return payload


def decode(model: type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ResponseShapeError(f"unexpected {model.__name__} payload: {e}") from e


def encode(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


def _error_details(r: httpx.Response) -> tuple[str, str | None]:
    # Google APIs answer {"error": {"code": 404, "message": "...", "status": "NOT_FOUND"}}.
    try:
        body = r.json()
    except ValueError:
        return r.text or r.reason_phrase, None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or r.reason_phrase), error.get("status")
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"]), None
    return r.text or r.reason_phrase, None


# --- Module Notes -----------------------------------------------------------
# Retries already happened inside the transport chain by the time an error reaches
# this module.
