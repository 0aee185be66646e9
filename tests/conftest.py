"""
tests.conftest

Shared fixtures.

Responsibilities:
- Isolate every test from SIDKIK_* and Google environment variables.
- Provide an emulator app and a fully composed `Config` talking to it in-process.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio

from sidkik_firebase.emulator.app import create_app
from sidkik_firebase.emulator.settings import EmulatorSettings
from sidkik_firebase.emulator.store import InMemoryRulesStore
from sidkik_firebase.provider import Config
from sidkik_firebase.settings import (
    ACCESS_TOKEN_ENV_VARS,
    CREDENTIALS_ENV_VARS,
    Settings,
)
from sidkik_firebase.transport.retry import RetryPolicy

GOOGLE_ENV_VARS = (
    *CREDENTIALS_ENV_VARS,
    *ACCESS_TOKEN_ENV_VARS,
    "GOOGLE_IMPERSONATE_SERVICE_ACCOUNT",
    "GOOGLE_PROJECT",
    "GOOGLE_CLOUD_PROJECT",
    "GCLOUD_PROJECT",
    "CLOUDSDK_CORE_PROJECT",
    "GOOGLE_BILLING_PROJECT",
    "GOOGLE_REGION",
    "GCLOUD_REGION",
    "CLOUDSDK_COMPUTE_REGION",
    "GOOGLE_ZONE",
    "GCLOUD_ZONE",
    "CLOUDSDK_COMPUTE_ZONE",
    "CLOUDSDK_CORE_REQUEST_REASON",
    "USER_PROJECT_OVERRIDE",
)

PROJECT = "demo-project"
EMULATOR_IDENTITY = "deployer@example.com"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in GOOGLE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.upper().startswith("SIDKIK_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store() -> InMemoryRulesStore:
    return InMemoryRulesStore()


@pytest.fixture
def emulator(store: InMemoryRulesStore):
    return create_app(settings=EmulatorSettings(identity_email=EMULATOR_IDENTITY), store=store)


@pytest_asyncio.fixture
async def config(emulator) -> AsyncIterator[Config]:
    settings = Settings(access_token="test-token", project=PROJECT)
    cfg = await Config.load_and_validate(
        settings,
        transport_factory=lambda: httpx.ASGITransport(app=emulator),
        retry_policy=RetryPolicy(max_attempts=1),
    )
    try:
        yield cfg
    finally:
        await cfg.aclose()


@pytest.fixture
def log_events(caplog: pytest.LogCaptureFixture) -> Callable[[], list[dict]]:
    """Every record that reached the root logger, structlog events as their event dicts."""
    caplog.set_level(logging.DEBUG)

    def collect() -> list[dict]:
        events = []
        for record in caplog.records:
            if isinstance(record.msg, dict):
                events.append(dict(record.msg))
            else:
                # Plain stdlib records (httpx, uvicorn) are reported by logger name.
                events.append({"event": record.getMessage(), "logger": record.name})
        return events

    return collect
