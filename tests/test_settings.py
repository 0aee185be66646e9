"""
tests.test_settings

Environment-derived defaults and validation of the settings model.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sidkik_firebase.settings import (
    DEFAULT_CLIENT_SCOPES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    Settings,
)


def test_first_non_empty_variable_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PROJECT", "")
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "from-cloud-project")
    monkeypatch.setenv("GCLOUD_PROJECT", "from-gcloud")

    assert Settings().project == "from-cloud-project"


def test_explicit_configuration_beats_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PROJECT", "from-env")
    monkeypatch.setenv("GOOGLE_OAUTH_ACCESS_TOKEN", "env-token")

    settings = Settings(project="explicit", credentials='{"type": "authorized_user"}')
    assert settings.project == "explicit"
    # An explicit credential suppresses the environment token.
    assert settings.access_token is None


def test_credentials_and_token_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_KEYFILE_JSON", "/keys/sa.json")
    monkeypatch.setenv("GOOGLE_OAUTH_ACCESS_TOKEN", "env-token")

    settings = Settings()
    assert settings.credentials == "/keys/sa.json"
    assert settings.access_token == "env-token"


def test_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIDKIK_ACCESS_TOKEN", "prefixed-token")
    monkeypatch.setenv("SIDKIK_REQUEST_TIMEOUT", "2m")

    settings = Settings()
    assert settings.access_token == "prefixed-token"
    assert settings.request_timeout == 120.0


def test_region_zone_billing_and_reason(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLOUDSDK_COMPUTE_REGION", "projects/p/regions/europe-west1")
    monkeypatch.setenv("GCLOUD_ZONE", "europe-west1-b")
    monkeypatch.setenv("GOOGLE_BILLING_PROJECT", "billing-p")
    monkeypatch.setenv("CLOUDSDK_CORE_REQUEST_REASON", "audit-7")
    monkeypatch.setenv("USER_PROJECT_OVERRIDE", "true")

    settings = Settings()
    assert settings.region == "europe-west1"
    assert settings.zone == "europe-west1-b"
    assert settings.billing_project == "billing-p"
    assert settings.request_reason == "audit-7"
    assert settings.user_project_override is True


def test_secrets_hidden_from_repr() -> None:
    assert "secret-token" not in repr(Settings(access_token="secret-token"))


@pytest.mark.parametrize(
    ("raw", "seconds"),
    [("30", 30.0), ("90s", 90.0), ("1.5m", 90.0), ("250ms", 0.25), ("1h", 3600.0)],
)
def test_request_timeout_durations(raw: str, seconds: float) -> None:
    assert Settings(request_timeout=raw).request_timeout == seconds


@pytest.mark.parametrize("raw", [0, "0s", -5])
def test_non_positive_timeout_falls_back_to_default(raw: object) -> None:
    assert Settings(request_timeout=raw).request_timeout == DEFAULT_REQUEST_TIMEOUT_SECONDS


def test_invalid_request_timeout() -> None:
    with pytest.raises(ValidationError):
        Settings(request_timeout="soon")


@pytest.mark.parametrize(
    "endpoint",
    ["https://firebaserules.googleapis.com/v1", "https://firebaserules.googleapis.com/v1//", "v1/"],
)
def test_custom_endpoint_must_end_with_versioned_segment(endpoint: str) -> None:
    with pytest.raises(ValidationError):
        Settings(firebase_rules_custom_endpoint=endpoint)


def test_custom_endpoint_accepted() -> None:
    settings = Settings(firebase_rules_custom_endpoint="http://localhost:8085/v1/")
    assert settings.firebase_rules_custom_endpoint == "http://localhost:8085/v1/"


def test_scopes_and_verbosity() -> None:
    assert Settings().client_scopes == list(DEFAULT_CLIENT_SCOPES)
    assert Settings(scopes=["only-this"]).client_scopes == ["only-this"]
    assert Settings(log_level="trace").verbose_http
    assert not Settings(log_level="INFO").verbose_http
