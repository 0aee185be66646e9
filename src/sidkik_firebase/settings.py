"""
sidkik_firebase.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the credential, transport and
  rules layers.
- Fall back to the well-known Google environment variables when a value is not
  configured explicitly (first non-empty variable wins).
- Hide secrets (credentials, access token) from repr/logging.
- Offer a cached settings instance for composition roots.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FIREBASE_RULES_BASE_PATH = "https://firebaserules.googleapis.com/v1/"
DEFAULT_IDENTITY_PLATFORM_BASE_PATH = "https://identitytoolkit.googleapis.com/v2/"
DEFAULT_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

DEFAULT_CLIENT_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/userinfo.email",
)

DEFAULT_REQUEST_TIMEOUT_SECONDS = 120.0

CREDENTIALS_ENV_VARS = ("GOOGLE_CREDENTIALS", "GOOGLE_CLOUD_KEYFILE_JSON", "GCLOUD_KEYFILE_JSON")
ACCESS_TOKEN_ENV_VARS = ("GOOGLE_OAUTH_ACCESS_TOKEN",)

# Field name -> recognized environment variables, in lookup order.
_ENV_DEFAULTS: dict[str, tuple[str, ...]] = {
    "impersonate_service_account": ("GOOGLE_IMPERSONATE_SERVICE_ACCOUNT",),
    "project": ("GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT", "CLOUDSDK_CORE_PROJECT"),
    "billing_project": ("GOOGLE_BILLING_PROJECT",),
    "region": ("GOOGLE_REGION", "GCLOUD_REGION", "CLOUDSDK_COMPUTE_REGION"),
    "zone": ("GOOGLE_ZONE", "GCLOUD_ZONE", "CLOUDSDK_COMPUTE_ZONE"),
    "request_reason": ("CLOUDSDK_CORE_REQUEST_REASON",),
}

_CUSTOM_ENDPOINT_RE = re.compile(r".*/[^/]+/$")
_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def multi_env_search(names: Iterable[str]) -> str | None:
    """Return the first non-empty environment variable among `names`."""
    for name in names:
        value = os.environ.get(name, "")
        if value:
            return value
    return None


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "t", "true", "y", "yes")


def region_from_self_link(value: str | None) -> str | None:
    # "projects/p/regions/us-central1" -> "us-central1"
    if value and "/" in value:
        return value.rstrip("/").rsplit("/", 1)[-1]
    return value


class Settings(BaseSettings):
    """
    Provider configuration:
    - Explicit values (constructor or SIDKIK_* variables) always win.
    - Google environment variables fill in whatever is left empty.
    - One settings object is handed to `Config.load_and_validate`.
    """

    model_config = SettingsConfigDict(env_prefix="SIDKIK_", case_sensitive=False)

    service_name: str = "sidkik-firebase"
    # DEBUG or TRACE turns on request/response logging in the transport chain.
    log_level: str = "INFO"
    log_json: bool = True

    # Credentials
    credentials: str | None = Field(default=None, repr=False)
    access_token: str | None = Field(default=None, repr=False)
    impersonate_service_account: str | None = None
    impersonate_service_account_delegates: list[str] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)

    # Project context
    project: str | None = None
    billing_project: str | None = None
    region: str | None = None
    zone: str | None = None
    user_project_override: bool = False

    # Transport
    request_reason: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    # Appended to the User-Agent header of every request.
    user_agent_extension: str | None = None

    # Endpoints
    firebase_rules_custom_endpoint: str = DEFAULT_FIREBASE_RULES_BASE_PATH
    identity_platform_custom_endpoint: str = DEFAULT_IDENTITY_PLATFORM_BASE_PATH
    userinfo_url: str = DEFAULT_USERINFO_URL

    @field_validator("firebase_rules_custom_endpoint", "identity_platform_custom_endpoint")
    @classmethod
    def validate_custom_endpoint(cls, value: str) -> str:
        if not _CUSTOM_ENDPOINT_RE.match(value):
            raise ValueError(f"{value!r} must end with a versioned path segment and '/'")
        return value

    @field_validator("request_timeout", mode="before")
    @classmethod
    def parse_request_timeout(cls, value: object) -> object:
        # Accept duration strings such as "90s" or "2m" alongside plain seconds.
        if isinstance(value, str):
            match = _DURATION_RE.match(value)
            if match is None:
                raise ValueError(f"invalid duration {value!r}")
            amount, unit = match.groups()
            return float(amount) * _DURATION_UNITS[unit or "s"]
        return value

    @field_validator("request_timeout")
    @classmethod
    def default_non_positive_timeout(cls, value: float) -> float:
        # Zero or negative means "not set".
        return value if value > 0 else DEFAULT_REQUEST_TIMEOUT_SECONDS

    @field_validator("region")
    @classmethod
    def normalize_region(cls, value: str | None) -> str | None:
        return region_from_self_link(value)

    @model_validator(mode="after")
    def apply_environment_defaults(self) -> Settings:
        if self.credentials and self.access_token:
            raise ValueError("'credentials' and 'access_token' are mutually exclusive")

        # Only consult the environment when neither credential was configured, so
        # configuration beats environment in all cases.
        if not self.credentials and not self.access_token:
            self.credentials = multi_env_search(CREDENTIALS_ENV_VARS)
            self.access_token = multi_env_search(ACCESS_TOKEN_ENV_VARS)

        for field_name, env_names in _ENV_DEFAULTS.items():
            if not getattr(self, field_name):
                value = multi_env_search(env_names)
                if value is not None:
                    setattr(self, field_name, value)
        self.region = region_from_self_link(self.region)

        if not self.user_project_override:
            raw = multi_env_search(("USER_PROJECT_OVERRIDE",))
            if raw is not None:
                self.user_project_override = _parse_bool(raw)
        return self

    @property
    def client_scopes(self) -> list[str]:
        return list(self.scopes) if self.scopes else list(DEFAULT_CLIENT_SCOPES)

    @property
    def verbose_http(self) -> bool:
        return self.log_level.upper() in ("DEBUG", "TRACE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-reading the environment for every consumer.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The environment variable lists mirror the gcloud / Google provider conventions so
# an existing shell setup keeps working without extra configuration.
