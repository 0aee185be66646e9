"""
sidkik_firebase.emulator.settings

Emulator configuration (Pydantic Settings).

Responsibilities:
- Bind address, log level and the identity reported by the userinfo endpoint.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EmulatorSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SIDKIK_EMULATOR_", case_sensitive=False)

    service_name: str = "sidkik-firebase-emulator"
    log_level: str = "INFO"
    log_json: bool = True

    host: str = "127.0.0.1"
    port: int = 8085

    # Reported by /v1/userinfo for every bearer token.
    identity_email: str = "developer@example.com"
    # New projects start with default Firestore and Storage rules, as real ones do.
    seed_default_rules: bool = True
