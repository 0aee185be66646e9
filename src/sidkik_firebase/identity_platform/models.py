"""
sidkik_firebase.identity_platform.models

Typed payloads for the Identity Platform project config.

Responsibilities:
- Model the subset of `projects/{project}/config` this client manages.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IdentityModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EmailSignInConfig(IdentityModel):
    enabled: bool = False
    password_required: bool | None = Field(default=None, alias="passwordRequired")


class SignInConfig(IdentityModel):
    email: EmailSignInConfig | None = None


class AuthConfig(IdentityModel):
    name: str
    sign_in: SignInConfig | None = Field(default=None, alias="signIn")
    authorized_domains: list[str] = Field(default_factory=list, alias="authorizedDomains")

    @property
    def email_enabled(self) -> bool:
        # A config without email sign-in is valid and simply means "disabled".
        if self.sign_in is None or self.sign_in.email is None:
            return False
        return self.sign_in.email.enabled


class AuthConfigPatch(IdentityModel):
    sign_in: SignInConfig = Field(alias="signIn")
    authorized_domains: list[str] = Field(default_factory=list, alias="authorizedDomains")

    @classmethod
    def build(cls, *, email_enabled: bool, authorized_domains: list[str]) -> AuthConfigPatch:
        # Email sign-in here is always password based.
        return cls(
            sign_in=SignInConfig(
                email=EmailSignInConfig(enabled=email_enabled, password_required=email_enabled)
            ),
            authorized_domains=list(authorized_domains),
        )
