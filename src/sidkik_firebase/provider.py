"""
sidkik_firebase.provider

Composition root for one client session.

Responsibilities:
- Resolve credentials, report identities, then build the final transport chain.
- Own the resolved credentials and the composed HTTP client for the session.
- Expose the rules and auth config services bound to that client.
"""

from __future__ import annotations

from types import TracebackType

import httpx

from sidkik_firebase.auth.credentials import CredentialResolver
from sidkik_firebase.auth.identity import IdentityReport, TransportFactory, report_identities
from sidkik_firebase.auth.models import ResolvedCredentials
from sidkik_firebase.clients.firebase_rules import FirebaseRulesClient
from sidkik_firebase.clients.identity_platform import IdentityPlatformClient
from sidkik_firebase.identity_platform.service import AuthConfigService
from sidkik_firebase.locks import KeyedLocks
from sidkik_firebase.observability.logging import LoggingConfig, configure_logging, get_logger
from sidkik_firebase.rules.service import RuleDeploymentService
from sidkik_firebase.settings import Settings, get_settings
from sidkik_firebase.transport.chain import HeaderConfig, build_client, user_agent
from sidkik_firebase.transport.retry import RetryPolicy

log = get_logger(__name__)


class Config:
    """
    Built once via `load_and_validate`; read-only afterwards, so concurrent
    operations can share it.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        logging_config: LoggingConfig,
        http: httpx.AsyncClient,
        identity: IdentityReport,
        locks: KeyedLocks | None = None,
    ) -> None:
        self.settings = settings
        self.logging_config = logging_config
        self.identity = identity
        self._http = http

        self.rules = RuleDeploymentService(
            client=FirebaseRulesClient(http=http, base_path=settings.firebase_rules_custom_endpoint),
            locks=locks or KeyedLocks(),
        )
        self.auth_config = AuthConfigService(
            client=IdentityPlatformClient(
                http=http, base_path=settings.identity_platform_custom_endpoint
            )
        )

    @property
    def credentials(self) -> ResolvedCredentials:
        return self.identity.credentials

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    @classmethod
    async def load_and_validate(
        cls,
        settings: Settings | None = None,
        *,
        logging_config: LoggingConfig | None = None,
        transport_factory: TransportFactory | None = None,
        retry_policy: RetryPolicy | None = None,
        resolver: CredentialResolver | None = None,
    ) -> Config:
        settings = settings or get_settings()
        logging_config = logging_config or LoggingConfig.from_settings(settings)
        configure_logging(logging_config)

        factory = transport_factory or httpx.AsyncHTTPTransport
        resolver = resolver or CredentialResolver(settings)
        scopes = settings.client_scopes

        # Resolution errors propagate from here and abort initialization. Identities
        # are looked up before request logging exists to keep the bootstrap call out
        # of the request logs.
        identity = await report_identities(
            resolver,
            scopes=scopes,
            userinfo_url=settings.userinfo_url,
            transport_factory=factory,
        )

        http = build_client(
            identity.credentials.credentials,
            logging_config=logging_config,
            header_config=HeaderConfig.from_settings(settings),
            timeout=settings.request_timeout,
            base_transport=factory(),
            retry_policy=retry_policy,
            ua=user_agent(settings.user_agent_extension),
        )
        log.info(
            "client_configured",
            credentials=identity.credentials.source,
            impersonated=identity.credentials.impersonated,
            request_timeout_s=settings.request_timeout,
        )
        return cls(settings=settings, logging_config=logging_config, http=http, identity=identity)

    def project_or_default(self, project: str | None = None) -> str:
        resolved = project or self.settings.project or self.credentials.project_id
        if not resolved:
            raise ValueError("project: required field is not set")
        return resolved

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> Config:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


# --- Module Notes -----------------------------------------------------------
# Request batching for bulk admin APIs is a separate collaborator and is not wired
# here; every call in this package is issued directly.
