"""
sidkik_firebase.emulator.app

FastAPI app factory for the emulator.

Responsibilities:
- Build the FastAPI application and register routers, middleware and the
  Google-style error handler.
- Attach the in-memory store and settings to app.state.
"""

from __future__ import annotations

from fastapi import FastAPI

from sidkik_firebase import __version__
from sidkik_firebase.emulator.errors import EmulatorError, emulator_error_handler
from sidkik_firebase.emulator.middleware import RequestContextMiddleware
from sidkik_firebase.emulator.routers.health import router as health_router
from sidkik_firebase.emulator.routers.identity_platform import router as identity_platform_router
from sidkik_firebase.emulator.routers.rules import router as rules_router
from sidkik_firebase.emulator.routers.userinfo import router as userinfo_router
from sidkik_firebase.emulator.settings import EmulatorSettings
from sidkik_firebase.emulator.store import InMemoryRulesStore
from sidkik_firebase.observability.logging import LoggingConfig, configure_logging, get_logger

log = get_logger(__name__)


def create_app(
    *,
    settings: EmulatorSettings | None = None,
    store: InMemoryRulesStore | None = None,
) -> FastAPI:
    settings = settings or EmulatorSettings()
    configure_logging(
        LoggingConfig(
            service_name=settings.service_name,
            level=settings.log_level,
            json=settings.log_json,
        )
    )

    app = FastAPI(
        title="Sidkik Firebase Emulator",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    # Created eagerly so transports that skip lifespan events still find it.
    app.state.settings = settings
    app.state.store = store or InMemoryRulesStore(seed_default_rules=settings.seed_default_rules)

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(EmulatorError, emulator_error_handler)
    app.include_router(health_router, tags=["health"])
    app.include_router(rules_router)
    app.include_router(identity_platform_router)
    app.include_router(userinfo_router)

    log.info("emulator_created", seed_default_rules=settings.seed_default_rules)
    return app


# --- Module Notes -----------------------------------------------------------
# Paths mirror the real APIs (`/v1` rules and userinfo, `/v2` identity platform), so
# one emulator origin can stand in for all three hosts.
