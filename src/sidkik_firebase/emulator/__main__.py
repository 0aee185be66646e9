"""
sidkik_firebase.emulator.__main__

Entrypoint for `python -m sidkik_firebase.emulator` (also installed as
`sidkik-firebase-emulator`).

Responsibilities:
- Build the emulator from `SIDKIK_EMULATOR_*` settings.
- Serve it with uvicorn, leaving log output to structlog.
"""

from __future__ import annotations

import uvicorn

from sidkik_firebase.emulator.app import create_app
from sidkik_firebase.emulator.settings import EmulatorSettings
from sidkik_firebase.observability.logging import get_logger

log = get_logger(__name__)


def main() -> None:
    settings = EmulatorSettings()
    app = create_app(settings=settings)

    base = f"http://{settings.host}:{settings.port}"
    log.info(
        "emulator_starting",
        firebase_rules_endpoint=f"{base}/v1/",
        identity_platform_endpoint=f"{base}/v2/",
        userinfo_url=f"{base}/v1/userinfo",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Point a client at the emulator with SIDKIK_FIREBASE_RULES_CUSTOM_ENDPOINT,
# SIDKIK_IDENTITY_PLATFORM_CUSTOM_ENDPOINT and SIDKIK_USERINFO_URL set to the
# endpoints logged at startup.
