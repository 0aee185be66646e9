"""
sidkik_firebase.observability.logging

Structured logging configuration for the client.

Responsibilities:
- Configure `structlog` for JSON (or console) logs.
- Carry logging choices in an explicit `LoggingConfig` that is threaded through
  initialization instead of being read from global state.
- Drop known-noisy transport messages regardless of verbosity.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

import structlog

from sidkik_firebase.settings import Settings

NOISY_MESSAGES: tuple[str, ...] = ("transport is closing",)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    service_name: str = "sidkik-firebase"
    level: str = "INFO"
    # Request/response logging in the transport chain.
    verbose: bool = False
    json: bool = True
    suppressed_messages: tuple[str, ...] = NOISY_MESSAGES

    @classmethod
    def from_settings(cls, settings: Settings) -> LoggingConfig:
        return cls(
            service_name=settings.service_name,
            level=settings.log_level,
            verbose=settings.verbose_http,
            json=settings.log_json,
        )


# Libraries that log each request on their own; `LoggingTransport` reports requests instead.
QUIET_LIBRARY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


class _StructuredHandler(logging.StreamHandler):
    """Marker type so a later `configure_logging` call can find and replace it."""


class SuppressMessagesFilter(logging.Filter):
    """
    Drops records whose message contains any of `needles`, whether they came
    from structlog or from a plain stdlib logger.
    """

    def __init__(self, needles: tuple[str, ...]) -> None:
        super().__init__()
        self.needles = needles

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, dict):
            message = str(record.msg.get("event", ""))
        else:
            message = record.getMessage()
        return not any(needle in message for needle in self.needles)


def configure_logging(cfg: LoggingConfig, *, stream: TextIO | None = None) -> None:
    """
    Structured logs for the client and its transport chain.

    Safe to call more than once: the previous handler is replaced and the root
    level is reset, so a later verbose session takes effect.
    """

    level_name = cfg.level.upper()
    # TRACE has no stdlib level; it only widens what the transport chain logs.
    if level_name == "TRACE":
        level_name = "DEBUG"
    level = getattr(logging, level_name, logging.INFO)
    if cfg.verbose:
        # Request/response pairs are emitted at DEBUG.
        level = min(level, logging.DEBUG)

    renderer: Any = (
        structlog.processors.JSONRenderer() if cfg.json else structlog.dev.ConsoleRenderer()
    )
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_name(cfg.service_name),
    ]

    handler = _StructuredHandler(stream or sys.stderr)
    handler.addFilter(SuppressMessagesFilter(cfg.suppressed_messages))
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # Records from httpx, uvicorn and friends get the same fields and renderer.
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _StructuredHandler)]:
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            drop_messages_containing(cfg.suppressed_messages),
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers must pick up a reconfiguration.
        cache_logger_on_first_use=False,
    )


def drop_messages_containing(
    needles: tuple[str, ...],
) -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event = str(event_dict.get("event", ""))
        if any(needle in event for needle in needles):
            raise structlog.DropEvent
        return event_dict

    return processor


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# structlog events are dropped early by `drop_messages_containing`; foreign stdlib
# records are dropped by `SuppressMessagesFilter` on the shared handler.
