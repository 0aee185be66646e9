"""
sidkik_firebase.observability

Observability package.

Responsibilities:
- Structured logging setup (structlog).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Logging configuration is passed explicitly as a `LoggingConfig` object.
