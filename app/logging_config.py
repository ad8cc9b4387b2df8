"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any
import structlog
from app.config import settings


# Libraries whose INFO output duplicates our own request logging
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx", "httpcore")


def add_service_context(logger, method_name, event_dict):
    event_dict.setdefault("service", "mytube-api")
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def configure_logging():
    """Configure structlog on top of stdlib logging.

    JSON lines in production, coloured console output when ``log_format``
    is ``text``. Chatty third-party loggers are held at WARNING unless the
    application itself runs at DEBUG.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format == "json":
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()

logger = structlog.get_logger()


SENSITIVE_KEYS = {
    "password",
    "password_hash",
    "token",
    "refreshtoken",
    "refresh_token",
    "access_token",
    "secret",
    "api_key",
    "authorization",
    "code",
}


def redact_sensitive_data(data: Any) -> Any:
    """Redact sensitive fields from data about to be logged.

    Args:
        data: Request body or any JSON-like structure

    Returns:
        Copy of the structure with sensitive values replaced
    """
    if isinstance(data, list):
        return [redact_sensitive_data(item) for item in data]
    if not isinstance(data, dict):
        return data

    redacted = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_KEYS:
            redacted[key] = "***REDACTED***"
        else:
            redacted[key] = redact_sensitive_data(value)

    return redacted
