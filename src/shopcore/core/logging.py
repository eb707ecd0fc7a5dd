"""Structured logging for ShopCore.

structlog renders every event either as one JSON object per line
(production) or as coloured console output (development, or
``SHOPCORE_LOG_FORMAT=console``). Each request binds a correlation ID that
is attached to every event logged while it runs. Credential material that
ends up in an event under a known key is masked before rendering.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from shopcore.core.config import Settings, get_settings

REDACTED = "[redacted]"

# Event keys whose values are credentials and must never be rendered
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "old_password",
        "new_password",
        "password_hash",
        "token",
        "api_key",
        "key_hash",
        "authorization",
        "secret",
        "signature",
    }
)


def new_correlation_id() -> str:
    """Generate a short correlation ID."""
    return f"cid_{uuid.uuid4().hex[:12]}"


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Give events logged outside a request their own correlation ID."""
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = new_correlation_id()
    return event_dict


def redact_credentials(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask the values of credential keys."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Emit the event text as ``message``."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _render_processors(settings: Settings) -> list[Processor]:
    if settings.is_development or settings.log_format == "console":
        return [
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib loggers used by uvicorn.

    Args:
        settings: Settings to read the level and format from. Loaded from
            the environment when omitted.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_correlation_id,
        redact_credentials,
        rename_message_field,
        *_render_processors(settings),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=settings.is_production,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a module name."""
    return structlog.get_logger(name or "shopcore")


def bind_correlation_id(correlation_id: str) -> None:
    """Attach a correlation ID to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Drop all bound context at the end of a request."""
    structlog.contextvars.clear_contextvars()
