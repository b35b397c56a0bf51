"""Structured logging configuration using structlog.

Engine and storage modules log snake_case events with keyword context,
e.g. ``logger.info("task_added", task_id=task.id, project_id=...)``.
Contact details of team members never reach the output: emails are
masked and phone numbers redacted before rendering.
"""

import logging
import re
import sys
from datetime import datetime
from functools import lru_cache
from typing import Any
from uuid import UUID

import structlog
from structlog.types import EventDict, Processor

from taskvantage.config import Settings, get_settings

EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+)")

REDACTED = "***REDACTED***"
SENSITIVE_KEYS = ("password", "token", "secret", "phone")


def mask_email(value: str) -> str:
    """Mask the local part of every email address in a string."""
    return EMAIL_PATTERN.sub(r"\1***\2", value)


def _redact(key: str, value: Any) -> Any:
    if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
        return REDACTED
    if isinstance(value, dict):
        return {k: _redact(k, v) for k, v in value.items()}
    if isinstance(value, str) and "@" in value:
        return mask_email(value)
    return value


def sanitize_for_logging(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact personal information from log events.

    Redacts:
    - Email addresses (local part masked)
    - Anything keyed as a phone number
    - Anything keyed as a password, token or secret
    """
    return {k: _redact(k, v) for k, v in event_dict.items()}


def render_identifiers(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Render entity ids and timestamps as plain strings."""
    for key, value in event_dict.items():
        if isinstance(value, UUID):
            event_dict[key] = str(value)
        elif isinstance(value, datetime):
            event_dict[key] = value.isoformat()
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        render_identifiers,
        sanitize_for_logging,
    ]


def _formatter(renderer: Processor, shared: list[Processor]) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)


def setup_logging(settings: Settings | None = None, use_stderr: bool = False) -> None:
    """Configure structlog over the standard library root logger.

    Args:
        settings: Settings to use (defaults to the cached global settings)
        use_stderr: Log to stderr instead of stdout (keeps CLI JSON output clean)
    """
    settings = settings or get_settings()
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    stream = sys.stderr if use_stderr else sys.stdout
    renderer: Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    stream_handler = logging.StreamHandler(stream)
    stream_handler.setFormatter(_formatter(renderer, shared))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stream_handler)
    root.setLevel(getattr(logging, settings.log_level))

    # The file log is always JSON regardless of the console format
    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), shared))
        root.addHandler(file_handler)


@lru_cache(maxsize=128)
def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a cached structured logger by name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Bound structured logger
    """
    return structlog.get_logger(name)
