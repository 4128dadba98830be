"""Structured logging setup using structlog.

Reaction configs, outcome details and provider error bodies all pass through
the log pipeline, so credential material is scrubbed before rendering: the
token fields of a linked account, the inbound webhook secrets, and provider
tokens that show up inside free text.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog

REDACTED = "***REDACTED***"

_SENSITIVE_PATTERNS = [
    re.compile(r"(token|secret|authorization)[\"']?\s*[:=]\s*[\"']?(?:(?:Bearer|Bot)\s+)?[\w\-\.]+", re.IGNORECASE),
    re.compile(r"(Bearer|Bot)\s+[\w\-\.]+"),
    # GitHub and Slack token formats
    re.compile(r"\b(gh[opsur])_[A-Za-z0-9]+"),
    re.compile(r"\b(xox[abpr])-[\w\-]+"),
]

# Credential columns, webhook auth settings and headers
_SENSITIVE_KEYS = frozenset({
    "access_token",
    "refresh_token",
    "authorization",
    "webhook_secret",
    "github_webhook_secret",
    "x_webhook_secret",
    "x-webhook-secret",
    "x-hub-signature-256",
})


def _scrub(value: Any) -> Any:
    if isinstance(value, str):
        for pattern in _SENSITIVE_PATTERNS:
            value = pattern.sub(rf"\1={REDACTED}", value)
        return value
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in _SENSITIVE_KEYS else _scrub(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_scrub(v) for v in value]
    return value


def _filter_sensitive(
    _logger: structlog.types.WrappedLogger,
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for key, value in list(event_dict.items()):
        if key.lower() in _SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif key != "event":
            event_dict[key] = _scrub(value)
    return event_dict


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog with optional JSON output."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _filter_sensitive,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # httpx logs every provider request URL at INFO
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
