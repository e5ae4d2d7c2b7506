"""Structured logging configuration using structlog.

Call setup_logging() once at application startup before any log calls.
Logs go to stderr: stdout carries the MCP stdio transport.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from src.infra.redaction import known_secrets, redact_value


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """structlog processor: scrub every known credential from the event."""
    secrets = known_secrets.snapshot()
    if not secrets:
        return event_dict
    return redact_value(event_dict, secrets)


def setup_logging(*, json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog for the application.

    Args:
        json_output: If True, render logs as JSON. If False, use dev-friendly console output.
        log_level: Minimum log level to emit (DEBUG, INFO, WARNING, ERROR).
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        # After format_exc_info so rendered tracebacks are scrubbed too.
        redact_secrets,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
