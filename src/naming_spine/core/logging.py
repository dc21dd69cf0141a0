"""
Logging configuration.

Provides a single entry point for configuring structured logging with
structlog.  Output always goes to stderr so that machine-readable command
output (``--json``) on stdout is never interleaved with log lines.

Configuration is read from arguments, falling back to environment variables:
- NAMING_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: WARNING)
- NAMING_LOG_FORMAT: json | console (default: console)

Usage:
    # Configure at application startup
    from naming_spine.core.logging import configure_logging, get_logger
    configure_logging()

    log = get_logger(__name__)
    log.info("manifest_loaded", entries=12)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Track if logging has been configured
_configured = False


def _add_service_metadata(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service", "naming-spine")
    return event_dict


def configure_logging(
    level: str | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
) -> None:
    """
    Configure structured logging for the application.

    Should be called once at application startup (CLI entry).  Subsequent
    calls are no-ops unless force=True; the CLI forces reconfiguration on
    every invocation so the handler always writes to the current stderr.

    Args:
        level: Log level (overrides NAMING_LOG_LEVEL env var)
        format: Output format (overrides NAMING_LOG_FORMAT env var)
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or os.environ.get("NAMING_LOG_LEVEL", "WARNING")).upper()
    log_format = (format or os.environ.get("NAMING_LOG_FORMAT", "console")).lower()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        # UTC ISO-8601 timestamps
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_metadata,
        structlog.processors.format_exc_info,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Handlers are rebuilt on every forced reconfigure; cached loggers
        # would keep a reference to a stale stream.
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )
    logging.getLogger("naming_spine").setLevel(getattr(logging, log_level))

    _configured = True


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(command="check", source="manifest.yaml")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "is_configured",
]
