"""
Structured logging setup for credential resolution and diagnostics.

The package never configures structlog on import. Applications should call
:func:`configure_logging` once at startup; until then structlog's defaults
apply and events are printed to stdout. Once configured, events go to
stderr so that a resolved token or a JSON report printed on stdout stays
clean.

Credential code logs event names and locations only; secret values are
never passed to a logger.
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(log_level: str = "INFO", json_output: bool = True, stream: TextIO | None = None) -> None:
    """Configure structlog for the credential subsystem.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines; when False, use the human-readable console renderer
        stream: Output stream (defaults to ``sys.stderr`` at call time)
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("credential_resolved", kind="access-token", source="environment-variable")
    """
    return structlog.get_logger(name)
