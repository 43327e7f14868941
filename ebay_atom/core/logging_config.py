"""
Structured logging configuration using structlog.

Logs are written to stderr because stdout carries the Atom document.
Human-readable console output by default, JSON lines when
EBAY_ATOM_LOG_JSON is set.

Usage:
    from ebay_atom.core.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("listings extracted", count=60)

Output (console):
    2024-01-01T12:00:00Z [info     ] listings extracted    count=60

Output (JSON):
    {"count": 60, "event": "listings extracted", "level": "info",
     "timestamp": "2024-01-01T12:00:00Z"}
"""

import logging
import sys
from typing import Any

import structlog

from ebay_atom.core.config import load_settings

IS_TEST = "pytest" in sys.modules


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog for the current process."""
    settings = load_settings()
    level_no = _resolve_level(level or settings.LOG_LEVEL)
    use_json = settings.LOG_JSON if json_output is None else json_output

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=not IS_TEST and sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # bs4 and lxml log through the stdlib; keep them off stdout too
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level_no,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A structlog bound logger writing to stderr
    """
    return structlog.get_logger(name)


# Configure on import
configure_logging()
