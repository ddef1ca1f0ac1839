"""Structured logging setup.

Application code logs through ``structlog.get_logger()`` with dotted event
names; stdlib loggers (uvicorn, SQLAlchemy) share the same level.
"""

from __future__ import annotations

import logging

import structlog


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return logging.getLevelNamesMapping()[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def configure_logging(level: str | int = "info", fmt: str = "json") -> None:
    """Configure structlog (and the stdlib root logger) for the process.

    ``fmt`` is ``"json"`` for one JSON object per line, anything else for
    coloured console output.
    """
    numeric_level = _level_number(level)
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
    )
    logging.basicConfig(format="%(message)s", level=numeric_level, force=True)
