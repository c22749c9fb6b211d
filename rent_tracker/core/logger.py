"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any, cast

import structlog

from rent_tracker.core.config import settings

BoundLogger = structlog.stdlib.BoundLogger

# Noisy driver loggers kept at WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")


def _renderer() -> Any:
    if settings.is_development and settings.DEBUG:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Development runs with DEBUG enabled get console output; everything else
    logs JSON lines to stdout.
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> BoundLogger:
    """Get a structured logger instance"""
    return cast(BoundLogger, structlog.get_logger(name or "rent_tracker"))


class LoggerMixin:
    """Gives a class a ``logger`` named after it."""

    @property
    def logger(self) -> BoundLogger:
        return get_logger(self.__class__.__name__)


setup_logging()
