"""Structured logging configuration."""

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional
import structlog

if TYPE_CHECKING:
    from ..config.settings import Settings


def configure_logging(settings: Optional["Settings"] = None) -> None:
    """Configure structured logging with structlog."""
    if settings is None:
        from ..config.settings import settings

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if settings.debug else logging.WARNING)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Get structured logger instance.
    Events go through the stdlib logger of the same name, so the host's
    logging level and handlers decide what is emitted.
    """
    return structlog.wrap_logger(logging.getLogger(name))
