"""Logging configuration for the Checkout domain."""

import logging
import os

import structlog

# Suppress noisy library loggers
logging.getLogger("protean").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog once for the process.

    ``LOG_LEVEL`` and ``LOG_FORMAT`` (``json`` or ``console``) are read from the
    environment when not passed in.
    """
    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    if json_logs is None:
        json_logs = os.environ.get("LOG_FORMAT", "console").lower() == "json"

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
