"""
Logging configuration module for structured logging.

This module configures the client's logging system using structlog.
It provides structured logging capabilities with JSON formatting when logs are
shipped off-device and human-readable console output for development.
"""

import logging

import structlog

from vitamins_auth.core.config.settings import settings


def configure_logging(log_level: str = None, json_logs: bool = None) -> None:
    """
    Configures the client's logging system.

    This function sets up structlog with:
    1. ISO format timestamps
    2. Log level inclusion
    3. JSON formatting when LOG_JSON is set, console formatting otherwise
    4. Standard library logger factory and bound logger

    Args:
        log_level: Overrides settings.LOG_LEVEL.
        json_logs: Overrides settings.LOG_JSON.
    """
    level = (log_level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", level=level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()
