"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging capabilities with JSON formatting for production
and human-readable console output for development.

Components never reach for a process-wide logger at call time: each one
receives a logger through its constructor, usually built with
:func:`get_component_logger` by the composition root.
"""

import logging

import structlog
from structlog.stdlib import BoundLogger


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Sets up structlog with:
    1. Context variables merged into every event (correlation ids)
    2. ISO format timestamps and log level
    3. JSON formatting for production, console formatting for development
    4. Standard library logger factory and bound loggers

    Args:
        log_level: Minimum level for the standard library root logger.
        json_logs: Render events as JSON instead of the console format.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper(), logging.INFO))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_component_logger(component: str, module: str | None = None) -> BoundLogger:
    """Return a logger bound to a component name, for constructor injection."""
    return structlog.get_logger(module or f"tessera.{component}").bind(component=component)


__all__ = ["BoundLogger", "configure_logging", "get_component_logger"]
