"""Process-level setup that must run once, before the app object is built."""

import logging

import structlog
from dotenv import load_dotenv

from src.core.config.settings import settings
from src.core.logging import configure_logging
from src.utils.i18n import setup_i18n

# Third-party loggers that are chatty at INFO and add nothing to our logs.
QUIET_LOGGERS = ("passlib", "aio_pika", "aiormq", "asyncio")


def initialize_application() -> None:
    """Load ``.env``, set up structlog and the message catalogs."""
    load_dotenv(override=True)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    setup_i18n()
    structlog.get_logger(__name__).info(
        "application_initialized", env=settings.APP_ENV, language=settings.DEFAULT_LANGUAGE
    )
