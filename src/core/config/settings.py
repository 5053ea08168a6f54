"""Composed settings for tessera.

Each concern owns its own ``BaseSettings`` class (app, database, redis, auth,
messaging). :class:`Settings` merges them, and :data:`settings` is the one
instance the rest of the code imports.

The env file is picked from ``APP_ENV``: ``.env.test``, ``.env.staging`` and
``.env.production`` are used when they exist, ``.env`` otherwise. Variables
already present in the process environment always win over file values.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .messaging import MessagingSettings
from .redis import RedisSettings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

DEFAULT_ENV_FILE = ".env"
ENV_FILES: Dict[str, str] = {
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Connection and token settings the service cannot start without.
REQUIRED_FIELDS = ("DATABASE_URL", "REDIS_URL", "JWT_ISSUER", "JWT_AUDIENCE")


class Settings(AppSettings, DatabaseSettings, RedisSettings, AuthSettings, MessagingSettings):
    """All configuration of the service in one object.

    Security Note:
        Secrets (``JWT_SECRET_KEY``, database and Redis passwords) are
        ``SecretStr`` and must never be logged.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE, env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def model_post_init(self, __context) -> None:
        # Development turns on DEBUG (and with it the interactive docs).
        if self.APP_ENV == "development" and not self.DEBUG:
            self.DEBUG = True
            logger.info("Debug mode enabled for development environment")

    def missing_required_fields(self) -> list:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name, None)]

    def validate_required_fields(self) -> None:
        """Fail fast when a required setting resolved to an empty value.

        Raises:
            ValueError: Naming every missing field.
        """
        missing = self.missing_required_fields()
        if missing:
            error_msg = f"Missing required environment variables: {', '.join(missing)}"
            logger.error(error_msg)
            raise ValueError(error_msg)


def resolve_env_file(env: str) -> Optional[str]:
    """The env file to read for `env`, or None when there is none on disk."""
    candidate = ENV_FILES.get(env)
    if candidate and Path(candidate).exists():
        return candidate
    if Path(DEFAULT_ENV_FILE).exists():
        return DEFAULT_ENV_FILE
    return None


def create_settings() -> Settings:
    env = os.getenv("APP_ENV", "development")
    env_file = resolve_env_file(env)
    if env_file is None:
        logger.warning(f"No env file found, using environment variables only (environment: {env})")
        return Settings(_env_file=None)
    logger.info(f"Loading configuration from {env_file} (environment: {env})")
    return Settings(_env_file=env_file)


settings = create_settings()
settings.validate_required_fields()
