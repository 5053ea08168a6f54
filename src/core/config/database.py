"""PostgreSQL settings for the user store."""

import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """Connection and pool settings.

    ``DATABASE_URL`` wins when set; otherwise an asyncpg URL is built from the
    ``POSTGRES_*`` parts. The password is a ``SecretStr`` and is never logged.
    """

    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = SecretStr("")
    POSTGRES_DB: str = "tessera"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = Field(ge=1, le=65535, default=5432)
    POSTGRES_POOL_SIZE: int = Field(ge=1, default=10)
    POSTGRES_MAX_OVERFLOW: int = Field(ge=0, default=20)
    POSTGRES_POOL_TIMEOUT: float = Field(ge=1.0, default=5.0)
    DATABASE_URL: str = Field(default="", validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def build_database_url(cls, v, info: ValidationInfo) -> str:
        if v:
            return v
        parts = info.data
        password = parts.get("POSTGRES_PASSWORD")
        secret = password.get_secret_value() if password else ""
        if not secret:
            logger.warning("POSTGRES_PASSWORD is empty; connecting without a password")
        return "postgresql+asyncpg://{user}:{secret}@{host}:{port}/{db}".format(
            user=parts.get("POSTGRES_USER"),
            secret=secret,
            host=parts.get("POSTGRES_HOST"),
            port=parts.get("POSTGRES_PORT"),
            db=parts.get("POSTGRES_DB"),
        )
