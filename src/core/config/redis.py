"""Redis settings for the access-token blacklist and the refresh-token registry."""

import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

PROTECTED_ENVIRONMENTS = ("staging", "production")


class RedisSettings(BaseSettings):
    """Connection settings for the token store.

    ``REDIS_SOCKET_TIMEOUT_SECONDS`` bounds every round trip; a write that
    times out is reported to the caller as a store failure. Staging and
    production refuse to start without ``REDIS_PASSWORD``.
    """

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = Field(ge=1, le=65535, default=6379)
    REDIS_PASSWORD: SecretStr = SecretStr("")
    REDIS_SSL: bool = False
    REDIS_DB: int = Field(ge=0, default=0)
    REDIS_URL: str = Field(default="", validate_default=True)
    REDIS_SOCKET_TIMEOUT_SECONDS: float = Field(gt=0, default=2.0)

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def build_redis_url(cls, v, info: ValidationInfo) -> str:
        if v:
            return v
        parts = info.data
        password = parts.get("REDIS_PASSWORD")
        secret = password.get_secret_value() if password else ""
        scheme = "rediss" if parts.get("REDIS_SSL") else "redis"
        auth = f":{secret}@" if secret else ""
        return f"{scheme}://{auth}{parts.get('REDIS_HOST')}:{parts.get('REDIS_PORT')}/{parts.get('REDIS_DB', 0)}"

    @model_validator(mode="after")
    def require_password_outside_development(self) -> "RedisSettings":
        env = getattr(self, "APP_ENV", "development")
        if env in PROTECTED_ENVIRONMENTS and not self.REDIS_PASSWORD.get_secret_value():
            logger.error("REDIS_PASSWORD is required in %s", env)
            raise ValueError(f"REDIS_PASSWORD must be set when APP_ENV={env}")
        return self
