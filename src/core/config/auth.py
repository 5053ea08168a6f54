"""Authentication and token lifecycle settings.
"""

import logging
from typing import List, Union

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class AuthSettings(BaseSettings):
    """Defines settings for signing and validating tokens.

    Access tokens are signed with a shared secret using an HMAC algorithm.
    Refresh tokens are opaque and live only in Redis.

    Security Note:
        - JWT_SECRET_KEY must be a random string of at least 32 characters and
          must never appear in logs or version control.
        - JWT_ALGORITHM is restricted to the HMAC family; tokens presenting any
          other algorithm are rejected at validation time.
    """

    JWT_SECRET_KEY: SecretStr = SecretStr("")
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "tessera-account-service"
    JWT_AUDIENCE: Union[str, List[str]] = Field(default="tessera-clients")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, default=60)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(ge=1, default=7)

    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    @field_validator("JWT_AUDIENCE", mode="before")
    @classmethod
    def split_audience(cls, v: Union[str, List[str]]) -> List[str]:
        """Splits a comma-separated audience string into a list of recipients."""
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        """Only HMAC signing is supported."""
        value = value.upper()
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}")
        return value

    @model_validator(mode="after")
    def _validate_jwt_secret(self) -> "AuthSettings":
        """Rejects a missing or short signing secret.

        Returns:
            Self instance with a validated secret.
        """
        secret = self.JWT_SECRET_KEY.get_secret_value()
        if len(secret) < 32:
            error_msg = "JWT_SECRET_KEY must be set and at least 32 characters long."
            logger.error(error_msg)
            raise ValueError(error_msg)
        if not self.JWT_AUDIENCE:
            raise ValueError("JWT_AUDIENCE must name at least one recipient.")
        return self

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return self.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
