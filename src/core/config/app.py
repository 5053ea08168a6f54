"""Service identity, environment, logging and localisation settings."""

from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _csv(value: Union[str, List[str]]) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class AppSettings(BaseSettings):
    """General settings.

    ``ALLOWED_ORIGINS`` and ``SUPPORTED_LANGUAGES`` accept a comma separated
    string so they can be set from a single environment variable. Production
    deployments must list their trusted origins explicitly.
    """

    PROJECT_NAME: str = "tessera"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "Account service with rotating refresh tokens and token revocation."
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:8000")
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Union[str, List[str]] = Field(default="en,es")

    @field_validator("ALLOWED_ORIGINS", "SUPPORTED_LANGUAGES", mode="before")
    @classmethod
    def split_csv(cls, v: Union[str, List[str]]) -> List[str]:
        return _csv(v)
