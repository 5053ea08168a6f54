from __future__ import annotations

"""Response Pydantic models for token data."""

from typing import Optional

from pydantic import BaseModel

from src.domain.value_objects.jwt_token import TokenPair as TokenPairValue


class TokenPair(BaseModel):
    """Access & refresh tokens with additional metadata."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int  # Access token lifetime in seconds

    @classmethod
    def from_value(cls, pair: TokenPairValue) -> "TokenPair":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
        )


class TokenValidationResponse(BaseModel):
    """Result of ``POST /auth/validate``."""

    is_valid: bool
    user_id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    error_message: Optional[str] = None
