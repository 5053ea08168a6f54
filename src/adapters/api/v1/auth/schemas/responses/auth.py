from __future__ import annotations

"""Composite response Pydantic models for authentication endpoints."""

from pydantic import BaseModel

from src.adapters.api.v1.auth.schemas.responses.token import TokenPair
from src.adapters.api.v1.auth.schemas.responses.user import UserOut


class AuthResponse(BaseModel):
    """Response returned by the login endpoint."""

    user: UserOut
    tokens: TokenPair
