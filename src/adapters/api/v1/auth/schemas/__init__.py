from __future__ import annotations

"""Authentication API schemas package.

Related Pydantic models are grouped in small modules and re-exported here so
routes and tests can import from ``src.adapters.api.v1.auth.schemas``.
"""

# flake8: noqa: F401 – re-export

from .misc import MessageResponse
from .requests import (
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    UsernameStr,
    ValidateTokenRequest,
)
from .responses.auth import AuthResponse
from .responses.token import TokenPair, TokenValidationResponse
from .responses.user import UserOut

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "RefreshRequest",
    "LogoutRequest",
    "ValidateTokenRequest",
    "UsernameStr",
    "UserOut",
    "TokenPair",
    "TokenValidationResponse",
    "AuthResponse",
    "MessageResponse",
]
