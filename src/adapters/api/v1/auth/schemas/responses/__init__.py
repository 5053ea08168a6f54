from __future__ import annotations

"""Re-export response models for authentication endpoints."""

# flake8: noqa: F401 – re-export

from .auth import AuthResponse
from .token import TokenPair, TokenValidationResponse
from .user import UserOut

__all__ = [
    "UserOut",
    "TokenPair",
    "TokenValidationResponse",
    "AuthResponse",
]
