"""Domain Value Objects for the token lifecycle.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity.
"""

from .identity import IdentitySource, UserIdentity
from .jwt_token import (
    IssuedAccessToken,
    RefreshToken,
    TokenId,
    TokenPair,
    UnverifiedAccessClaims,
)

__all__ = [
    "IdentitySource",
    "IssuedAccessToken",
    "RefreshToken",
    "TokenId",
    "TokenPair",
    "UnverifiedAccessClaims",
    "UserIdentity",
]
