"""Repository implementations for the infrastructure layer."""

from .token_store import RedisAccessTokenBlacklist, RedisRefreshTokenStore
from .user_repository import UserRepository

__all__ = ["UserRepository", "RedisAccessTokenBlacklist", "RedisRefreshTokenStore"]
