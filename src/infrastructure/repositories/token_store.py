"""Redis-backed token stores.

Key layout:

- ``jwt:blacklist:<jti>`` -> ``"revoked"``, expiring when the revoked access
  token would have expired anyway;
- ``refresh_token:<token>`` -> user id, expiring with the refresh lifetime.

Every Redis failure (connection refused, socket timeout, protocol error) is
re-raised as :class:`StoreUnavailableError` so callers can tell "the store
said no" apart from "the store did not answer".
"""

import asyncio
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.exceptions import StoreUnavailableError
from src.core.logging import BoundLogger, get_component_logger
from src.domain.interfaces.token_management import IAccessTokenBlacklist, IRefreshTokenStore
from src.domain.value_objects.jwt_token import RefreshToken, TokenId

BLACKLIST_KEY_PREFIX = "jwt:blacklist:"
REFRESH_TOKEN_KEY_PREFIX = "refresh_token:"
BLACKLIST_MARKER = "revoked"


class RedisAccessTokenBlacklist(IAccessTokenBlacklist):
    """Revoked access-token identifiers stored as expiring Redis keys."""

    def __init__(self, redis_client: Redis, logger: Optional[BoundLogger] = None):
        self._redis = redis_client
        self._logger = logger or get_component_logger("token_blacklist", __name__)

    @staticmethod
    def _key(jti: TokenId) -> str:
        return f"{BLACKLIST_KEY_PREFIX}{jti.value}"

    async def add(self, jti: TokenId, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("Blacklist TTL must be positive")
        try:
            await self._redis.set(self._key(jti), BLACKLIST_MARKER, ex=ttl_seconds)
        except (RedisError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "Failed to blacklist access token",
                jti=jti.mask_for_logging(),
                error=str(exc),
            )
            raise StoreUnavailableError() from exc
        self._logger.debug(
            "Access token blacklisted", jti=jti.mask_for_logging(), ttl_seconds=ttl_seconds
        )

    async def is_blacklisted(self, jti: TokenId) -> bool:
        try:
            exists = await self._redis.exists(self._key(jti))
        except (RedisError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "Blacklist lookup failed", jti=jti.mask_for_logging(), error=str(exc)
            )
            raise StoreUnavailableError() from exc
        return bool(exists)


class RedisRefreshTokenStore(IRefreshTokenStore):
    """Refresh-token -> user-id mapping with single-use consumption via GETDEL."""

    def __init__(self, redis_client: Redis, logger: Optional[BoundLogger] = None):
        self._redis = redis_client
        self._logger = logger or get_component_logger("refresh_token_store", __name__)

    @staticmethod
    def _key(token: RefreshToken) -> str:
        return f"{REFRESH_TOKEN_KEY_PREFIX}{token.value}"

    async def store(self, token: RefreshToken, user_id: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("Refresh token TTL must be positive")
        try:
            await self._redis.set(self._key(token), user_id, ex=ttl_seconds)
        except (RedisError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "Failed to store refresh token",
                token=token.mask_for_logging(),
                error=str(exc),
            )
            raise StoreUnavailableError() from exc

    async def consume(self, token: RefreshToken) -> Optional[str]:
        try:
            user_id = await self._redis.getdel(self._key(token))
        except (RedisError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "Failed to consume refresh token",
                token=token.mask_for_logging(),
                error=str(exc),
            )
            raise StoreUnavailableError() from exc
        if user_id is None:
            return None
        if isinstance(user_id, bytes):
            user_id = user_id.decode("utf-8")
        return user_id

    async def revoke(self, token: RefreshToken) -> None:
        try:
            await self._redis.delete(self._key(token))
        except (RedisError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "Failed to revoke refresh token",
                token=token.mask_for_logging(),
                error=str(exc),
            )
            raise StoreUnavailableError() from exc
