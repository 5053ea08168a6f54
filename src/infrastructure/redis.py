"""
Redis Connection Module

Redis holds both token key spaces: the access-token blacklist and the refresh-token
store. The client is provided as a FastAPI dependency so every request gets a client
that is closed when the request finishes.

Every round trip is bounded by REDIS_SOCKET_TIMEOUT_SECONDS. A timeout surfaces as a
`redis.exceptions.TimeoutError`, which the token stores turn into a store outage
instead of letting the request hang.

**Security Note**: Use `rediss://` (REDIS_SSL) when Redis is reached over an untrusted
network, and never log the connection URL, which carries the password.

Functions:
    create_redis_client: Build a client from settings.
    get_redis: A FastAPI dependency that yields an asynchronous Redis client instance.
"""

from typing import AsyncGenerator

import structlog
from redis.asyncio import Redis

from src.core.config.settings import settings

logger = structlog.get_logger(__name__)


def create_redis_client() -> Redis:
    return Redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
    )


async def get_redis() -> AsyncGenerator[Redis, None]:
    """
    Provides an asynchronous Redis client for the duration of one request.

    Yields:
        Redis: An asynchronous Redis client instance.
    """
    redis = create_redis_client()
    logger.debug("redis_connection_created")
    try:
        yield redis
    finally:
        await redis.aclose()
        logger.debug("redis_connection_closed")
