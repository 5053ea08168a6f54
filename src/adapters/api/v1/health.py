"""Health check endpoint.

Pings Redis (token state) and PostgreSQL (user records) concurrently and
reports ``ok`` only when both answer.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel
from sqlalchemy import text

from src.core.config.settings import settings
from src.infrastructure.dependency_injection.auth_dependencies import AsyncDB, RedisClient
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_redis_health(redis) -> Dict[str, Any]:
    try:
        await redis.ping()
        return {"status": "healthy"}
    except Exception as e:
        logger.error("redis_health_check_failed", error=str(e))
        return {"status": "unhealthy"}


async def check_database_health(db) -> Dict[str, Any]:
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"status": "unhealthy"}


@router.get("", response_model=HealthResponse)
async def health_check(request: Request, redis: RedisClient, db: AsyncDB) -> HealthResponse:
    """Verify that the token store and the user database are reachable."""
    redis_health, db_health = await asyncio.gather(
        check_redis_health(redis),
        check_database_health(db),
    )
    healthy = all(s["status"] == "healthy" for s in (redis_health, db_health))

    return HealthResponse(
        status="ok" if healthy else "degraded",
        env=settings.APP_ENV,
        message=get_translated_message("health_status_ok", get_request_language(request)),
        services={"redis": redis_health, "database": db_health},
        timestamp=datetime.now(timezone.utc),
    )
