"""
Asynchronous Database Utilities Module

This module owns the single SQLAlchemy async engine (asyncpg driver) used by the
account service, the session factory built on it, and the FastAPI dependency that
hands one session to each request.

**Security Note**: Ensure that the database connection URL (DATABASE_URL) is configured
for SSL/TLS when connecting over untrusted networks. asyncpg does not understand the
libpq `sslmode` query parameter, so it is stripped from the URL here. Avoid logging
connection strings.

Key Components:
    - engine: The asynchronous SQLAlchemy engine for PostgreSQL connections.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - get_async_db: A dependency yielding one session per request.
    - create_async_db_and_tables: Creates tables on startup, retrying while the
      database is still coming up.
"""

import urllib.parse as urlparse
from typing import AsyncGenerator

import structlog
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.core.config.settings import settings

logger = structlog.get_logger(__name__)


def _build_async_url() -> str:
    """Return DATABASE_URL with the asyncpg driver and without `sslmode`."""
    async_url = settings.DATABASE_URL.replace("postgresql+psycopg2", "postgresql+asyncpg")
    if async_url.startswith("postgresql://"):
        async_url = async_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    parsed = urlparse.urlparse(async_url)
    query = dict(urlparse.parse_qsl(parsed.query))
    query.pop("sslmode", None)
    parsed = parsed._replace(query=urlparse.urlencode(query))
    return urlparse.urlunparse(parsed)


engine = create_async_engine(
    _build_async_url(),
    echo=False,
    pool_size=settings.POSTGRES_POOL_SIZE,
    max_overflow=settings.POSTGRES_MAX_OVERFLOW,
    pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
    pool_pre_ping=True,
)

AsyncSessionFactory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an AsyncSession.

    Rolls back the transaction if the request handler raises, and always closes
    the session.
    """
    async with AsyncSessionFactory() as session:
        logger.debug("async_db_session_created")
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("async_db_session_rollback")
            raise
        finally:
            await session.close()
            logger.debug("async_db_session_closed")


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=retry_if_exception_type((OperationalError, OSError)),
    reraise=True,
)
async def create_async_db_and_tables() -> None:
    """
    Create all SQLModel tables, retrying with exponential backoff.

    Raises:
        OperationalError: If the database is still unreachable after all attempts.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except (OperationalError, OSError) as exc:
        logger.warning("database_tables_creation_retry", error=str(exc))
        raise
    logger.info("database_tables_created")


async def dispose_engine() -> None:
    await engine.dispose()
    logger.info("database_engine_disposed")
