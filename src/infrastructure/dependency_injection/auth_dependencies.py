"""Dependency wiring for the account service.

This module is the composition root for request-scoped objects: every factory
builds one concrete implementation, hands it its collaborators and a logger
bound to its component name, and exposes it to FastAPI through ``Depends``.

Process-wide objects (the event dispatcher) are created by the lifespan and
read back from ``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_component_logger
from src.domain.interfaces import (
    IAccessTokenBlacklist,
    IEventDispatcher,
    IRefreshTokenStore,
    IUserRepository,
)
from src.domain.services.auth import (
    SessionRotationManager,
    TokenIssuer,
    TokenRevocationService,
    TokenValidator,
    UserAuthenticationService,
    UserRegistrationService,
)
from src.infrastructure.database.async_db import get_async_db
from src.infrastructure.redis import get_redis
from src.infrastructure.repositories import (
    RedisAccessTokenBlacklist,
    RedisRefreshTokenStore,
    UserRepository,
)

# ---------------------------------------------------------------------------
# Type aliases for dependency injection
# ---------------------------------------------------------------------------

AsyncDB = Annotated[AsyncSession, Depends(get_async_db)]
RedisClient = Annotated[Redis, Depends(get_redis)]

# ---------------------------------------------------------------------------
# Infrastructure Layer Dependencies
# ---------------------------------------------------------------------------


def get_user_repository(db: AsyncDB) -> IUserRepository:
    return UserRepository(db, logger=get_component_logger("user_repository"))


def get_access_token_blacklist(redis: RedisClient) -> IAccessTokenBlacklist:
    return RedisAccessTokenBlacklist(redis, logger=get_component_logger("token_blacklist"))


def get_refresh_token_store(redis: RedisClient) -> IRefreshTokenStore:
    return RedisRefreshTokenStore(redis, logger=get_component_logger("refresh_token_store"))


def get_event_dispatcher(request: Request) -> IEventDispatcher:
    """Returns the dispatcher started by the application lifespan."""
    return request.app.state.event_dispatcher


# ---------------------------------------------------------------------------
# Domain Service Dependencies
# ---------------------------------------------------------------------------


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(logger=get_component_logger("token_issuer"))


def get_token_validator(
    blacklist: IAccessTokenBlacklist = Depends(get_access_token_blacklist),
) -> TokenValidator:
    return TokenValidator(blacklist, logger=get_component_logger("token_validator"))


def get_session_manager(
    refresh_store: IRefreshTokenStore = Depends(get_refresh_token_store),
    user_repository: IUserRepository = Depends(get_user_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> SessionRotationManager:
    return SessionRotationManager(
        refresh_store,
        user_repository,
        issuer,
        logger=get_component_logger("session_rotation"),
    )


def get_token_revocation_service(
    blacklist: IAccessTokenBlacklist = Depends(get_access_token_blacklist),
    sessions: SessionRotationManager = Depends(get_session_manager),
) -> TokenRevocationService:
    return TokenRevocationService(
        blacklist, sessions, logger=get_component_logger("token_revocation")
    )


def get_user_authentication_service(
    user_repository: IUserRepository = Depends(get_user_repository),
    event_dispatcher: IEventDispatcher = Depends(get_event_dispatcher),
) -> UserAuthenticationService:
    return UserAuthenticationService(
        user_repository, event_dispatcher, logger=get_component_logger("user_authentication")
    )


def get_user_registration_service(
    user_repository: IUserRepository = Depends(get_user_repository),
    event_dispatcher: IEventDispatcher = Depends(get_event_dispatcher),
) -> UserRegistrationService:
    return UserRegistrationService(
        user_repository, event_dispatcher, logger=get_component_logger("user_registration")
    )


# ---------------------------------------------------------------------------
# Annotated shortcuts used by route handlers
# ---------------------------------------------------------------------------

UserRepositoryDep = Annotated[IUserRepository, Depends(get_user_repository)]
TokenValidatorDep = Annotated[TokenValidator, Depends(get_token_validator)]
SessionManagerDep = Annotated[SessionRotationManager, Depends(get_session_manager)]
TokenRevocationServiceDep = Annotated[
    TokenRevocationService, Depends(get_token_revocation_service)
]
UserAuthenticationServiceDep = Annotated[
    UserAuthenticationService, Depends(get_user_authentication_service)
]
UserRegistrationServiceDep = Annotated[
    UserRegistrationService, Depends(get_user_registration_service)
]
