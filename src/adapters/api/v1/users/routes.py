"""User account endpoints.

- ``GET /users/profile``: the authenticated caller's own record
- ``GET /users`` and ``GET /users/{user_id}``: admin only

Authentication always runs before the role check, so a missing or bad token
gets 401 and never 403.
"""

import uuid
from typing import Annotated, List

import structlog
from fastapi import APIRouter, Depends, Query, Request

from src.adapters.api.v1.auth.schemas import UserOut
from src.core.dependencies.auth import CurrentIdentity, require_roles
from src.core.exceptions import UserNotFoundError
from src.domain.entities.user import Role
from src.domain.value_objects.identity import UserIdentity
from src.infrastructure.dependency_injection.auth_dependencies import UserRepositoryDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/users", tags=["users"])

AdminIdentity = Annotated[UserIdentity, Depends(require_roles(Role.ADMIN.value))]


@router.get("/profile", response_model=UserOut, summary="Current user's profile")
async def get_profile(
    request: Request, identity: CurrentIdentity, users: UserRepositoryDep
) -> UserOut:
    user = await users.get_by_id(identity.id)
    if user is None:
        raise UserNotFoundError(
            get_translated_message("user_not_found", get_request_language(request))
        )
    return UserOut.from_entity(user)


@router.get("", response_model=List[UserOut], summary="List users (admin)")
async def list_users(
    admin: AdminIdentity,
    users: UserRepositoryDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
) -> List[UserOut]:
    records = await users.list_users(offset=offset, limit=limit)
    logger.info("Users listed", admin_id=str(admin.id), count=len(records))
    return [UserOut.from_entity(user) for user in records]


@router.get("/{user_id}", response_model=UserOut, summary="Get a user (admin)")
async def get_user(
    request: Request,
    user_id: uuid.UUID,
    admin: AdminIdentity,
    users: UserRepositoryDep,
) -> UserOut:
    user = await users.get_by_id(user_id)
    if user is None:
        raise UserNotFoundError(
            get_translated_message("user_not_found", get_request_language(request))
        )
    return UserOut.from_entity(user)
