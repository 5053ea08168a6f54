"""Logout endpoint.

Requires a valid bearer token, then blacklists that same token for the rest of
its lifetime. An optional refresh token in the body is revoked as well, on a
best-effort basis.
"""

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Request, status

from src.adapters.api.v1.auth.schemas import LogoutRequest, MessageResponse
from src.core.dependencies.auth import CurrentIdentity, get_bearer_token
from src.infrastructure.dependency_injection.auth_dependencies import TokenRevocationServiceDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Log out",
    description="Revokes the caller's access token and, if given, a refresh token.",
)
async def logout_user(
    request: Request,
    identity: CurrentIdentity,
    access_token: Annotated[str, Depends(get_bearer_token)],
    revocation_service: TokenRevocationServiceDep,
    payload: Annotated[Optional[LogoutRequest], Body()] = None,
) -> MessageResponse:
    """Revoke the current access token.

    Raises:
        InvalidTokenError: The token has no jti (401).
        ExpiredTokenError: The token expired in the meantime (401).
        StoreUnavailableError: The blacklist write failed (500).
    """
    language = get_request_language(request)
    refresh_token = payload.refresh_token if payload else None

    await revocation_service.revoke(access_token, refresh_token=refresh_token, language=language)

    logger.info(
        "User logged out",
        user_id=str(identity.id),
        refresh_token_revoked=refresh_token is not None,
    )
    return MessageResponse(message=get_translated_message("logout_successful", language))
