"""Refresh endpoint: exchange a refresh token for a new token pair.

The presented refresh token is single use. The response carries the rotated
refresh token; the old one is already gone from the store.
"""

import structlog
from fastapi import APIRouter, Request, status

from src.adapters.api.v1.auth.schemas import RefreshRequest, TokenPair
from src.infrastructure.dependency_injection.auth_dependencies import SessionManagerDep
from src.utils.i18n import get_request_language

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenPair,
    status_code=status.HTTP_200_OK,
    summary="Rotate a refresh token",
    description="Consumes the refresh token and returns a new access token and refresh token.",
)
async def refresh_tokens(
    request: Request,
    payload: RefreshRequest,
    session_manager: SessionManagerDep,
) -> TokenPair:
    pair = await session_manager.refresh(payload.refresh_token, get_request_language(request))
    logger.info("Session refreshed", endpoint="refresh", expires_in=pair.expires_in)
    return TokenPair.from_value(pair)
