"""Token validation endpoint for other services.

HTTP counterpart of the ``ValidateToken`` RPC: the caller passes an access
token and learns whether it is valid and whose it is.
"""

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.adapters.api.v1.auth.schemas import TokenValidationResponse, ValidateTokenRequest
from src.infrastructure.dependency_injection.auth_dependencies import TokenValidatorDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenValidationResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate an access token",
    responses={
        401: {"model": TokenValidationResponse, "description": "Token rejected"},
        500: {"description": "Revocation store unavailable"},
    },
)
async def validate_token(
    request: Request,
    payload: ValidateTokenRequest,
    validator: TokenValidatorDep,
):
    language = get_request_language(request)
    result = await validator.validate(payload.token, language)

    if result.is_store_failure:
        logger.error("Token validation unavailable", endpoint="validate")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": get_translated_message("token_validation_unavailable", language)},
        )
    if not result.valid:
        body = TokenValidationResponse(is_valid=False, error_message=result.message)
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=body.model_dump())

    return TokenValidationResponse(
        is_valid=True,
        user_id=result.subject_id,
        username=result.username,
        role=result.role,
    )
