"""Login endpoint.

Authenticates a username/password pair and starts a session: a signed access
token plus an opaque refresh token recorded server side. The route stays thin;
credential checks live in :class:`UserAuthenticationService` and token work in
:class:`SessionRotationManager`. A login activity event is queued once the
session exists and never holds up the response.
"""

import structlog
from fastapi import APIRouter, Request, status

from src.adapters.api.v1.auth.schemas import AuthResponse, LoginRequest, TokenPair, UserOut
from src.domain.services.auth import LoginContext
from src.infrastructure.dependency_injection.auth_dependencies import (
    SessionManagerDep,
    UserAuthenticationServiceDep,
)
from src.utils.i18n import get_request_language

logger = structlog.get_logger(__name__)
router = APIRouter()


def _login_context(request: Request) -> LoginContext:
    return LoginContext(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("User-Agent"),
        correlation_id=getattr(request.state, "correlation_id", None),
    )


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate a user",
    description=(
        "Authenticates a user with username and password and returns the user "
        "profile together with a new access/refresh token pair."
    ),
)
async def login_user(
    request: Request,
    payload: LoginRequest,
    auth_service: UserAuthenticationServiceDep,
    session_manager: SessionManagerDep,
):
    """Authenticate a user and issue a token pair.

    Raises:
        InvalidCredentialsError: Unknown user, wrong password or inactive
            account (401, same message for all three).
        SigningError / StoreUnavailableError: The pair could not be produced (500).
    """
    language = get_request_language(request)
    request_logger = logger.bind(endpoint="login")

    user = await auth_service.authenticate_by_credentials(
        payload.username, payload.password, language
    )
    pair = await session_manager.start_session(user.to_identity())
    auth_service.record_login(user, pair.session_id, _login_context(request))

    request_logger.info("Login successful", user_id=str(user.id), expires_in=pair.expires_in)
    return AuthResponse(user=UserOut.from_entity(user), tokens=TokenPair.from_value(pair))
