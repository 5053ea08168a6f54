"""Registration endpoint.

Creates an account and answers 201 with the new profile. The
``UserRegisteredEvent`` is queued for publication in the background and never
holds up the response.
"""

import structlog
from fastapi import APIRouter, Request, status

from src.adapters.api.v1.auth.schemas import RegisterRequest, UserOut
from src.domain.services.auth import RegistrationRequest
from src.infrastructure.dependency_injection.auth_dependencies import UserRegistrationServiceDep
from src.utils.i18n import get_request_language

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description=(
        "Creates a user account. Duplicate usernames or emails are rejected with "
        "409 and a list of the conflicting fields."
    ),
)
async def register_user(
    request: Request,
    payload: RegisterRequest,
    registration_service: UserRegistrationServiceDep,
) -> UserOut:
    user = await registration_service.register_user(
        RegistrationRequest(
            name=payload.name,
            username=payload.username,
            email=str(payload.email),
            password=payload.password,
            role=payload.role,
            address=payload.address,
            phone_number=payload.phone_number,
        ),
        language=get_request_language(request),
        correlation_id=getattr(request.state, "correlation_id", None),
    )
    logger.info("User registered", endpoint="register", user_id=str(user.id))
    return UserOut.from_entity(user)
