"""User Registration Domain Service.

Creates accounts and announces them with a ``UserRegisteredEvent``. The event
is handed to a non-blocking dispatcher, so a slow or unavailable broker never
delays or fails a registration.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from src.core.exceptions import DuplicateUserError
from src.core.logging import BoundLogger, get_component_logger
from src.domain.entities.user import Role, User
from src.domain.events.authentication_events import UserRegisteredEvent
from src.domain.interfaces.repositories import IUserRepository
from src.domain.interfaces.services import IEventDispatcher
from src.utils.i18n import get_translated_message
from src.utils.security import hash_password


def _mask(value: str) -> str:
    return value[:3] + "***" if len(value) > 3 else value


@dataclass(frozen=True)
class RegistrationRequest:
    name: str
    username: str
    email: str
    password: str
    role: Role = Role.USER
    address: str = ""
    phone_number: str = ""


class UserRegistrationService:
    """Domain service for user registration.

    Responsibilities:
    - Reject usernames and emails that are already taken, reporting every
      conflicting field at once
    - Hash the password and persist the new user
    - Dispatch the registration event (at most once, best effort)
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        event_dispatcher: IEventDispatcher,
        logger: Optional[BoundLogger] = None,
    ):
        self._user_repository = user_repository
        self._event_dispatcher = event_dispatcher
        self._logger = logger or get_component_logger("user_registration", __name__)

    async def register_user(
        self,
        request: RegistrationRequest,
        language: str = "en",
        correlation_id: Optional[str] = None,
    ) -> User:
        """Register a new user.

        Args:
            request: The validated registration payload.
            language: Language code for error messages.
            correlation_id: Request correlation ID, copied onto the event.

        Returns:
            User: The newly created user.

        Raises:
            DuplicateUserError: If the username and/or email already exist.
            DatabaseError: If the user cannot be persisted.
        """
        username = request.username.strip().lower()
        email = request.email.strip().lower()

        self._logger.info(
            "User registration started",
            username=_mask(username),
            email=_mask(email),
            correlation_id=correlation_id,
        )

        conflicts: Dict[str, str] = {}
        for existing in await self._user_repository.get_by_username_or_email(username, email):
            if existing.username.lower() == username:
                conflicts["username"] = get_translated_message("username_already_exists", language)
            if existing.email.lower() == email:
                conflicts["email"] = get_translated_message("email_already_exists", language)
        if conflicts:
            self._logger.warning(
                "Registration rejected: duplicate fields",
                fields=sorted(conflicts),
                correlation_id=correlation_id,
            )
            raise DuplicateUserError(
                get_translated_message("user_already_exists", language), fields=conflicts
            )

        user = User(
            name=request.name.strip(),
            username=username,
            email=email,
            hashed_password=hash_password(request.password),
            role=request.role,
            address=request.address,
            phone_number=request.phone_number,
        )
        saved_user = await self._user_repository.save(user)

        event = UserRegisteredEvent.create(
            user_id=str(saved_user.id),
            email=saved_user.email,
            username=saved_user.username,
            created_at=saved_user.created_at,
            correlation_id=correlation_id,
        )
        accepted = self._event_dispatcher.dispatch(event)

        self._logger.info(
            "User registration successful",
            user_id=str(saved_user.id),
            username=_mask(username),
            event_dispatched=accepted,
            correlation_id=correlation_id,
        )
        return saved_user
