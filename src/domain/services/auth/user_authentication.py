"""Username/password authentication and login activity events."""

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import InvalidCredentialsError
from src.core.logging import BoundLogger, get_component_logger
from src.domain.entities.user import User
from src.domain.events.authentication_events import UserLoggedInEvent
from src.domain.interfaces.repositories import IUserRepository
from src.domain.interfaces.services import IEventDispatcher
from src.utils.i18n import get_translated_message
from src.utils.security import dummy_verify, verify_password


@dataclass(frozen=True)
class LoginContext:
    """Where a login came from, as far as the request tells us."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    correlation_id: Optional[str] = None


class UserAuthenticationService:
    """
    Service for username/password authentication.

    Unknown usernames, wrong passwords and inactive accounts all fail with the
    same :class:`InvalidCredentialsError` so the response cannot be used to
    discover which accounts exist.

    Attributes:
        user_repository (IUserRepository): Lookup of stored user records.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        event_dispatcher: Optional[IEventDispatcher] = None,
        logger: Optional[BoundLogger] = None,
    ):
        self.user_repository = user_repository
        self._event_dispatcher = event_dispatcher
        self._logger = logger or get_component_logger("user_authentication", __name__)

    async def authenticate_by_credentials(
        self, username: str, password: str, language: str = "en"
    ) -> User:
        """
        Authenticate a user using username and password.

        Args:
            username (str): User's username (case-insensitive).
            password (str): User's password.
            language (str): Language for the error message.

        Returns:
            User: Authenticated user entity.

        Raises:
            InvalidCredentialsError: If credentials are invalid or the user is inactive.
        """
        user = await self.user_repository.get_by_username(username)
        masked = username[:3] + "***" if len(username) > 3 else username

        if user is None:
            dummy_verify()
            self._logger.warning("Login failed: unknown username", username=masked)
            raise InvalidCredentialsError(get_translated_message("invalid_credentials", language))

        if not verify_password(password, user.hashed_password):
            self._logger.warning("Login failed: wrong password", user_id=str(user.id))
            raise InvalidCredentialsError(get_translated_message("invalid_credentials", language))

        if not user.is_active:
            self._logger.warning("Login failed: inactive account", user_id=str(user.id))
            raise InvalidCredentialsError(get_translated_message("invalid_credentials", language))

        self._logger.info("User authenticated", user_id=str(user.id))
        return user

    def record_login(
        self, user: User, session_id: Optional[str], context: Optional[LoginContext] = None
    ) -> bool:
        """Queue a :class:`UserLoggedInEvent` for a successful login.

        Never blocks and never raises because of the broker; a dropped event
        only shows up in the logs and the dispatcher counters.

        Returns:
            True if the event was accepted by the dispatcher.
        """
        if self._event_dispatcher is None:
            return False
        context = context or LoginContext()
        event = UserLoggedInEvent.create(
            user_id=str(user.id),
            username=user.username,
            session_id=session_id,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            correlation_id=context.correlation_id,
        )
        accepted = self._event_dispatcher.dispatch(event)
        self._logger.debug(
            "Login activity queued" if accepted else "Login activity dropped",
            user_id=event.user_id,
            correlation_id=context.correlation_id,
        )
        return accepted
