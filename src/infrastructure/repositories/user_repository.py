"""SQLModel-backed user store.

Username and email comparisons are case-insensitive. Usernames and emails are
masked before they reach the logs.
"""

import uuid
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import DatabaseError, DuplicateUserError
from src.core.logging import BoundLogger, get_component_logger
from src.domain.entities.user import User
from src.domain.interfaces.repositories import IUserRepository
from src.utils.i18n import get_translated_message


def _mask(value: Optional[str]) -> Optional[str]:
    if value and len(value) > 3:
        return value[:3] + "***"
    return value


def _normalize(value: str) -> str:
    return value.strip().lower()


class UserRepository(IUserRepository):
    """:class:`IUserRepository` over an ``AsyncSession``.

    Driver failures surface as :class:`DatabaseError`. A unique violation on
    save, which happens when two registrations race for the same name, surfaces
    as :class:`DuplicateUserError`.
    """

    def __init__(self, db_session: AsyncSession, logger: Optional[BoundLogger] = None):
        self.db_session = db_session
        self._logger = logger or get_component_logger("user_repository", __name__)

    async def _scalars(self, statement, operation: str, **log_fields):
        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            self._logger.error(
                "User query failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **log_fields,
            )
            raise DatabaseError(f"Failed to {operation}") from e
        return result.scalars()

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        rows = await self._scalars(
            select(User).where(User.id == user_id), "load user", user_id=str(user_id)
        )
        user = rows.first()
        self._logger.debug("User lookup by id", user_id=str(user_id), found=user is not None)
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        if not username or not username.strip():
            return None
        normalized = _normalize(username)
        rows = await self._scalars(
            select(User).where(func.lower(User.username) == normalized),
            "load user",
            username=_mask(normalized),
        )
        return rows.first()

    async def get_by_username_or_email(self, username: str, email: str) -> List[User]:
        statement = select(User).where(
            or_(
                func.lower(User.username) == _normalize(username),
                func.lower(User.email) == _normalize(email),
            )
        )
        rows = await self._scalars(
            statement, "load users", username=_mask(username), email=_mask(email)
        )
        return list(rows.all())

    async def list_users(self, offset: int = 0, limit: int = 100) -> List[User]:
        statement = select(User).order_by(User.created_at).offset(offset).limit(limit)
        users = list((await self._scalars(statement, "load users")).all())
        self._logger.debug("Users listed", count=len(users), offset=offset, limit=limit)
        return users

    async def save(self, user: User) -> User:
        """Add `user`, commit, and refresh it from the database.

        Raises:
            ValueError: If `user` is None.
            DuplicateUserError: On a username or email unique violation.
            DatabaseError: On any other driver failure.
        """
        if user is None:
            raise ValueError("User entity cannot be None")

        try:
            self.db_session.add(user)
            await self.db_session.commit()
            await self.db_session.refresh(user)
        except IntegrityError as e:
            await self.db_session.rollback()
            self._logger.warning("Unique constraint hit on save", username=_mask(user.username))
            raise DuplicateUserError(get_translated_message("user_already_exists")) from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            self._logger.error(
                "User save failed",
                user_id=str(user.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError("Failed to save user") from e

        self._logger.info("User saved", user_id=str(user.id), username=_mask(user.username))
        return user
