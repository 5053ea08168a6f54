"""Persistence ports used by the domain services.

Domain code depends on these abstractions only; the SQLModel-backed adapter
lives in ``src.infrastructure.repositories``.
"""

import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities.user import User


class IUserRepository(ABC):
    """Storage of user accounts.

    Token refresh and validation only call :meth:`get_by_id`. Login,
    registration and the user listing use the rest.
    """

    @abstractmethod
    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """The user with this id, or None."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive username lookup."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_username_or_email(self, username: str, email: str) -> List[User]:
        """All users clashing on either field, so a registration can report both."""
        raise NotImplementedError

    @abstractmethod
    async def list_users(self, offset: int = 0, limit: int = 100) -> List[User]:
        """One page of users, oldest first."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert or update `user` and return it with database defaults filled in."""
        raise NotImplementedError
