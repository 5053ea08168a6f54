from __future__ import annotations

"""Response Pydantic model for user data."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.entities.user import Role, User


class UserOut(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.user.User`.

    The password hash is never part of it.
    """

    id: uuid.UUID
    name: str
    username: str
    email: str
    role: Role
    address: str = ""
    phone_number: str = ""
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            username=user.username,
            email=user.email,
            role=user.role,
            address=user.address,
            phone_number=user.phone_number,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
