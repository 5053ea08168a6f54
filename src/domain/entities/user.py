import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import EmailStr
from sqlalchemy import DateTime, Enum as SAEnum
from sqlmodel import Column, Field, SQLModel, String

from src.domain.value_objects.identity import UserIdentity


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Represents the role of a user within the system (RBAC).

    Attributes:
        ADMIN: Confers administrative privileges, such as listing accounts.
        USER: A standard account holder.
    """

    ADMIN = "admin"
    USER = "user"


class User(SQLModel, table=True):
    """Represents a User account record.

    The token core never reads this row directly: it consumes the
    :class:`UserIdentity` projection returned by :meth:`to_identity`.

    Attributes:
        id: Random uuid4 primary key; the `sub` claim of every access token.
        name: Display name.
        username: Unique, lowercase login name.
        email: Unique email address.
        hashed_password: Bcrypt hash of the password.
        role: The user's role, used for role-based access control.
        address: Optional postal address.
        phone_number: Optional phone number.
        is_active: Inactive users cannot log in or refresh.
        created_at: When the account was created.
        updated_at: When the record last changed.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the user.",
    )
    name: str = Field(max_length=100, description="Display name.")
    username: str = Field(
        sa_column=Column(String(50), unique=True, index=True, nullable=False),
        description="Unique, lowercase username for login.",
    )
    email: EmailStr = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="Unique email address.",
    )
    hashed_password: str = Field(max_length=255, description="Bcrypt-hashed password.")
    role: Role = Field(
        default=Role.USER,
        sa_column=Column(
            SAEnum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
            nullable=False,
        ),
        description="The user's role, used for role-based access control (RBAC).",
    )
    address: str = Field(default="", max_length=255)
    phone_number: str = Field(default="", max_length=32)
    is_active: bool = Field(default=True, description="Inactive users cannot authenticate.")
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True, onupdate=_utcnow),
    )

    def to_identity(self) -> UserIdentity:
        """Project the stored record onto the identity carried by tokens."""
        role = self.role.value if isinstance(self.role, Role) else str(self.role)
        return UserIdentity(id=self.id, username=self.username, role=role)
