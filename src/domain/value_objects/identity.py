"""Authenticated identity value object.

Every source of user data (database rows, verified token claims) converts to
:class:`UserIdentity` through an explicit, typed function. Nothing looks up
attributes by name at runtime.
"""

import uuid
from dataclasses import dataclass
from typing import AbstractSet, Any, Mapping, Protocol, runtime_checkable


@dataclass(frozen=True)
class UserIdentity:
    """Who the caller is: stable id, username and role.

    Immutable for the lifetime of a request.
    """

    id: uuid.UUID
    username: str
    role: str

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "UserIdentity":
        """Build an identity from verified access-token claims.

        Raises:
            ValueError: If `sub`, `username` or `role` is missing or malformed.
        """
        subject = claims.get("sub")
        username = claims.get("username")
        role = claims.get("role")
        if not isinstance(subject, str) or not subject:
            raise ValueError("Token subject is missing")
        if not isinstance(username, str) or not username:
            raise ValueError("Token username is missing")
        if not isinstance(role, str) or not role:
            raise ValueError("Token role is missing")
        return cls(id=uuid.UUID(subject), username=username, role=role)

    def has_role(self, allowed_roles: AbstractSet[str]) -> bool:
        return self.role in allowed_roles


@runtime_checkable
class IdentitySource(Protocol):
    """Anything that can project itself onto a :class:`UserIdentity`."""

    def to_identity(self) -> UserIdentity:
        ...
