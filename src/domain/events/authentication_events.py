"""Authentication Domain Events.

These events represent significant business occurrences in the account domain
that other services may need to react to (welcome mails, analytics, audit).
Each event names its ``event_type``; the broker publisher routes on it.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional, Union


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class UserRegisteredEvent:
    """Event published when a user successfully registers.

    Attributes:
        user_id: Identifier of the new account
        email: Email address of the registered user
        username: Username of the registered user
        created_at: When the account was created
        correlation_id: Optional request correlation ID for tracing
    """

    event_type: ClassVar[str] = "user_registered"

    user_id: str
    email: str
    username: str
    created_at: datetime
    correlation_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "created_at", _aware(self.created_at))

    @classmethod
    def create(
        cls,
        user_id: str,
        email: str,
        username: str,
        created_at: Optional[datetime] = None,
        correlation_id: Optional[str] = None,
    ) -> "UserRegisteredEvent":
        return cls(
            user_id=str(user_id),
            email=email,
            username=username,
            created_at=created_at or datetime.now(timezone.utc),
            correlation_id=correlation_id,
        )

    def as_dict(self) -> Dict[str, Any]:
        """Wire representation sent to the broker."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "username": self.username,
            "created_at": self.created_at.isoformat(),
        }

    def to_json(self) -> bytes:
        return json.dumps(self.as_dict()).encode("utf-8")


@dataclass(frozen=True)
class UserLoggedInEvent:
    """Login activity record, published after a session has been started.

    ``session_id`` is the ``jti`` of the access token issued by that login,
    never the refresh token. ``ip_address`` and ``user_agent`` are whatever
    the request carried and may be None.
    """

    event_type: ClassVar[str] = "user_logged_in"
    NO_SESSION: ClassVar[str] = "no-session"

    user_id: str
    username: str
    session_id: str
    logged_in_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    correlation_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "logged_in_at", _aware(self.logged_in_at))

    @classmethod
    def create(
        cls,
        user_id: str,
        username: str,
        session_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        correlation_id: Optional[str] = None,
        logged_in_at: Optional[datetime] = None,
    ) -> "UserLoggedInEvent":
        return cls(
            user_id=str(user_id),
            username=username,
            session_id=session_id or cls.NO_SESSION,
            logged_in_at=logged_in_at or datetime.now(timezone.utc),
            ip_address=ip_address,
            user_agent=user_agent,
            correlation_id=correlation_id,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "LOGIN",
            "user_id": self.user_id,
            "session_id": self.session_id,
            "timestamp": self.logged_in_at.isoformat(),
            "metadata": {
                "ip_address": self.ip_address,
                "user_agent": self.user_agent,
                "username": self.username,
            },
        }

    def to_json(self) -> bytes:
        return json.dumps(self.as_dict()).encode("utf-8")


AccountEvent = Union[UserRegisteredEvent, UserLoggedInEvent]
