"""Domain Events.

All events are immutable and represent significant business occurrences that
other services may need to react to.
"""

from .authentication_events import AccountEvent, UserLoggedInEvent, UserRegisteredEvent

__all__ = ["AccountEvent", "UserLoggedInEvent", "UserRegisteredEvent"]
