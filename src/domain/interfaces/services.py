"""Infrastructure service interfaces used by domain services."""

from abc import ABC, abstractmethod

from src.domain.events.authentication_events import AccountEvent


class IEventPublisher(ABC):
    """Interface for publishing domain events to the message broker."""

    @abstractmethod
    async def publish(self, event: AccountEvent) -> None:
        """Publish a single event.

        Raises whatever the transport raises; delivery policy (timeouts,
        dropping) belongs to the caller.
        """
        raise NotImplementedError


class IEventDispatcher(ABC):
    """Non-blocking hand-off of events to a background publisher."""

    @abstractmethod
    def dispatch(self, event: AccountEvent) -> bool:
        """Enqueue `event` without waiting.

        Returns:
            True if the event was accepted, False if it was dropped.
        """
        raise NotImplementedError
