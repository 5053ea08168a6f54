"""Infrastructure Services.

Concrete implementations of the domain's infrastructure ports.
"""

from .event_publisher import (
    BoundedEventDispatcher,
    DispatcherStats,
    InMemoryEventPublisher,
    RabbitMQEventPublisher,
)

__all__ = [
    "BoundedEventDispatcher",
    "DispatcherStats",
    "InMemoryEventPublisher",
    "RabbitMQEventPublisher",
]
