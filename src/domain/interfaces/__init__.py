"""Domain Interfaces for dependency inversion.

These interfaces define contracts that infrastructure layers must implement,
so that domain services depend on abstractions rather than on Redis,
PostgreSQL or RabbitMQ directly.
"""

from .repositories import IUserRepository
from .services import IEventDispatcher, IEventPublisher
from .token_management import IAccessTokenBlacklist, IRefreshTokenStore

__all__ = [
    "IUserRepository",
    "IAccessTokenBlacklist",
    "IRefreshTokenStore",
    "IEventPublisher",
    "IEventDispatcher",
]
