"""Token store interfaces.

Two independent key spaces back the token lifecycle:

- the access-token blacklist, keyed by token identifier (jti), whose entries
  live exactly as long as the token they revoke;
- the refresh-token store, mapping an opaque refresh token to its owner.

Implementations raise :class:`~src.core.exceptions.StoreUnavailableError`
when the backing store cannot be reached. A missing entry is never an error.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.value_objects.jwt_token import RefreshToken, TokenId


class IAccessTokenBlacklist(ABC):
    """Set of revoked access-token identifiers with per-entry expiry."""

    @abstractmethod
    async def add(self, jti: TokenId, ttl_seconds: int) -> None:
        """Marks `jti` as revoked for `ttl_seconds`.

        Raises:
            StoreUnavailableError: If the write fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def is_blacklisted(self, jti: TokenId) -> bool:
        """Returns True if `jti` has been revoked and the entry has not expired.

        Raises:
            StoreUnavailableError: If the lookup fails. Callers must fail closed.
        """
        raise NotImplementedError


class IRefreshTokenStore(ABC):
    """Server-side record of live refresh tokens."""

    @abstractmethod
    async def store(self, token: RefreshToken, user_id: str, ttl_seconds: int) -> None:
        """Records `token` as belonging to `user_id` for `ttl_seconds`."""
        raise NotImplementedError

    @abstractmethod
    async def consume(self, token: RefreshToken) -> Optional[str]:
        """Atomically reads and deletes the entry for `token`.

        Of any number of concurrent callers presenting the same token, at most
        one receives the user id; every other caller receives None.
        """
        raise NotImplementedError

    @abstractmethod
    async def revoke(self, token: RefreshToken) -> None:
        """Deletes the entry for `token`. Deleting a missing entry is a no-op."""
        raise NotImplementedError
