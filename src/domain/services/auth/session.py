"""Refresh-token sessions and their rotation.

A session is nothing more than the store entry ``refresh_token:<token>`` ->
user id. Rotation consumes that entry with one atomic get-and-delete, so
two requests racing with the same refresh token can never both succeed.
"""

import uuid
from datetime import timedelta
from typing import Optional

from src.core.config.settings import settings
from src.core.exceptions import InvalidRefreshTokenError, StoreUnavailableError
from src.core.logging import BoundLogger, get_component_logger
from src.domain.interfaces.repositories import IUserRepository
from src.domain.interfaces.token_management import IRefreshTokenStore
from src.domain.services.auth.token import TokenIssuer
from src.domain.value_objects.identity import UserIdentity
from src.domain.value_objects.jwt_token import RefreshToken, TokenPair
from src.utils.i18n import get_translated_message


class SessionRotationManager:
    """Starts sessions at login and rotates them on refresh."""

    def __init__(
        self,
        refresh_store: IRefreshTokenStore,
        user_repository: IUserRepository,
        issuer: TokenIssuer,
        refresh_token_ttl: Optional[timedelta] = None,
        logger: Optional[BoundLogger] = None,
    ):
        self._refresh_store = refresh_store
        self._user_repository = user_repository
        self._issuer = issuer
        self._refresh_ttl_seconds = (
            int(refresh_token_ttl.total_seconds())
            if refresh_token_ttl is not None
            else settings.refresh_token_ttl_seconds
        )
        self._logger = logger or get_component_logger("session_rotation", __name__)

    async def start_session(self, identity: UserIdentity) -> TokenPair:
        """Issue a fresh token pair and record the refresh token.

        Raises:
            SigningError: If the access token cannot be signed.
            StoreUnavailableError: If the refresh token cannot be stored. No
                pair is handed out in that case.
        """
        access = self._issuer.issue_access_token(identity)
        refresh = self._issuer.issue_refresh_token()
        await self._refresh_store.store(refresh, str(identity.id), self._refresh_ttl_seconds)

        self._logger.info(
            "Session started",
            user_id=str(identity.id),
            jti=access.jti.mask_for_logging(),
            refresh_token=refresh.mask_for_logging(),
        )
        return TokenPair(
            access_token=access.token,
            refresh_token=refresh.value,
            expires_in=access.expires_in,
            session_id=access.jti.value,
        )

    async def refresh(self, refresh_token: str, language: str = "en") -> TokenPair:
        """Exchange `refresh_token` for a new pair.

        The presented token is consumed before anything else happens; whatever
        fails afterwards, it can never be used again.

        Raises:
            InvalidRefreshTokenError: If the token is unknown, already used,
                expired, or its owner no longer exists or is inactive. Also
                raised when the store cannot be read, after logging the outage.
            SigningError: If the new access token cannot be signed.
            StoreUnavailableError: If the new refresh token cannot be stored.
        """
        invalid = InvalidRefreshTokenError(get_translated_message("invalid_refresh_token", language))
        try:
            presented = RefreshToken(refresh_token)
        except ValueError:
            raise invalid

        try:
            user_id = await self._refresh_store.consume(presented)
        except StoreUnavailableError as exc:
            self._logger.error(
                "Refresh rejected: session store unavailable",
                refresh_token=presented.mask_for_logging(),
            )
            raise invalid from exc

        if user_id is None:
            self._logger.warning(
                "Unknown or already used refresh token presented",
                refresh_token=presented.mask_for_logging(),
            )
            raise invalid

        try:
            owner_id = uuid.UUID(user_id)
        except ValueError:
            self._logger.error("Refresh token bound to malformed user id")
            raise invalid

        user = await self._user_repository.get_by_id(owner_id)
        if user is None or not user.is_active:
            self._logger.warning(
                "Refresh token owner missing or inactive", user_id=user_id
            )
            raise invalid

        pair = await self.start_session(user.to_identity())
        self._logger.info(
            "Session rotated",
            user_id=user_id,
            old_refresh_token=presented.mask_for_logging(),
        )
        return pair

    async def revoke_refresh_token(self, refresh_token: str) -> bool:
        """Delete a refresh token entry, best effort.

        Returns:
            True if the delete went through, False if the value was malformed
            or the store failed (the failure is logged, never raised).
        """
        try:
            token = RefreshToken(refresh_token)
        except ValueError:
            return False
        try:
            await self._refresh_store.revoke(token)
        except StoreUnavailableError:
            self._logger.warning(
                "Best-effort refresh token revocation failed",
                refresh_token=token.mask_for_logging(),
            )
            return False
        self._logger.info("Refresh token revoked", refresh_token=token.mask_for_logging())
        return True
