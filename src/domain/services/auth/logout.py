"""Access-token revocation (logout).

The token's claims are read without checking its signature. Logout sits
behind the authorization dependency, which has already verified the very
same bearer token, so the unverified read never sees a forged token on
that path. Any other caller can at worst blacklist a jti for no longer
than the expiry it itself claims.
"""

import math
from datetime import datetime, timezone
from typing import Callable, Optional

import jwt
from jwt import PyJWTError

from src.core.exceptions import ExpiredTokenError, InvalidTokenError
from src.core.logging import BoundLogger, get_component_logger
from src.domain.interfaces.token_management import IAccessTokenBlacklist
from src.domain.services.auth.session import SessionRotationManager
from src.domain.value_objects.jwt_token import UnverifiedAccessClaims
from src.utils.i18n import get_translated_message


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenRevocationService:
    """Blacklists access tokens for the rest of their lifetime."""

    def __init__(
        self,
        blacklist: IAccessTokenBlacklist,
        sessions: Optional[SessionRotationManager] = None,
        clock: Callable[[], datetime] = _utcnow,
        logger: Optional[BoundLogger] = None,
    ):
        self._blacklist = blacklist
        self._sessions = sessions
        self._clock = clock
        self._logger = logger or get_component_logger("token_revocation", __name__)

    @staticmethod
    def read_claims(access_token: str, language: str = "en") -> UnverifiedAccessClaims:
        """Read `jti` and `exp` without verifying signature or expiry.

        Raises:
            InvalidTokenError: If the token is not a decodable JWT.
        """
        try:
            payload = jwt.decode(
                access_token,
                options={"verify_signature": False, "verify_exp": False},
            )
        except PyJWTError as exc:
            raise InvalidTokenError(get_translated_message("token_invalid", language)) from exc
        return UnverifiedAccessClaims.from_payload(payload)

    async def revoke(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        language: str = "en",
    ) -> None:
        """Blacklist `access_token` and, optionally, drop `refresh_token`.

        The blacklist entry expires when the access token would have. The
        refresh token revocation is best effort and independent of the
        blacklist outcome.

        Raises:
            InvalidTokenError: If the token cannot be decoded or has no jti.
            ExpiredTokenError: If the token has already expired.
            StoreUnavailableError: If the blacklist write fails or times out.
        """
        try:
            claims = self.read_claims(access_token, language)

            if claims.jti is None:
                self._logger.warning("Logout with a token that carries no jti")
                raise InvalidTokenError(get_translated_message("token_missing_jti", language))

            remaining = claims.remaining_lifetime(self._clock())
            if remaining.total_seconds() <= 0:
                self._logger.info("Logout with an already expired token", jti=claims.jti.mask_for_logging())
                raise ExpiredTokenError(get_translated_message("token_already_expired", language))

            ttl_seconds = max(1, math.ceil(remaining.total_seconds()))
            await self._blacklist.add(claims.jti, ttl_seconds)
            self._logger.info(
                "Access token revoked", jti=claims.jti.mask_for_logging(), ttl_seconds=ttl_seconds
            )
        finally:
            if refresh_token and self._sessions is not None:
                await self._sessions.revoke_refresh_token(refresh_token)
