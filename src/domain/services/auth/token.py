"""Access-token issuance and validation.

Access tokens are HMAC-signed JWTs carrying the caller's identity
(``sub``, ``username``, ``role``) plus a random ``jti`` used as the
blacklist key. Refresh tokens are opaque and issued here only as values;
storing them is the session manager's job.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence

import jwt
from jwt import PyJWTError

from src.core.config.settings import settings
from src.core.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    SigningError,
    StoreUnavailableError,
    TesseraError,
    TokenRevokedError,
)
from src.core.logging import BoundLogger, get_component_logger
from src.domain.interfaces.token_management import IAccessTokenBlacklist
from src.domain.value_objects.identity import UserIdentity
from src.domain.value_objects.jwt_token import IssuedAccessToken, RefreshToken, TokenId
from src.utils.i18n import get_translated_message

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Builds and signs access tokens and mints opaque refresh tokens."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer: Optional[str] = None,
        audience: Optional[Sequence[str]] = None,
        access_token_ttl: Optional[timedelta] = None,
        clock: Clock = _utcnow,
        logger: Optional[BoundLogger] = None,
    ):
        self._secret_key = (
            secret_key if secret_key is not None else settings.JWT_SECRET_KEY.get_secret_value()
        )
        self._algorithm = algorithm or settings.JWT_ALGORITHM
        self._issuer = issuer or settings.JWT_ISSUER
        self._audience: List[str] = list(audience or settings.JWT_AUDIENCE)
        self._access_token_ttl = access_token_ttl or timedelta(
            seconds=settings.access_token_ttl_seconds
        )
        self._clock = clock
        self._logger = logger or get_component_logger("token_issuer", __name__)

    def issue_access_token(self, identity: UserIdentity) -> IssuedAccessToken:
        """Sign a new access token for `identity`.

        The token is valid from now (``iat`` = ``nbf``) until now plus the
        access-token lifetime.

        Raises:
            SigningError: If the token cannot be signed (e.g. missing secret).
        """
        if not self._secret_key:
            self._logger.error("Cannot sign access token without a secret", user_id=str(identity.id))
            raise SigningError()

        token_id = TokenId.generate()
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._access_token_ttl
        payload = {
            "sub": str(identity.id),
            "username": identity.username,
            "role": identity.role,
            "jti": token_id.value,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expires_at,
        }
        try:
            token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        except (PyJWTError, TypeError, ValueError, NotImplementedError) as exc:
            self._logger.error(
                "Access token signing failed",
                user_id=str(identity.id),
                error_type=type(exc).__name__,
            )
            raise SigningError() from exc

        self._logger.debug(
            "Access token issued", user_id=str(identity.id), jti=token_id.mask_for_logging()
        )
        return IssuedAccessToken(
            token=token, jti=token_id, issued_at=issued_at, expires_at=expires_at
        )

    def issue_refresh_token(self) -> RefreshToken:
        return RefreshToken.generate()


@dataclass(frozen=True)
class TokenValidationResult:
    """Outcome of validating one access token.

    `valid` is only ever True together with a populated identity. When
    `valid` is False, `error` tells why: an :class:`AuthenticationError`
    subclass means the token itself was rejected, while
    :class:`StoreUnavailableError` means the blacklist could not be consulted
    and the token was rejected to fail closed.
    """

    valid: bool
    subject_id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    message: str = ""
    error: Optional[TesseraError] = None

    @property
    def is_store_failure(self) -> bool:
        return isinstance(self.error, StoreUnavailableError)

    def identity(self) -> UserIdentity:
        """The authenticated identity of a valid result."""
        if not self.valid or self.subject_id is None:
            raise ValueError("Only a valid result carries an identity")
        return UserIdentity.from_claims(
            {"sub": self.subject_id, "username": self.username, "role": self.role}
        )


class TokenValidator:
    """Verifies access tokens and checks them against the blacklist.

    Only the configured HMAC algorithm is accepted, which rules out `none`
    and public-key algorithm confusion.
    """

    def __init__(
        self,
        blacklist: IAccessTokenBlacklist,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer: Optional[str] = None,
        audience: Optional[Sequence[str]] = None,
        logger: Optional[BoundLogger] = None,
    ):
        self._blacklist = blacklist
        self._secret_key = (
            secret_key if secret_key is not None else settings.JWT_SECRET_KEY.get_secret_value()
        )
        self._algorithm = algorithm or settings.JWT_ALGORITHM
        self._issuer = issuer or settings.JWT_ISSUER
        self._audience: List[str] = list(audience or settings.JWT_AUDIENCE)
        self._logger = logger or get_component_logger("token_validator", __name__)

    def _reject(self, error: TesseraError, key: str, language: str) -> TokenValidationResult:
        return TokenValidationResult(
            valid=False, message=get_translated_message(key, language), error=error
        )

    async def validate(self, token: str, language: str = "en") -> TokenValidationResult:
        """Validate `token` and return the identity it carries.

        Never raises for a bad token; every failure is reported through the
        returned result.
        """
        if not token:
            return self._reject(InvalidTokenError("Empty token"), "token_invalid", language)

        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                audience=self._audience,
                options={"require": ["exp", "iat", "sub", "iss"]},
            )
        except jwt.ExpiredSignatureError as exc:
            self._logger.debug("Access token expired")
            return self._reject(ExpiredTokenError(str(exc)), "token_expired", language)
        except PyJWTError as exc:
            self._logger.debug("Access token rejected", reason=str(exc), error_type=type(exc).__name__)
            return self._reject(InvalidTokenError(str(exc)), "token_invalid", language)

        try:
            identity = UserIdentity.from_claims(claims)
        except ValueError as exc:
            self._logger.debug("Access token carries malformed identity claims", reason=str(exc))
            return self._reject(InvalidTokenError(str(exc)), "token_invalid", language)

        jti = TokenId.from_claim(claims.get("jti"))
        if jti is not None:
            try:
                revoked = await self._blacklist.is_blacklisted(jti)
            except StoreUnavailableError as exc:
                self._logger.error(
                    "Token validation failed closed: blacklist unavailable",
                    jti=jti.mask_for_logging(),
                    user_id=str(identity.id),
                )
                return self._reject(exc, "token_validation_unavailable", language)
            if revoked:
                self._logger.info(
                    "Revoked access token presented",
                    jti=jti.mask_for_logging(),
                    user_id=str(identity.id),
                )
                return self._reject(
                    TokenRevokedError("token has been revoked"), "token_revoked", language
                )

        return TokenValidationResult(
            valid=True,
            subject_id=str(identity.id),
            username=identity.username,
            role=identity.role,
        )
