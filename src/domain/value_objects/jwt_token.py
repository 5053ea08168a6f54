"""Immutable token types passed between the issuer, the validator and the stores."""

import base64
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Mapping, Optional


@dataclass(frozen=True)
class TokenId:
    """The ``jti`` of an access token; the key of its blacklist entry.

    Ids minted here are 32 random bytes as unpadded URL-safe base64 (43
    chars). Ids read back from a claim only have to be non-empty strings.
    """

    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Token ID cannot be empty")

    @classmethod
    def generate(cls) -> "TokenId":
        return cls(base64.urlsafe_b64encode(secrets.token_bytes(32)).rstrip(b"=").decode("ascii"))

    @classmethod
    def from_claim(cls, value: Any) -> Optional["TokenId"]:
        """Return the identifier carried by a `jti` claim, or None when absent."""
        if not value or not isinstance(value, str):
            return None
        return cls(value)

    def mask_for_logging(self) -> str:
        return self.value[:4] + "*" * max(len(self.value) - 4, 0)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RefreshToken:
    """Opaque refresh token.

    A random uuid4 string with no embedded claims. The only server-side
    meaning it has is the store entry that maps it to its owner.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 256

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Refresh token cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError("Refresh token is too long")

    @classmethod
    def generate(cls) -> "RefreshToken":
        """Generate an unpredictable refresh token (uuid4 uses os.urandom)."""
        return cls(str(uuid.uuid4()))

    def mask_for_logging(self) -> str:
        return self.value[:8] + "***"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IssuedAccessToken:
    """A freshly signed access token together with the metadata the issuer chose."""

    token: str
    jti: TokenId
    issued_at: datetime
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        """Lifetime in whole seconds, as reported to clients."""
        return int((self.expires_at - self.issued_at).total_seconds())


@dataclass(frozen=True)
class UnverifiedAccessClaims:
    """Claims read from an access token without checking its signature.

    Used only to locate the jti and expiry of a token that is being revoked.
    """

    jti: Optional[TokenId]
    expires_at: Optional[datetime]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UnverifiedAccessClaims":
        exp = payload.get("exp")
        expires_at = None
        if isinstance(exp, (int, float)) and not isinstance(exp, bool):
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        return cls(jti=TokenId.from_claim(payload.get("jti")), expires_at=expires_at)

    def remaining_lifetime(self, now: Optional[datetime] = None) -> timedelta:
        """Time left before expiry; zero or negative once expired or when unknown."""
        if self.expires_at is None:
            return timedelta(0)
        return self.expires_at - (now or datetime.now(timezone.utc))


@dataclass(frozen=True)
class TokenPair:
    """Access token plus rotated refresh token, handed back to the client.

    ``session_id`` is the access token's jti. It stays server side and is
    not part of the response body.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
    session_id: Optional[str] = None
