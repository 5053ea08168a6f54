"""Exception hierarchy for tessera.

Two families matter to callers. ``AuthenticationError`` and its subclasses
mean the presented credential is bad and map to 401. ``SigningError``,
``StoreUnavailableError`` and ``DatabaseError`` mean the service could not
decide and map to 500. Code that catches one family must never convert it
into the other.

Every exception has a ``message`` (already translated when it is meant for the
client) and a stable machine-readable ``code``.
"""

from typing import Dict, Final, List, Optional

__all__: Final = [
    "TesseraError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "TokenRevokedError",
    "InvalidRefreshTokenError",
    "PermissionError",
    "ValidationError",
    "DuplicateUserError",
    "UserNotFoundError",
    "SigningError",
    "StoreUnavailableError",
    "DatabaseError",
]


class TesseraError(Exception):
    """Root of all tessera errors.

    Subclasses set ``code`` and, where a sensible one exists,
    ``default_message`` so they can be raised without arguments.
    """

    code: str = "generic_error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# 401


class AuthenticationError(TesseraError):
    code = "authentication_error"
    default_message = "Authentication failed"


class InvalidCredentialsError(AuthenticationError):
    """Same message for unknown user and wrong password."""

    code = "invalid_credentials"
    default_message = "invalid credentials"


class InvalidTokenError(AuthenticationError):
    code = "invalid_token"
    default_message = "token is invalid"


class ExpiredTokenError(AuthenticationError):
    code = "expired_token"
    default_message = "token has expired"


class TokenRevokedError(AuthenticationError):
    code = "token_revoked"
    default_message = "token has been revoked"


class InvalidRefreshTokenError(AuthenticationError):
    """Unknown, already consumed or expired refresh token."""

    code = "invalid_refresh_token"
    default_message = "invalid or expired refresh token"


# 403


class PermissionError(TesseraError):
    code = "permission_denied"
    default_message = "Access denied"


# 400 / 404 / 409


class ValidationError(TesseraError):
    code = "validation_error"
    default_message = "Invalid input"


class DuplicateUserError(ValidationError):
    """Username or email already taken; answered with 409.

    ``fields`` maps each clashing field to a message.
    """

    code = "duplicate_user_error"
    default_message = "User already exists"

    def __init__(
        self,
        message: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message, code)
        self.fields: Dict[str, str] = dict(fields or {})

    def as_list(self) -> List[Dict[str, str]]:
        return [{"field": name, "message": text} for name, text in self.fields.items()]


class UserNotFoundError(TesseraError):
    code = "user_not_found"
    default_message = "User not found"


# 500


class SigningError(TesseraError):
    code = "signing_error"
    default_message = "Failed to sign token"


class StoreUnavailableError(TesseraError):
    """A revocation or session store round trip failed.

    Says nothing about the token: the service could not find out.
    """

    code = "store_unavailable"
    default_message = "Token store unavailable"


class DatabaseError(TesseraError):
    code = "database_error"
    default_message = "Database operation failed"
