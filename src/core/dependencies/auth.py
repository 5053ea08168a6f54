from __future__ import annotations

from typing import Annotated, Callable, FrozenSet

import structlog
from fastapi import Depends, HTTPException, Request, status

from src.core.config.settings import settings
from src.core.exceptions import PermissionError
from src.domain.services.auth.token import TokenValidator
from src.domain.value_objects.identity import UserIdentity
from src.infrastructure.dependency_injection.auth_dependencies import get_token_validator
from src.utils.i18n import get_translated_message

__all__ = [
    "BEARER_PREFIX",
    "extract_bearer_token",
    "get_current_identity",
    "get_bearer_token",
    "require_roles",
    "CurrentIdentity",
]

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _language(request: Request) -> str:
    return getattr(request.state, "language", settings.DEFAULT_LANGUAGE)


def _auth_fail(detail: str) -> HTTPException:  # noqa: D401
    """Consistently shaped *401* UNAUTHORIZED response."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the credential after a literal ``"Bearer "`` prefix, or None."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


async def get_current_identity(  # noqa: D401
    request: Request,
    validator: Annotated[TokenValidator, Depends(get_token_validator)],
) -> UserIdentity:
    """Authenticate the bearer token and return the caller's identity.

    The identity comes from the verified token claims only; no database
    lookup happens here. It is also stored on ``request.state.identity``
    together with the raw token (``request.state.access_token``).

    Raises:
        HTTPException: 401 for a missing, malformed, invalid, expired or
            revoked token; 500 when the blacklist could not be consulted.
    """
    language = _language(request)
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise _auth_fail(get_translated_message("missing_or_malformed_bearer", language))

    result = await validator.validate(token, language)
    if result.is_store_failure:
        logger.error(
            "Authorization failed: token store unavailable",
            path=request.url.path,
            error_code=result.error.code,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translated_message("token_validation_unavailable", language),
        )
    if not result.valid:
        raise _auth_fail(
            get_translated_message("invalid_token_with_reason", language).format(reason=result.message)
        )

    identity = result.identity()
    request.state.identity = identity
    request.state.access_token = token
    structlog.contextvars.bind_contextvars(user_id=str(identity.id))
    return identity


CurrentIdentity = Annotated[UserIdentity, Depends(get_current_identity)]


async def get_bearer_token(request: Request, identity: CurrentIdentity) -> str:
    """The raw access token of an already authenticated request."""
    return request.state.access_token


def require_roles(*roles: str) -> Callable[..., UserIdentity]:
    """Build a dependency that admits only callers whose role is in `roles`.

    Runs after :func:`get_current_identity`, so an unauthenticated request is
    answered with 401 before the role is ever looked at.
    """
    allowed: FrozenSet[str] = frozenset(roles)

    def _require_role(request: Request, identity: CurrentIdentity) -> UserIdentity:
        if not identity.has_role(allowed):
            logger.warning(
                "Access denied: role not allowed",
                user_id=str(identity.id),
                role=identity.role,
                path=request.url.path,
            )
            raise PermissionError(get_translated_message("access_denied", _language(request)))
        return identity

    return _require_role
