"""Maps domain exceptions onto HTTP responses.

Every error body has a ``detail`` string. Client errors carry the (already
translated) exception message; server-side failures are logged with full
context and answered with a generic message so store or signing internals
never leak.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateUserError,
    PermissionError,
    SigningError,
    StoreUnavailableError,
    TesseraError,
    UserNotFoundError,
    ValidationError,
)
from src.utils.i18n import get_request_language, get_translated_message

logger = get_logger(__name__)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _request_context(request: Request) -> dict:
    return {
        "path": request.url.path,
        "client_ip": request.client.host if request.client else None,
    }


def _language(request: Request) -> str:
    return getattr(request.state, "language", None) or get_request_language(request)


def _detail(status_code: int, detail: str, headers: Optional[dict] = None, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, **extra}, headers=headers)


async def _on_authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    # Bad credentials and every rejected access or refresh token land here.
    logger.warning("Authentication failure", error=exc.code, **_request_context(request))
    return _detail(status.HTTP_401_UNAUTHORIZED, exc.message, headers=BEARER_CHALLENGE)


async def _on_permission_error(request: Request, exc: PermissionError) -> JSONResponse:
    logger.warning("Permission denied", error=exc.code, **_request_context(request))
    return _detail(status.HTTP_403_FORBIDDEN, exc.message)


async def _on_duplicate_user(request: Request, exc: DuplicateUserError) -> JSONResponse:
    return _detail(status.HTTP_409_CONFLICT, exc.message, errors=exc.as_list())


async def _on_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _detail(status.HTTP_400_BAD_REQUEST, exc.message)


async def _on_user_not_found(request: Request, exc: UserNotFoundError) -> JSONResponse:
    return _detail(status.HTTP_404_NOT_FOUND, exc.message)


async def _on_malformed_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    """FastAPI answers these with 422 by default; this service uses 400."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location), "message": error.get("msg", "")})
    logger.info("Malformed request payload", path=request.url.path, error_count=len(errors))
    return _detail(
        status.HTTP_400_BAD_REQUEST,
        get_translated_message("invalid_request_payload", _language(request)),
        errors=errors,
    )


async def _on_server_failure(request: Request, exc: TesseraError) -> JSONResponse:
    logger.error(
        "Infrastructure failure",
        error=exc.code,
        error_type=type(exc).__name__,
        detail=exc.message,
        **_request_context(request),
    )
    return _detail(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        get_translated_message("internal_server_error", _language(request)),
    )


# Starlette walks the exception MRO, so the most specific class listed wins.
EXCEPTION_HANDLERS = (
    (AuthenticationError, _on_authentication_error),
    (PermissionError, _on_permission_error),
    (DuplicateUserError, _on_duplicate_user),
    (ValidationError, _on_validation_error),
    (RequestValidationError, _on_malformed_body),
    (UserNotFoundError, _on_user_not_found),
    (SigningError, _on_server_failure),
    (StoreUnavailableError, _on_server_failure),
    (DatabaseError, _on_server_failure),
    (TesseraError, _on_server_failure),
)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, handler in EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, handler)
