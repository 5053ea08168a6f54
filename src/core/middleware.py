"""HTTP middleware: CORS, response language and per-request log context."""

import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.core.config.settings import settings
from src.utils.i18n import get_request_language

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger("tessera.http")


def configure_middleware(app: FastAPI) -> None:
    # Starlette runs the last registered middleware outermost.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(set_language_middleware)
    app.middleware("http")(request_logging_middleware)


async def set_language_middleware(request: Request, call_next):
    """Store the negotiated language on ``request.state`` and echo it as ``Content-Language``."""
    request.state.language = get_request_language(request)
    response = await call_next(request)
    response.headers["Content-Language"] = request.state.language
    return response


async def request_logging_middleware(request: Request, call_next):
    """Bind a correlation id, method and path to every log line of the request.

    A caller-supplied ``X-Request-ID`` is reused, otherwise a uuid4 is minted.
    Either way it is returned on the response.
    """
    correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=correlation_id, method=request.method, path=request.url.path
    )

    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled error while serving request")
        raise
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    response.headers[REQUEST_ID_HEADER] = correlation_id
    logger.info("Request completed", status_code=response.status_code, duration_ms=elapsed_ms)
    structlog.contextvars.clear_contextvars()
    return response
