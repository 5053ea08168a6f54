"""FastAPI app factory for tessera.

Wiring order matters: middleware first, then the error handlers that turn
domain failures into ``{"detail": ...}`` bodies, then the versioned router.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.adapters.api.v1 import api_router
from src.core.config.settings import settings
from src.core.handlers import register_exception_handlers
from src.core.lifecycle import create_lifespan_manager
from src.core.middleware import configure_middleware
from src.utils.i18n import get_translated_message

API_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login, token refresh, logout and validation."},
    {"name": "users", "description": "Endpoints that require a valid access token."},
    {"name": "health", "description": "Liveness of the service and its stores."},
]


def create_application() -> FastAPI:
    """Build a fresh app. Interactive docs exist only with DEBUG on."""
    docs_enabled = settings.DEBUG
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        redoc_url=None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
        default_response_description=get_translated_message(
            "successful_response", settings.DEFAULT_LANGUAGE
        ),
    )

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    return app
