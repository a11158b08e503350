"""Application factory for creating and configuring the FastAPI application."""

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from warden.adapters.api.v1 import api_router
from warden.core.config.settings import settings
from warden.core.handlers import register_exception_handlers
from warden.core.lifecycle import create_lifespan_manager
from warden.core.middleware import configure_middleware
from warden.infrastructure.dependency_injection.container import Container


def create_application(container: Optional[Container] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Pre-built service container. When omitted, the lifespan
            builds one from settings against Redis, PostgreSQL, SMTP and MinIO.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )
    if container is not None:
        app.state.container = container

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app
