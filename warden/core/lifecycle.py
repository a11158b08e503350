"""Application lifecycle management.

Builds the service container on startup unless one was injected (tests do
this), and releases the Redis client and database engine on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from warden.core.config.settings import settings
from warden.core.logging import logger
from warden.infrastructure.database.async_db import dispose_engine
from warden.infrastructure.dependency_injection.container import build_container
from warden.infrastructure.redis import close_redis_client, create_redis_client


def create_lifespan_manager():
    """Create the application lifespan manager."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        redis_client = None
        if getattr(app.state, "container", None) is None:
            redis_client = create_redis_client()
            app.state.container = build_container(settings, redis_client=redis_client)
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        if redis_client is not None:
            await close_redis_client(redis_client)
            await dispose_engine()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
