"""
Asynchronous database utilities.

Provides the async SQLAlchemy engine (asyncpg), the session factory used by
the repositories, and helpers to create the schema in test suites.

**Security Note**: Use SSL parameters in DATABASE_URL when connecting over
untrusted networks, and never log the URL itself.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from warden.core.config.settings import settings

logger = structlog.get_logger(__name__)


def build_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    """Creates an async engine; pool options apply to server databases only."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False, **kwargs)
    return create_async_engine(
        url,
        echo=False,
        pool_size=settings.POSTGRES_POOL_SIZE,
        max_overflow=settings.POSTGRES_MAX_OVERFLOW,
        pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
        pool_pre_ping=True,
        **kwargs,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@lru_cache
def get_engine() -> AsyncEngine:
    return build_engine()


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return build_session_factory(get_engine())


@asynccontextmanager
async def get_async_db(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yields an AsyncSession, rolling back if the block raises.

    Yields:
        AsyncSession: An asynchronous database session.
    """
    factory = session_factory or get_session_factory()
    async with factory() as session:
        try:
            yield session
        except Exception:  # noqa: BLE001 - any DB error must trigger rollback
            await session.rollback()
            logger.debug("Async database session rolled back")
            raise


async def create_async_db_and_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create tables using the async engine (mainly for test suites and local development).
    """
    engine = engine or get_engine()
    logger.info("Creating async database tables")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Async database tables created")


async def dispose_engine() -> None:
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
