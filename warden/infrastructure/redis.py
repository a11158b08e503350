"""
Redis Connection Module

Creates the asynchronous Redis client shared by the session cache and the
rate limiter. One client (and its connection pool) lives for the whole
application lifespan; see ``warden.core.lifecycle``.
"""

import structlog
from redis.asyncio import Redis

from warden.core.config.settings import settings

logger = structlog.get_logger(__name__)


def create_redis_client(url: str | None = None) -> Redis:
    """
    Provides an asynchronous Redis client decoding responses to ``str``.

    **Security Note**: Use a ``rediss://`` URL when Redis is not on a trusted network.
    """
    client = Redis.from_url(url or settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    logger.debug("Redis client created")
    return client


async def close_redis_client(client: Redis) -> None:
    await client.aclose()
    logger.debug("Redis client closed")
