"""Redis implementation of the session cache port.

Every operation is bounded by ``CACHE_OPERATION_TIMEOUT``. Backend failures
and timeouts are reported to the error tracker and surface as
``InternalError``; a missing key surfaces as ``CacheNotFoundError``.
"""

import asyncio
from typing import Any, Awaitable, Optional, Sequence, TypeVar

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from warden.core.exceptions import CacheNotFoundError, InternalError
from warden.domain.interfaces.cache import ICache
from warden.domain.interfaces.error_tracking import IErrorTracker

logger = structlog.get_logger(__name__)

T = TypeVar("T")

SCAN_BATCH_SIZE = 100
_GLOB_SPECIAL = "\\*?[]"


def escape_glob(value: str) -> str:
    """Escapes Redis glob metacharacters so a prefix matches literally."""
    return "".join("\\" + ch if ch in _GLOB_SPECIAL else ch for ch in value)


class RedisCache(ICache):
    def __init__(self, redis_client: Redis, error_tracker: IErrorTracker, timeout: float = 5.0):
        self.redis_client = redis_client
        self.error_tracker = error_tracker
        self.timeout = timeout

    async def _call(self, operation: str, key: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except (RedisError, asyncio.TimeoutError) as e:
            logger.error("Cache operation failed", operation=operation, key=key, error=str(e))
            self.error_tracker.capture_exception(e, operation=operation, key=key)
            raise InternalError() from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._call("set", key, self.redis_client.set(key, value, ex=max(int(ttl_seconds), 1)))

    async def get(self, key: str) -> str:
        value = await self._call("get", key, self.redis_client.get(key))
        if value is None:
            raise CacheNotFoundError()
        return value

    async def get_delete(self, key: str) -> str:
        value = await self._call("getdel", key, self.redis_client.getdel(key))
        if value is None:
            raise CacheNotFoundError()
        return value

    async def get_set(self, key: str, value: str, ttl_seconds: int) -> Optional[str]:
        return await self._call(
            "set_get", key, self.redis_client.set(key, value, ex=max(int(ttl_seconds), 1), get=True)
        )

    async def delete(self, key: str) -> bool:
        removed = await self._call("delete", key, self.redis_client.delete(key))
        return bool(removed)

    async def delete_by_prefix(self, prefix: str) -> int:
        pattern = escape_glob(prefix) + "*"
        removed = 0
        cursor = 0
        while True:
            cursor, keys = await self._call(
                "scan", pattern, self.redis_client.scan(cursor=cursor, match=pattern, count=SCAN_BATCH_SIZE)
            )
            if keys:
                removed += await self._call("delete", pattern, self.redis_client.delete(*keys))
            if cursor == 0:
                break
        logger.debug("Deleted keys by prefix", prefix=prefix, removed=removed)
        return removed

    async def eval(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> Any:
        return await self._call(
            "eval", ",".join(keys), self.redis_client.eval(script, len(keys), *keys, *args)
        )
