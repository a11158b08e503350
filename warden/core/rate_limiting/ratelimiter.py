"""Fixed-window rate limiter backed by a single Redis script.

Increment, first-hit expiry and TTL readback run as one atomic script, so
within a window at most ``limit`` requests per key are allowed and the
allowed ones are the first ``limit`` to reach the cache.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from structlog import get_logger

from warden.core.config.redis import parse_rate
from warden.domain.interfaces.cache import ICache

logger = get_logger(__name__)

RATE_LIMIT_SCRIPT = """
local key = KEYS[1]
local limit = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local current = redis.call('INCR', key)
if current == 1 then
  redis.call('EXPIRE', key, window)
end
local ttl = redis.call('TTL', key)
return {current, limit, ttl}
"""


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    current: int
    limit: int
    reset_after: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.current, 0)

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_after),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.reset_after)
        return headers


class RateLimiter:
    """Counts requests per identifier in fixed windows.

    Attributes:
        name: Scope of the limiter; part of the key ``rate_limit:{name}:{identifier}``.
        limit: Requests allowed per window.
        window_seconds: Window length.
    """

    def __init__(self, name: str, cache: ICache, limit: int, window_seconds: int):
        self.name = name
        self.cache = cache
        self.limit = limit
        self.window_seconds = window_seconds

    @classmethod
    def from_rate(cls, name: str, cache: ICache, rate: str) -> "RateLimiter":
        limit, window = parse_rate(rate)
        return cls(name, cache, limit, window)

    def key(self, identifier: str) -> str:
        return f"rate_limit:{self.name}:{identifier}"

    async def check(self, identifier: str) -> RateLimitResult:
        current, limit, ttl = await self.cache.eval(
            RATE_LIMIT_SCRIPT, [self.key(identifier)], [self.limit, self.window_seconds]
        )
        current, limit, ttl = int(current), int(limit), int(ttl)
        result = RateLimitResult(
            allowed=current <= limit,
            current=current,
            limit=limit,
            reset_after=ttl if ttl >= 0 else self.window_seconds,
        )
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                limiter=self.name,
                identifier=identifier,
                current=current,
                limit=limit,
            )
        return result


def client_identifier(request: Request) -> str:
    """First ``X-Forwarded-For`` address, else the peer address."""
    forwarded: Optional[str] = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
