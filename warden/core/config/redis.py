"""
Redis cache and rate limiting settings.
"""
import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_PERIODS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}


def parse_rate(value: str) -> tuple[int, int]:
    """Splits a rate string such as ``"200/minute"`` into ``(limit, window_seconds)``."""
    count, period = value.split("/")
    return int(count), _PERIODS[period]


class RedisSettings(BaseSettings):
    """
    Defines settings for the Redis session cache.

    The cache is the source of truth for session liveness and for one-time
    tokens, so losing it logs every user out and burns every pending link.

    Security Note:
        - REDIS_PASSWORD must be set in production.
    """
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = Field(ge=1, le=65535, default=6379)
    REDIS_PASSWORD: SecretStr = SecretStr("")
    REDIS_SSL: bool = False
    REDIS_URL: str = Field(default="", validate_default=True)

    CACHE_OPERATION_TIMEOUT: float = Field(gt=0, default=5.0)
    USER_CACHE_TTL_SECONDS: int = Field(ge=1, default=300)

    # Rate limiting settings
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_GLOBAL: str = "200/minute"
    RATE_LIMIT_MAIL: str = "1/minute"

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def assemble_redis_url(cls, v: str | None, info: ValidationInfo) -> str:
        """
        Assembles the Redis connection URL if not provided explicitly.

        Args:
            v: Explicitly provided URL or None.
            info: Validation context with other field values.

        Returns:
            Assembled or provided Redis URL.
        """
        if v:
            return v

        values = info.data
        protocol = "rediss" if values.get("REDIS_SSL") else "redis"
        redis_password = values.get("REDIS_PASSWORD")
        secret = redis_password.get_secret_value() if redis_password else ""
        password = f":{secret}@" if secret else ""

        url = f"{protocol}://{password}{values.get('REDIS_HOST')}:{values.get('REDIS_PORT')}/0"
        logger.debug("Assembled REDIS_URL (password masked for security).")
        return url

    @field_validator("RATE_LIMIT_GLOBAL", "RATE_LIMIT_MAIL")
    @classmethod
    def validate_rate_limit_format(cls, value: str) -> str:
        """
        Validates the format of rate limit strings (e.g., '100/minute').

        Raises:
            ValueError: If format is invalid.
        """
        try:
            count, period = value.split("/")
        except ValueError:
            raise ValueError(f"Invalid rate limit format: {value}")
        if not count.isdigit() or int(count) <= 0:
            raise ValueError("Rate limit count must be a positive integer.")
        if period not in _PERIODS:
            raise ValueError("Rate limit period must be second, minute, hour, or day.")
        return value
