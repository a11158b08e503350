"""Session cache port.

The cache is the source of truth for session liveness, one-time tokens and
rate-limit counters. Implementations bound every call by a deadline and
report unexpected backend failures as ``InternalError``.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class ICache(ABC):
    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Stores ``value`` under ``key`` with an expiry in whole seconds."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, key: str) -> str:
        """Returns the value under ``key``.

        Raises:
            CacheNotFoundError: If the key is absent or expired.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_delete(self, key: str) -> str:
        """Atomically returns and removes the value under ``key``.

        Of any number of concurrent callers at most one receives the value.

        Raises:
            CacheNotFoundError: If the key is absent or expired.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_set(self, key: str, value: str, ttl_seconds: int) -> Optional[str]:
        """Atomically stores ``value`` with an expiry and returns the previous value, if any.

        Of any number of concurrent callers each sees the value written by
        exactly one predecessor, or ``None`` for the first.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Removes ``key``; returns whether it existed. Absent keys are not an error."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_prefix(self, prefix: str) -> int:
        """Removes every key starting with ``prefix`` and returns how many were removed."""
        raise NotImplementedError

    @abstractmethod
    async def eval(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> Any:
        """Runs a server-side script atomically."""
        raise NotImplementedError
