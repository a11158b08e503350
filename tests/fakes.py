"""In-memory stand-ins for the service ports, driven by a controllable clock."""

import fnmatch
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from warden.core.exceptions import CacheNotFoundError, FileUploadError
from warden.core.rate_limiting.ratelimiter import RATE_LIMIT_SCRIPT
from warden.domain.interfaces.cache import ICache
from warden.domain.interfaces.clock import IClock
from warden.domain.interfaces.error_tracking import IErrorTracker
from warden.domain.interfaces.mail import IMailTransport
from warden.domain.interfaces.storage import IObjectStorage


class FrozenClock(IClock):
    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime.now(timezone.utc).replace(microsecond=0)

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> None:
        self._now += delta


class InMemoryCache(ICache):
    """Dictionary cache whose TTLs follow the injected clock."""

    def __init__(self, clock: FrozenClock):
        self.clock = clock
        self._data: Dict[str, Tuple[Any, Optional[datetime]]] = {}

    def _live(self, key: str) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        _, expires_at = entry
        if expires_at is not None and expires_at <= self.clock.now():
            del self._data[key]
            return False
        return True

    def keys(self) -> List[str]:
        return [key for key in list(self._data) if self._live(key)]

    def ttl(self, key: str) -> int:
        if not self._live(key):
            return -2
        expires_at = self._data[key][1]
        if expires_at is None:
            return -1
        return int((expires_at - self.clock.now()).total_seconds())

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._data[key] = (value, self.clock.now() + timedelta(seconds=ttl_seconds))

    async def get(self, key: str) -> str:
        if not self._live(key):
            raise CacheNotFoundError()
        return self._data[key][0]

    async def get_delete(self, key: str) -> str:
        value = await self.get(key)
        del self._data[key]
        return value

    async def get_set(self, key: str, value: str, ttl_seconds: int) -> Optional[str]:
        previous = self._data[key][0] if self._live(key) else None
        self._data[key] = (value, self.clock.now() + timedelta(seconds=ttl_seconds))
        return previous

    async def delete(self, key: str) -> bool:
        existed = self._live(key)
        self._data.pop(key, None)
        return existed

    async def delete_by_prefix(self, prefix: str) -> int:
        matching = [key for key in self.keys() if key.startswith(prefix)]
        for key in matching:
            del self._data[key]
        return len(matching)

    async def eval(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> Any:
        if script != RATE_LIMIT_SCRIPT:
            raise NotImplementedError("only the rate limit script is emulated")
        key = keys[0]
        limit, window = int(args[0]), int(args[1])
        if self._live(key):
            value, expires_at = self._data[key]
            current = int(value) + 1
            self._data[key] = (str(current), expires_at)
        else:
            current = 1
            self._data[key] = ("1", self.clock.now() + timedelta(seconds=window))
        return [current, limit, self.ttl(key)]

    def matching(self, pattern: str) -> List[str]:
        return [key for key in self.keys() if fnmatch.fnmatchcase(key, pattern)]


class RecordingMailTransport(IMailTransport):
    def __init__(self):
        self.sent: List[dict] = []
        self.fail_with: Optional[Exception] = None

    async def send(self, to: Sequence[str], subject: str, html_body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"to": list(to), "subject": subject, "body": html_body})

    @property
    def last(self) -> dict:
        return self.sent[-1]


class InMemoryStorage(IObjectStorage):
    def __init__(self, public_url: str = "http://storage.test/warden"):
        self.public_url = public_url
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.fail = False

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise FileUploadError()
        self.objects[key] = data
        self.content_types[key] = content_type
        return f"{self.public_url}/{key}"

    async def delete(self, key: str) -> None:
        if self.fail:
            raise FileUploadError()
        self.objects.pop(key, None)


class RecordingErrorTracker(IErrorTracker):
    def __init__(self):
        self.captured: List[Tuple[BaseException, dict]] = []

    def capture_exception(self, exc: BaseException, **context) -> None:
        self.captured.append((exc, context))
