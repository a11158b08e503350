"""Process-wide clock indirection.

Services never call ``datetime.now`` directly; they receive an ``IClock`` so
token expiry can be driven deterministically in tests.
"""

from datetime import datetime, timezone

from warden.domain.interfaces.clock import IClock


class SystemClock(IClock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


system_clock = SystemClock()
