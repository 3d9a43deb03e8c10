"""Clock abstraction so every calendar comparison has a single source of "now".

Managers never call ``datetime.now()`` directly. Production wires a
``SystemClock`` in the club's timezone; tests wire a ``FrozenClock`` and move
it explicitly instead of waiting on timers.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall-clock time in the club's local timezone."""

    def __init__(self, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        # Local calendar date, not the UTC one
        return self.now().date()


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)
        self._now = self._localize(now)

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def set(self, now: datetime) -> None:
        self._now = self._localize(now)

    def advance(self, delta: timedelta = timedelta(0), **kwargs) -> datetime:
        """Move forward by ``delta`` plus any ``timedelta`` keyword arguments."""
        self._now = self._now + delta + timedelta(**kwargs)
        return self._now
