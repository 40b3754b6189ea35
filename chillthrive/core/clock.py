from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from ..config import get_settings


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class _StudioClock:
    """Clock whose "today" is the calendar date at the studio, not in UTC."""

    def __init__(self, tz_name: str | None = None) -> None:
        self._tz = ZoneInfo(tz_name or get_settings().timezone)

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().astimezone(self._tz).date()


class SystemClock(_StudioClock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(_StudioClock):
    def __init__(self, current: datetime, tz_name: str | None = None) -> None:
        super().__init__(tz_name)
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self.current = current

    def now(self) -> datetime:
        return self.current
