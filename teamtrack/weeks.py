"""Calendar helpers: Saturday-based work weeks on the server's local clock."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

WEEK_DAYS = (
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)
REST_DAY = "Friday"
WORK_DAYS = tuple(day for day in WEEK_DAYS if day != REST_DAY)

# Indexed by datetime.weekday(); avoids locale-dependent strftime("%A").
_WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


@dataclass(frozen=True, slots=True)
class WeekWindow:
    """Half-open interval ``[start, end)`` of local datetimes."""

    start: datetime
    end: datetime

    def contains(self, ts: float) -> bool:
        return self.start.timestamp() <= ts < self.end.timestamp()

    def clipped(self, latest: datetime) -> "WeekWindow":
        return WeekWindow(self.start, min(self.end, latest))


def week_window(week_offset: int = 0, now: Optional[datetime] = None) -> WeekWindow:
    now = now or datetime.now()
    since_saturday = (now.weekday() + 2) % 7
    start = (now - timedelta(days=since_saturday + 7 * week_offset)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return WeekWindow(start, start + timedelta(days=7))


def today_window(now: Optional[datetime] = None) -> WeekWindow:
    now = now or datetime.now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return WeekWindow(start, start + timedelta(days=1))


def day_name(ts: float) -> str:
    return _WEEKDAY_NAMES[datetime.fromtimestamp(ts).weekday()]


__all__ = [
    "WEEK_DAYS",
    "REST_DAY",
    "WORK_DAYS",
    "WeekWindow",
    "week_window",
    "today_window",
    "day_name",
]
