"""Turn Jibble time-clock posts into weekly attendance.

Jibble posts lines such as ``"Jane Doe *jibbled in* via Web"`` into the
attendance channel. Only check-ins count: a check-in at or before 09:00 local
time is ``Present``, anything later is recorded as ``Absent``. Check-outs are
ignored. Messages are replayed oldest first, so when someone checks in twice on
the same day the chronologically last check-in decides that day's status.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Tuple

from .models import (
    AttendanceEvent,
    AttendanceReport,
    AttendanceStatus,
    CurrentAttendance,
    RawMessage,
    WeeklyAttendance,
)
from .weeks import WEEK_DAYS, WeekWindow, day_name

logger = logging.getLogger(__name__)

JIBBLE_PATTERN = re.compile(r"^(.+?) \*jibbled (in|out)\*", re.IGNORECASE)
CHECKIN_CUTOFF = (9, 0)


def parse_jibble(text: str) -> Optional[Tuple[str, str]]:
    """Return ``(name, "in"|"out")`` for a Jibble post, else ``None``."""

    match = JIBBLE_PATTERN.match(text or "")
    if not match:
        return None
    return match.group(1).strip(), match.group(2).lower()


def classify_checkin(ts: float) -> AttendanceStatus:
    moment = datetime.fromtimestamp(ts)
    cutoff_hour, cutoff_minute = CHECKIN_CUTOFF
    is_late = moment.hour > cutoff_hour or (
        moment.hour == cutoff_hour and moment.minute > cutoff_minute
    )
    return AttendanceStatus.ABSENT if is_late else AttendanceStatus.PRESENT


def extract_events(
    messages: Iterable[RawMessage],
    window: WeekWindow,
    aliases: Optional[Mapping[str, str]] = None,
) -> List[AttendanceEvent]:
    aliases = aliases or {}
    events: List[AttendanceEvent] = []
    for message in sorted(messages, key=lambda m: m.posted_at):
        if not window.contains(message.posted_at):
            continue
        parsed = parse_jibble(message.text)
        if parsed is None:
            continue
        name, action = parsed
        if action != "in":
            continue
        events.append(
            AttendanceEvent(
                person_name=aliases.get(name, name),
                day=day_name(message.posted_at),
                status=classify_checkin(message.posted_at),
                occurred_at=message.posted_at,
            )
        )
    return events


def build_weekly_attendance(events: Iterable[AttendanceEvent]) -> WeeklyAttendance:
    weekly: WeeklyAttendance = {}
    for event in events:
        weekly.setdefault(event.day, {})[event.person_name] = event.status
    return {day: weekly[day] for day in WEEK_DAYS if day in weekly}


def current_attendance(weekly: WeeklyAttendance) -> CurrentAttendance:
    current: CurrentAttendance = {}
    for day in WEEK_DAYS:
        current.update(weekly.get(day, {}))
    return current


def derive_attendance(
    messages: Iterable[RawMessage],
    window: WeekWindow,
    aliases: Optional[Mapping[str, str]] = None,
) -> AttendanceReport:
    events = extract_events(messages, window, aliases)
    weekly = build_weekly_attendance(events)
    logger.debug(
        "Derived %d check-ins across %d days for week starting %s",
        len(events),
        len(weekly),
        window.start.date().isoformat(),
    )
    return AttendanceReport(weekly=weekly, current=current_attendance(weekly))


__all__ = [
    "JIBBLE_PATTERN",
    "parse_jibble",
    "classify_checkin",
    "extract_events",
    "build_weekly_attendance",
    "current_attendance",
    "derive_attendance",
]
