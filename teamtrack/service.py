"""Core orchestration logic for TeamTrack."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .activity import build_activity, build_news
from .attendance import derive_attendance
from .config import Settings
from .gateway import SlackGateway
from .models import (
    AttendanceReport,
    AttendanceStatus,
    CurrentAttendance,
    Employee,
    RawMessage,
    TeamSnapshot,
)
from .scoring import rank_employees, team_goals, team_stats
from .weeks import WeekWindow, today_window, week_window

logger = logging.getLogger(__name__)

PROFILE_FANOUT = 5


class TeamTrackService:
    """High-level service that reads Slack and assembles team snapshots."""

    def __init__(self, settings: Settings, gateway: SlackGateway) -> None:
        self.settings = settings
        self.gateway = gateway

    async def close(self) -> None:
        await self.gateway.client.close()

    # region Channel helpers
    async def _channel_messages(self, name: Optional[str], limit: int) -> Optional[List[RawMessage]]:
        """Messages of a named channel, or ``None`` when the channel is unknown."""

        if not name:
            return None
        channel_id = await self.gateway.find_channel_by_name(name)
        if not channel_id:
            logger.error("Channel #%s not found; skipping", name)
            return None
        return await self.gateway.get_recent_messages(channel_id, limit)

    async def load_attendance(
        self, week_offset: int = 0, now: Optional[datetime] = None
    ) -> AttendanceReport:
        messages = await self._channel_messages(
            self.settings.attendance_channel, self.settings.attendance_history_limit
        )
        if messages is None:
            return AttendanceReport()
        window = week_window(week_offset, now)
        logger.info(
            "Reading attendance for week offset %d (%s to %s) from %d messages",
            week_offset,
            window.start.date().isoformat(),
            window.end.date().isoformat(),
            len(messages),
        )
        return derive_attendance(messages, window, self.settings.name_aliases)

    # endregion

    # region Snapshot
    async def _profiles(self, users: Sequence[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
        semaphore = asyncio.Semaphore(PROFILE_FANOUT)

        async def fetch(user_id: str) -> Dict[str, Any]:
            async with semaphore:
                return await self.gateway.get_profile(user_id)

        ids = [user["id"] for user in users]
        results = await asyncio.gather(
            *(fetch(user_id) for user_id in ids), return_exceptions=True
        )
        profiles: Dict[str, Dict[str, Any]] = {}
        for user_id, result in zip(ids, results):
            if isinstance(result, Exception):
                logger.error("Error fetching profile for %s: %s", user_id, result)
                result = {}
            profiles[user_id] = result
        return profiles

    async def build_snapshot(
        self, week_offset: int = 0, now: Optional[datetime] = None
    ) -> TeamSnapshot:
        now = now or datetime.now()
        week = week_window(week_offset, now)
        today = today_window(now)

        users = await self.gateway.list_users()
        tasks = await self._channel_messages(
            self.settings.tasks_channel, self.settings.task_history_limit
        )
        done = await self._channel_messages(
            self.settings.done_channel, self.settings.task_history_limit
        )
        attendance = await self.load_attendance(week_offset, now)
        news_messages = await self._channel_messages(
            self.settings.news_channel, self.settings.news_history_limit
        )
        news = build_news(news_messages or [], users, today)

        active = [
            user for user in users if not user.get("is_bot") and not user.get("deleted")
        ]
        profiles = await self._profiles(active)
        employees: List[Employee] = []
        for user in active:
            employee = build_employee(
                user,
                profiles.get(user["id"]) or {},
                attendance.current,
                tasks or [],
                done or [],
                today=today,
                week=week,
                now=now,
            )
            if employee is not None:
                employees.append(employee)
        logger.info("Built snapshot: %d employees, %d news items", len(employees), len(news))
        return TeamSnapshot(
            employees=employees,
            news=news,
            weekly_attendance=attendance.weekly,
            week_offset=week_offset,
        )

    async def build_leaderboard(
        self, week_offset: int = 0, now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        snapshot = await self.build_snapshot(week_offset, now)
        exclude = self.settings.leaderboard_exclude
        ranked = rank_employees(snapshot.employees, snapshot.weekly_attendance, exclude)
        return {
            "weekOffset": week_offset,
            "leaderboard": [entry.to_dict() for entry in ranked],
            "stats": team_stats(snapshot.employees, exclude),
            "goals": team_goals(snapshot.employees, exclude),
        }

    # endregion


def build_employee(
    user: Mapping[str, Any],
    profile: Mapping[str, Any],
    current: CurrentAttendance,
    tasks: Sequence[RawMessage],
    done: Sequence[RawMessage],
    *,
    today: WeekWindow,
    week: WeekWindow,
    now: datetime,
) -> Optional[Employee]:
    """Join one directory entry with its profile and activity.

    Returns ``None`` for users without an email, who are not tracked.
    """

    email = profile.get("email")
    if not email:
        return None
    name = user.get("real_name") or profile.get("real_name") or user.get("name") or user["id"]
    activity = build_activity(tasks, user["id"], today=today, week=week, now=now)
    completed = build_activity(done, user["id"], today=today, week=week, now=now)
    return Employee(
        id=user["id"],
        name=name,
        email=email,
        photo=profile.get("image_192"),
        role=profile.get("title") or "",
        today_tasks=activity.today_tasks,
        week_tasks=activity.week_tasks,
        attendance=current.get(name, AttendanceStatus.ABSENT),
        daily_task_counts=activity.daily_task_counts,
        today_completed_tasks=completed.today_tasks,
        week_completed_tasks=completed.week_tasks,
    )


__all__ = ["TeamTrackService", "build_employee", "PROFILE_FANOUT"]
