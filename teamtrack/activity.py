"""Task and news extraction from the tasks, done and news channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .models import NewsItem, RawMessage, Task
from .weeks import WeekWindow, day_name

TODAY_TASK_LIMIT = 5
WEEK_TASK_LIMIT = 10
NEWS_LIMIT = 5


@dataclass(slots=True)
class Activity:
    today_tasks: List[Task] = field(default_factory=list)
    week_tasks: List[Task] = field(default_factory=list)
    daily_task_counts: Dict[str, int] = field(default_factory=dict)


def mentions(message: RawMessage, user_id: str) -> bool:
    """True if the user posted the message or is ``<@mentioned>`` in it."""

    return message.author_id == user_id or f"<@{user_id}>" in message.text


def collect_tasks(
    messages: Iterable[RawMessage],
    user_id: str,
    window: WeekWindow,
    limit: int,
) -> List[Task]:
    tasks: List[Task] = []
    for message in messages:
        if len(tasks) >= limit:
            break
        if mentions(message, user_id) and window.contains(message.posted_at):
            tasks.append(Task(text=message.text, timestamp=message.posted_at))
    return tasks


def daily_task_counts(
    messages: Iterable[RawMessage], user_id: str, window: WeekWindow
) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for message in messages:
        if mentions(message, user_id) and window.contains(message.posted_at):
            day = day_name(message.posted_at)
            counts[day] = counts.get(day, 0) + 1
    return counts


def build_activity(
    messages: Sequence[RawMessage],
    user_id: str,
    *,
    today: WeekWindow,
    week: WeekWindow,
    now: datetime,
) -> Activity:
    """Today's tasks, this week's tasks so far and per-day counts for one person.

    Messages keep the order the gateway returned them in (newest first for
    Slack history), so the caps keep the most recent tasks.
    """

    week_so_far = week.clipped(now)
    return Activity(
        today_tasks=collect_tasks(messages, user_id, today, TODAY_TASK_LIMIT),
        week_tasks=collect_tasks(messages, user_id, week_so_far, WEEK_TASK_LIMIT),
        daily_task_counts=daily_task_counts(messages, user_id, week_so_far),
    )


def display_name(user: Mapping[str, Any]) -> str:
    return user.get("real_name") or user.get("name") or "Unknown"


def build_news(
    messages: Iterable[RawMessage],
    users: Iterable[Mapping[str, Any]],
    today: WeekWindow,
    limit: int = NEWS_LIMIT,
) -> List[NewsItem]:
    directory = {user.get("id"): user for user in users}
    news: List[NewsItem] = []
    for message in messages:
        if len(news) >= limit:
            break
        if not today.contains(message.posted_at):
            continue
        author = directory.get(message.author_id)
        news.append(
            NewsItem(
                text=message.text,
                user=display_name(author) if author else "Unknown",
                timestamp=message.posted_at,
            )
        )
    return news


__all__ = [
    "TODAY_TASK_LIMIT",
    "WEEK_TASK_LIMIT",
    "NEWS_LIMIT",
    "Activity",
    "mentions",
    "collect_tasks",
    "daily_task_counts",
    "build_activity",
    "display_name",
    "build_news",
]
