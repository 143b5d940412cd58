"""
teamtrack.scoring: Points, Levels, Streaks and Badges
=======================================================

Pure calculation over an :class:`Employee` and the week's attendance map.
No Slack I/O, no cache I/O.

Points are a sum of named terms (see :func:`score_breakdown`) so each
contribution can be audited and tested on its own. Weights, level tiers and
badge rules are declarative tables; tuning them never touches control flow.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from .models import (
    AttendanceStatus,
    Badge,
    Employee,
    LevelInfo,
    LevelTier,
    ScoredEmployee,
    WeeklyAttendance,
)
from .weeks import WEEK_DAYS, WORK_DAYS


# ---------------------------------------------------------------------------
# Score weights
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ScoreWeights:
    present: int = 20
    late: int = 10
    absent: int = 0
    task_in_progress: int = 3
    task_completed: int = 10
    completion_perfect: int = 50
    completion_high: int = 30
    completion_good: int = 15
    completion_high_rate: float = 0.8
    completion_good_rate: float = 0.5
    daily_completion: int = 20
    completed_today: int = 5
    productive_early_bird: int = 15

    def for_status(self, status: AttendanceStatus | None) -> int:
        if status is AttendanceStatus.PRESENT:
            return self.present
        if status is AttendanceStatus.LATE:
            return self.late
        if status is AttendanceStatus.ABSENT:
            return self.absent
        return 0


DEFAULT_WEIGHTS = ScoreWeights()


# ---------------------------------------------------------------------------
# Level tiers (ordered by min_points)
# ---------------------------------------------------------------------------
LEVEL_TIERS: tuple[LevelTier, ...] = (
    LevelTier("Novice", 0, "#6b7280"),
    LevelTier("Contributor", 100, "#00d4ff"),
    LevelTier("Expert", 300, "#a855f7"),
    LevelTier("Master", 600, "#ffd700"),
    LevelTier("Legend", 1000, "#f472b6"),
)


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------
def _completion_bonus(employee: Employee, weights: ScoreWeights) -> int:
    completed = len(employee.week_completed_tasks)
    total = len(employee.week_tasks) + completed
    if total == 0:
        return 0
    rate = completed / total
    if rate == 1.0:
        return weights.completion_perfect
    if rate >= weights.completion_high_rate:
        return weights.completion_high
    if rate >= weights.completion_good_rate:
        return weights.completion_good
    return 0


def score_breakdown(
    employee: Employee,
    weekly: WeeklyAttendance | None,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> dict[str, int]:
    """Return every point contribution by name.

    Today's attendance is counted on top of the weekly total, so the current
    day weighs twice.
    """
    weekly = weekly or {}
    completed_today = len(employee.today_completed_tasks)
    return {
        "weekly_attendance": sum(
            weights.for_status(people.get(employee.name)) for people in weekly.values()
        ),
        "today_attendance": weights.for_status(employee.attendance),
        "tasks_in_progress": len(employee.week_tasks) * weights.task_in_progress,
        "tasks_completed": len(employee.week_completed_tasks) * weights.task_completed,
        "completion_rate": _completion_bonus(employee, weights),
        "daily_completion": (
            weights.daily_completion + completed_today * weights.completed_today
            if completed_today
            else 0
        ),
        "productive_early_bird": (
            weights.productive_early_bird
            if employee.attendance is AttendanceStatus.PRESENT and completed_today
            else 0
        ),
    }


def calculate_points(
    employee: Employee,
    weekly: WeeklyAttendance | None,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    return sum(score_breakdown(employee, weekly, weights).values())


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------
def level_info(points: int, tiers: tuple[LevelTier, ...] = LEVEL_TIERS) -> LevelInfo:
    """Resolve the highest tier reached and progress (0 to 100) toward the next."""
    for index in range(len(tiers) - 1, -1, -1):
        tier = tiers[index]
        if points >= tier.min_points:
            upcoming = tiers[index + 1] if index + 1 < len(tiers) else None
            if upcoming is None:
                return LevelInfo(current=tier, next=None, progress=100.0)
            span = upcoming.min_points - tier.min_points
            progress = (points - tier.min_points) / span * 100
            return LevelInfo(current=tier, next=upcoming, progress=min(100.0, progress))
    return LevelInfo(current=tiers[0], next=tiers[1] if len(tiers) > 1 else None, progress=0.0)


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------
def attendance_streak(name: str, weekly: WeeklyAttendance | None) -> int:
    """Consecutive attended days counted backward from the end of the week.

    Days without a record are skipped; the first explicit Absent ends the count.
    """
    weekly = weekly or {}
    streak = 0
    for day in reversed(WEEK_DAYS):
        status = weekly.get(day, {}).get(name)
        if status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE):
            streak += 1
        elif status is AttendanceStatus.ABSENT:
            break
    return streak


def task_streak(daily_counts: Mapping[str, int] | None) -> int:
    """Consecutive work days with tasks, counted forward from Saturday.

    The rest day is never scanned. Empty days before the first task day are
    skipped; after that, the first empty day ends the count.
    """
    daily_counts = daily_counts or {}
    streak = 0
    for day in WORK_DAYS:
        if daily_counts.get(day, 0) > 0:
            streak += 1
        elif streak > 0:
            break
    return streak


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BadgeContext:
    """Everything a badge predicate may look at."""

    employee: Employee
    weekly: WeeklyAttendance
    attendance_streak: int


def _attended_today(ctx: BadgeContext) -> bool:
    return ctx.employee.attendance is AttendanceStatus.PRESENT


def _posted_today(ctx: BadgeContext) -> bool:
    return len(ctx.employee.today_tasks) > 0


def _perfect_week(ctx: BadgeContext) -> bool:
    if len(ctx.weekly) < 5:
        return False
    return all(
        people.get(ctx.employee.name) is AttendanceStatus.PRESENT
        for people in ctx.weekly.values()
    )


def _consistent_poster(ctx: BadgeContext) -> bool:
    active_days = [day for day, count in ctx.employee.daily_task_counts.items() if count > 0]
    return len(active_days) >= 5


def _on_fire(ctx: BadgeContext) -> bool:
    return ctx.attendance_streak >= 5


BADGE_RULES: tuple[tuple[Badge, Callable[[BadgeContext], bool]], ...] = (
    (Badge("early-bird", "fa-sun", "Early Bird", "Arrived before 9:00 AM"), _attended_today),
    (Badge("task-poster", "fa-clipboard-list", "Active Poster", "Posted tasks today"), _posted_today),
    (Badge("perfect-week", "fa-calendar-check", "Perfect Week", "100% attendance this week"), _perfect_week),
    (Badge("consistent", "fa-star", "Consistent", "Posted tasks on 5 different days"), _consistent_poster),
    (Badge("streak-5", "fa-fire", "On Fire!", "5-day attendance streak"), _on_fire),
)


def calculate_badges(
    employee: Employee,
    weekly: WeeklyAttendance | None,
    rules: Iterable[tuple[Badge, Callable[[BadgeContext], bool]]] = BADGE_RULES,
) -> list[Badge]:
    weekly = weekly or {}
    ctx = BadgeContext(
        employee=employee,
        weekly=weekly,
        attendance_streak=attendance_streak(employee.name, weekly),
    )
    return [badge for badge, predicate in rules if predicate(ctx)]


# ---------------------------------------------------------------------------
# Per-employee and team views
# ---------------------------------------------------------------------------
def score_employee(
    employee: Employee,
    weekly: WeeklyAttendance | None,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> ScoredEmployee:
    breakdown = score_breakdown(employee, weekly, weights)
    points = sum(breakdown.values())
    return ScoredEmployee(
        employee=employee,
        points=points,
        level=level_info(points),
        badges=calculate_badges(employee, weekly),
        attendance_streak=attendance_streak(employee.name, weekly),
        task_streak=task_streak(employee.daily_task_counts),
        breakdown=breakdown,
    )


def _tracked(employees: Iterable[Employee], exclude: Iterable[str]) -> list[Employee]:
    excluded = set(exclude)
    return [employee for employee in employees if employee.name not in excluded]


def rank_employees(
    employees: Iterable[Employee],
    weekly: WeeklyAttendance | None,
    exclude: Iterable[str] = (),
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> list[ScoredEmployee]:
    """Score everyone not excluded and order by points, highest first (stable)."""
    scored = [score_employee(e, weekly, weights) for e in _tracked(employees, exclude)]
    return sorted(scored, key=lambda s: s.points, reverse=True)


def team_stats(employees: Iterable[Employee], exclude: Iterable[str] = ()) -> dict[str, int]:
    tracked = _tracked(employees, exclude)
    stats = {"present": 0, "absent": 0, "late": 0, "total": len(tracked)}
    for employee in tracked:
        stats[employee.attendance.value.lower()] += 1
    return stats


def _percent(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


def team_goals(employees: Iterable[Employee], exclude: Iterable[str] = ()) -> dict[str, int]:
    """Team-wide rates as whole percentages."""
    tracked = _tracked(employees, exclude)
    total = len(tracked)
    attended = sum(
        1
        for e in tracked
        if e.attendance in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
    )
    on_time = sum(1 for e in tracked if e.attendance is AttendanceStatus.PRESENT)
    completed = sum(len(e.week_completed_tasks) for e in tracked)
    all_tasks = completed + sum(len(e.week_tasks) for e in tracked)
    return {
        "attendanceRate": _percent(attended, total),
        "completionRate": _percent(completed, all_tasks),
        "onTimeRate": _percent(on_time, total),
    }


__all__ = [
    "ScoreWeights",
    "DEFAULT_WEIGHTS",
    "LEVEL_TIERS",
    "BadgeContext",
    "BADGE_RULES",
    "score_breakdown",
    "calculate_points",
    "level_info",
    "attendance_streak",
    "task_streak",
    "calculate_badges",
    "score_employee",
    "rank_employees",
    "team_stats",
    "team_goals",
]
