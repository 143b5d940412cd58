"""Dataclasses representing TeamTrack domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


WeeklyAttendance = Dict[str, Dict[str, AttendanceStatus]]
CurrentAttendance = Dict[str, AttendanceStatus]


@dataclass(frozen=True, slots=True)
class RawMessage:
    author_id: Optional[str]
    text: str
    posted_at: float

    @classmethod
    def from_slack(cls, message: Dict[str, Any]) -> "RawMessage":
        return cls(
            author_id=message.get("user"),
            text=message.get("text") or "",
            posted_at=float(message.get("ts") or 0.0),
        )


@dataclass(frozen=True, slots=True)
class AttendanceEvent:
    person_name: str
    day: str
    status: AttendanceStatus
    occurred_at: float


@dataclass(slots=True)
class AttendanceReport:
    weekly: WeeklyAttendance = field(default_factory=dict)
    current: CurrentAttendance = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Task:
    text: str
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "timestamp": self.timestamp}


@dataclass(frozen=True, slots=True)
class NewsItem:
    text: str
    user: str
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "user": self.user, "timestamp": self.timestamp}


@dataclass(slots=True)
class Employee:
    """One tracked team member for a single aggregation cycle.

    The completed-task fields are only populated when a done-tasks channel is
    configured; otherwise they stay empty.
    """

    id: str
    name: str
    email: str
    photo: Optional[str] = None
    role: str = ""
    today_tasks: List[Task] = field(default_factory=list)
    week_tasks: List[Task] = field(default_factory=list)
    attendance: AttendanceStatus = AttendanceStatus.ABSENT
    daily_task_counts: Dict[str, int] = field(default_factory=dict)
    today_completed_tasks: List[Task] = field(default_factory=list)
    week_completed_tasks: List[Task] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "photo": self.photo,
            "role": self.role,
            "todayTasks": [task.to_dict() for task in self.today_tasks],
            "weekTasks": [task.to_dict() for task in self.week_tasks],
            "attendance": self.attendance.value,
            "dailyTaskCounts": dict(self.daily_task_counts),
            "todayCompletedTasks": [task.to_dict() for task in self.today_completed_tasks],
            "weekCompletedTasks": [task.to_dict() for task in self.week_completed_tasks],
        }


@dataclass(frozen=True, slots=True)
class Badge:
    id: str
    icon: str
    name: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "icon": self.icon,
            "name": self.name,
            "desc": self.description,
        }


@dataclass(frozen=True, slots=True)
class LevelTier:
    name: str
    min_points: int
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "minPoints": self.min_points, "color": self.color}


@dataclass(frozen=True, slots=True)
class LevelInfo:
    current: LevelTier
    next: Optional[LevelTier]
    progress: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(),
            "next": self.next.to_dict() if self.next else None,
            "progress": self.progress,
        }


@dataclass(slots=True)
class ScoredEmployee:
    employee: Employee
    points: int
    level: LevelInfo
    badges: List[Badge]
    attendance_streak: int
    task_streak: int
    breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.employee.to_dict(),
            "points": self.points,
            "level": self.level.to_dict(),
            "badges": [badge.to_dict() for badge in self.badges],
            "attendanceStreak": self.attendance_streak,
            "taskStreak": self.task_streak,
            "breakdown": dict(self.breakdown),
        }


@dataclass(slots=True)
class TeamSnapshot:
    employees: List[Employee]
    news: List[NewsItem]
    weekly_attendance: WeeklyAttendance
    week_offset: int = 0

    def to_payload(self, include_week_offset: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "employees": [employee.to_dict() for employee in self.employees],
            "news": [item.to_dict() for item in self.news],
            "weeklyAttendance": {
                day: {name: status.value for name, status in people.items()}
                for day, people in self.weekly_attendance.items()
            },
        }
        if include_week_offset:
            payload["weekOffset"] = self.week_offset
        return payload


__all__ = [
    "AttendanceStatus",
    "WeeklyAttendance",
    "CurrentAttendance",
    "RawMessage",
    "AttendanceEvent",
    "AttendanceReport",
    "Task",
    "NewsItem",
    "Employee",
    "Badge",
    "LevelTier",
    "LevelInfo",
    "ScoredEmployee",
    "TeamSnapshot",
]
