"""Configuration helpers for TeamTrack."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv


@dataclass(slots=True)
class Settings:
    """Runtime configuration values loaded from environment variables."""

    slack_bot_token: str
    tasks_channel: str = "tasks"
    attendance_channel: str = "attendance"
    news_channel: str = "general"
    done_channel: Optional[str] = None
    cache_path: Path = Path("cache.json")
    name_aliases: Dict[str, str] = field(default_factory=dict)
    poll_interval_seconds: float = 30.0
    leaderboard_exclude: frozenset[str] = frozenset()
    attendance_history_limit: int = 1000
    task_history_limit: int = 100
    news_history_limit: int = 50


def load_settings(env_file: str | None = None) -> Settings:
    """Load settings from the environment, optionally from a specific file."""

    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    slack_token = os.getenv("SLACK_BOT_TOKEN")
    if not slack_token:
        raise RuntimeError("SLACK_BOT_TOKEN must be configured")

    cache_path = Path(os.getenv("CACHE_PATH", "cache.json")).expanduser()
    aliases_path = Path(
        os.getenv("NAME_ALIASES_PATH", "name_aliases.csv")
    ).expanduser()
    exclude = os.getenv("LEADERBOARD_EXCLUDE", "")

    return Settings(
        slack_bot_token=slack_token,
        tasks_channel=os.getenv("SLACK_TASKS_CHANNEL", "tasks"),
        attendance_channel=os.getenv("SLACK_ATTENDANCE_CHANNEL", "attendance"),
        news_channel=os.getenv("SLACK_NEWS_CHANNEL", "general"),
        done_channel=os.getenv("SLACK_DONE_CHANNEL") or None,
        cache_path=cache_path,
        name_aliases=load_alias_csv(aliases_path),
        poll_interval_seconds=float(os.getenv("POLL_INTERVAL_SECONDS", "30")),
        leaderboard_exclude=frozenset(
            name.strip() for name in exclude.split(",") if name.strip()
        ),
        attendance_history_limit=int(os.getenv("ATTENDANCE_HISTORY_LIMIT", "1000")),
        task_history_limit=int(os.getenv("TASK_HISTORY_LIMIT", "100")),
        news_history_limit=int(os.getenv("NEWS_HISTORY_LIMIT", "50")),
    )


def load_alias_csv(path: Path) -> Dict[str, str]:
    """Read the chat-name to canonical-name table, or ``{}`` if the file is absent."""

    if not path.exists():
        return {}
    aliases: Dict[str, str] = {}
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            chat_name = (row.get("chat_name") or "").strip()
            canonical = (row.get("canonical_name") or "").strip()
            if not chat_name or not canonical:
                continue
            aliases[chat_name] = canonical
    return aliases


__all__ = ["Settings", "load_settings", "load_alias_csv"]
