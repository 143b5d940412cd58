"""
tests/test_config.py: Settings and Alias Table Loading
========================================================
"""

from __future__ import annotations

from pathlib import Path

import pytest

from teamtrack.config import load_alias_csv, load_settings


def test_alias_csv(tmp_path):
    path = tmp_path / "aliases.csv"
    path.write_text(
        "chat_name,canonical_name\n"
        "Nawid Sanginzai,فدایی صاحب\n"
        "Mahmood Sahil,Sahil\n"
        ",orphan\n"
        "No Target,\n",
        encoding="utf-8",
    )
    assert load_alias_csv(path) == {
        "Nawid Sanginzai": "فدایی صاحب",
        "Mahmood Sahil": "Sahil",
    }


def test_missing_alias_file_is_empty(tmp_path):
    assert load_alias_csv(tmp_path / "missing.csv") == {}


def test_load_settings_from_env(tmp_path, monkeypatch):
    aliases = tmp_path / "aliases.csv"
    aliases.write_text("chat_name,canonical_name\nA B,C\n", encoding="utf-8")
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-env")
    monkeypatch.setenv("SLACK_TASKS_CHANNEL", "daily-tasks")
    monkeypatch.setenv("NAME_ALIASES_PATH", str(aliases))
    monkeypatch.setenv("LEADERBOARD_EXCLUDE", "Azizi, Team Lead ,")
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "15")
    monkeypatch.delenv("SLACK_DONE_CHANNEL", raising=False)
    monkeypatch.delenv("CACHE_PATH", raising=False)

    settings = load_settings(str(tmp_path / "no.env"))

    assert settings.slack_bot_token == "xoxb-env"
    assert settings.tasks_channel == "daily-tasks"
    assert settings.attendance_channel == "attendance"
    assert settings.done_channel is None
    assert settings.name_aliases == {"A B": "C"}
    assert settings.leaderboard_exclude == frozenset({"Azizi", "Team Lead"})
    assert settings.poll_interval_seconds == 15.0
    assert settings.cache_path == Path("cache.json")


def test_token_is_required(tmp_path, monkeypatch):
    monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)
    with pytest.raises(RuntimeError, match="SLACK_BOT_TOKEN"):
        load_settings(str(tmp_path / "no.env"))
