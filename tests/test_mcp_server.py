"""
tests/test_mcp_server.py: MCP Tool Functions
==============================================

The tool functions are called directly with the module's service swapped for
one backed by the in-memory workspace.
"""

from __future__ import annotations

import pytest
from conftest import NOW, run_async

from teamtrack import mcp_server
from teamtrack.service import TeamTrackService


class FixedClockService(TeamTrackService):
    async def build_snapshot(self, week_offset=0, now=None):
        return await super().build_snapshot(week_offset, now or NOW)


@pytest.fixture(autouse=True)
def workspace(monkeypatch, settings, gateway):
    monkeypatch.setattr(mcp_server, "_service", FixedClockService(settings, gateway))


def test_team_snapshot():
    payload = run_async(mcp_server.get_team_snapshot(0))
    assert [e["id"] for e in payload["employees"]] == ["U1", "U2"]
    assert payload["weekOffset"] == 0


def test_negative_offset_is_current_week():
    assert run_async(mcp_server.get_team_snapshot(-2))["weekOffset"] == 0


def test_leaderboard():
    board = run_async(mcp_server.get_leaderboard())
    assert board["leaderboard"][0]["name"] == "Ali Rezaei"


def test_employee_card():
    card = run_async(mcp_server.get_employee_card("U1"))
    assert card["points"] == 72
    assert card["level"]["current"]["name"] == "Novice"


def test_unknown_employee_card():
    assert run_async(mcp_server.get_employee_card("U404")) is None
