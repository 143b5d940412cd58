"""MCP server exposing TeamTrack data tools."""

from __future__ import annotations

import asyncio
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .api import build_service, parse_week_offset
from .config import load_settings
from .scoring import score_employee

mcp = FastMCP("teamtrack")

_settings = load_settings()
_service = build_service(_settings)
_lock = asyncio.Lock()


@mcp.tool()
async def get_team_snapshot(week_offset: int = 0) -> dict:
    """Return employees, today's news and weekly attendance for a week (0 = current)."""

    async with _lock:
        snapshot = await _service.build_snapshot(parse_week_offset(str(week_offset)))
    return snapshot.to_payload()


@mcp.tool()
async def get_leaderboard(week_offset: int = 0) -> dict:
    """Return the points leaderboard with team attendance stats and goals."""

    async with _lock:
        return await _service.build_leaderboard(parse_week_offset(str(week_offset)))


@mcp.tool()
async def get_employee_card(employee_id: str, week_offset: int = 0) -> Optional[dict]:
    """Return one employee's points, level, streaks and badges, or None if untracked."""

    async with _lock:
        snapshot = await _service.build_snapshot(parse_week_offset(str(week_offset)))
    for employee in snapshot.employees:
        if employee.id == employee_id:
            return score_employee(employee, snapshot.weekly_attendance).to_dict()
    return None


__all__ = ["mcp", "get_team_snapshot", "get_leaderboard", "get_employee_card"]


if __name__ == "__main__":  # pragma: no cover
    mcp.run()
