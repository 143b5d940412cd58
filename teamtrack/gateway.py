"""Cache-backed Slack gateway that never lets an upstream failure escape."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .cache import SnapshotCache
from .models import RawMessage
from .slack_client import SlackApiError, SlackClient

logger = logging.getLogger(__name__)

UPSTREAM_ERRORS = (httpx.HTTPError, SlackApiError, ValueError)


class SlackGateway:
    """Read-only view of the workspace used by the aggregation pipeline.

    Each method returns an empty default (``[]``, ``{}`` or ``None``) when
    Slack is unreachable or rejects the call. Only successful responses are
    written to the cache.
    """

    def __init__(self, client: SlackClient, cache: SnapshotCache) -> None:
        self.client = client
        self.cache = cache

    async def list_users(self) -> List[Dict[str, Any]]:
        cached = self.cache.get_users()
        if cached is not None:
            return cached
        try:
            users = await self.client.fetch_users()
        except UPSTREAM_ERRORS as exc:
            logger.error("Error fetching Slack users: %s", exc)
            return []
        self.cache.put_users(users)
        return users

    async def get_profile(self, user_id: str) -> Dict[str, Any]:
        cached = self.cache.get_profile(user_id)
        if cached is not None:
            return cached
        try:
            profile = await self.client.fetch_profile(user_id)
        except UPSTREAM_ERRORS as exc:
            logger.error("Error fetching profile for %s: %s", user_id, exc)
            return {}
        self.cache.put_profile(user_id, profile)
        return profile

    async def find_channel_by_name(self, name: str) -> Optional[str]:
        key = f"channel:{name}"
        cached = self.cache.get(key)
        if cached:
            return cached
        try:
            channels = await self.client.fetch_channels()
        except UPSTREAM_ERRORS as exc:
            logger.error("Error fetching channels: %s", exc)
            return None
        for channel in channels:
            if channel.get("name") == name:
                self.cache.put(key, channel["id"])
                return channel["id"]
        return None

    async def get_recent_messages(self, channel_id: str, limit: int = 100) -> List[RawMessage]:
        try:
            messages = await self.client.fetch_history(channel_id, limit)
        except UPSTREAM_ERRORS as exc:
            logger.error("Error fetching messages for %s: %s", channel_id, exc)
            return []
        return [RawMessage.from_slack(message) for message in messages]


__all__ = ["SlackGateway", "UPSTREAM_ERRORS"]
