"""HTTP client for interacting with Slack Web API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

SLACK_API_BASE = "https://slack.com/api"


class SlackApiError(RuntimeError):
    """Raised when Slack returns an error response."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"Slack API error for {method}: {error}")
        self.method = method
        self.error = error


class SlackClient:
    """Simple async wrapper around the Slack Web API endpoints TeamTrack reads."""

    def __init__(
        self,
        token: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=SLACK_API_BASE,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = await self._client.get(method, params=params)
        response.raise_for_status()
        data = response.json()
        if not data.get("ok"):
            raise SlackApiError(method, data.get("error", "unknown_error"))
        return data

    async def _paginate(self, method: str, key: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            page_params = dict(params)
            if cursor:
                page_params["cursor"] = cursor
            data = await self._get(method, page_params)
            items.extend(data.get(key, []))
            cursor = data.get("response_metadata", {}).get("next_cursor")
            if not cursor:
                break
        return items

    async def fetch_users(self) -> List[Dict[str, Any]]:
        return await self._paginate("users.list", "members", {"limit": 200})

    async def fetch_profile(self, user_id: str) -> Dict[str, Any]:
        data = await self._get("users.profile.get", {"user": user_id})
        return data.get("profile") or {}

    async def fetch_channels(self) -> List[Dict[str, Any]]:
        return await self._paginate(
            "conversations.list",
            "channels",
            {"limit": 200, "exclude_archived": "true", "types": "public_channel,private_channel"},
        )

    async def fetch_history(self, channel_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        """Return up to ``limit`` messages, newest first, from ``conversations.history``."""

        data = await self._get("conversations.history", {"channel": channel_id, "limit": limit})
        return data.get("messages", [])


__all__ = ["SlackClient", "SlackApiError"]
