"""JSON snapshot cache that keeps Slack lookups for 24 hours."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

CACHE_MAX_AGE_SECONDS = 24 * 60 * 60


class SnapshotCache:
    """Time-bounded store for the user directory, profiles and small blobs.

    The file layout is::

        {
          "users": [...], "lastUpdated": <epoch ms>,
          "profiles": {"U123": {"data": {...}, "lastUpdated": <epoch ms>}},
          "blobs": {"channel:tasks": {"data": "C42", "lastUpdated": <epoch ms>}}
        }

    The top-level ``lastUpdated`` belongs to the user directory only. Every
    read goes back to disk, so deleting the file forces a full refetch.
    """

    def __init__(
        self,
        path: Path,
        *,
        clock: Callable[[], float] = time.time,
        max_age_seconds: float = CACHE_MAX_AGE_SECONDS,
    ) -> None:
        self._path = Path(path)
        self._clock = clock
        self._max_age_ms = max_age_seconds * 1000

    @property
    def path(self) -> Path:
        return self._path

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _is_fresh(self, last_updated: Any) -> bool:
        if not isinstance(last_updated, (int, float)):
            return False
        return self._now_ms() - last_updated < self._max_age_ms

    # region Persistence
    def load(self) -> Dict[str, Any]:
        try:
            with self._path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring cache file %s: not a JSON object", self._path)
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        """Persist ``data``; a failed write is logged and the cache stays as it was."""
        try:
            self._write(data)
        except OSError as exc:
            logger.error("Error saving cache %s: %s", self._path, exc)

    def _write(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # endregion

    # region User directory
    def get_users(self) -> Optional[List[Dict[str, Any]]]:
        data = self.load()
        users = data.get("users")
        if isinstance(users, list) and self._is_fresh(data.get("lastUpdated")):
            return users
        return None

    def put_users(self, users: List[Dict[str, Any]]) -> None:
        data = self.load()
        data["users"] = users
        data["lastUpdated"] = self._now_ms()
        self._save(data)

    # endregion

    # region Profiles
    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self._get_entry("profiles", user_id)

    def put_profile(self, user_id: str, profile: Dict[str, Any]) -> None:
        self._put_entry("profiles", user_id, profile)

    # endregion

    # region Blobs
    def get(self, key: str) -> Any:
        return self._get_entry("blobs", key)

    def put(self, key: str, value: Any) -> None:
        self._put_entry("blobs", key, value)

    # endregion

    def _get_entry(self, section: str, key: str) -> Any:
        entries = self.load().get(section)
        if not isinstance(entries, dict):
            return None
        entry = entries.get(key)
        if not isinstance(entry, dict) or not self._is_fresh(entry.get("lastUpdated")):
            return None
        return entry.get("data")

    def _put_entry(self, section: str, key: str, value: Any) -> None:
        data = self.load()
        entries = data.get(section)
        if not isinstance(entries, dict):
            entries = {}
            data[section] = entries
        entries[key] = {"data": value, "lastUpdated": self._now_ms()}
        self._save(data)


__all__ = ["SnapshotCache", "CACHE_MAX_AGE_SECONDS"]
