"""Periodic current-week refresh pushed to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from .service import TeamTrackService

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    async def send_json(self, data: Any) -> None: ...


class RealtimePublisher:
    """Rebuilds the week-0 snapshot on a timer and broadcasts it when it changes.

    The previous payload lives on the instance; cycles never overlap. A
    subscriber that does not accept a message within ``send_timeout`` seconds
    is dropped.
    """

    def __init__(
        self,
        service: TeamTrackService,
        interval: float = 30.0,
        send_timeout: float = 5.0,
    ) -> None:
        self.service = service
        self.interval = interval
        self.send_timeout = send_timeout
        self.previous: Optional[Dict[str, Any]] = None
        self._subscribers: List[Subscriber] = []
        self._in_flight = False
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)
        if self.previous is not None:
            await self._send(subscriber, {"event": "update", "data": self.previous})

    def unsubscribe(self, subscriber: Subscriber) -> None:
        self._subscribers = [s for s in self._subscribers if s is not subscriber]

    async def _send(self, subscriber: Subscriber, message: Dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(subscriber.send_json(message), self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning("Dropping subscriber after send timed out (%ss)", self.send_timeout)
            self.unsubscribe(subscriber)
        except Exception as exc:
            logger.warning("Dropping subscriber after failed send: %s", exc)
            self.unsubscribe(subscriber)

    async def broadcast(self, payload: Dict[str, Any]) -> None:
        message = {"event": "update", "data": payload}
        await asyncio.gather(*(self._send(s, message) for s in list(self._subscribers)))

    async def run_cycle(self) -> bool:
        """Run one refresh; return True if an update was published."""

        if self._in_flight:
            logger.debug("Previous cycle still running; skipping")
            return False
        self._in_flight = True
        try:
            snapshot = await self.service.build_snapshot(0)
            payload = snapshot.to_payload(include_week_offset=False)
            if payload == self.previous:
                return False
            self.previous = payload
            await self.broadcast(payload)
            logger.info("Data updated, emitted to %d clients", len(self._subscribers))
            return True
        except Exception as exc:
            logger.error("Error in real-time update: %s", exc)
            return False
        finally:
            self._in_flight = False

    async def run_forever(self) -> None:
        while True:
            await self.run_cycle()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


__all__ = ["RealtimePublisher", "Subscriber"]
