"""FastAPI application exposing the TeamTrack dashboard API."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query, Response, WebSocket, WebSocketDisconnect, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cache import SnapshotCache
from .config import Settings, load_settings
from .gateway import SlackGateway
from .publisher import RealtimePublisher
from .service import TeamTrackService
from .slack_client import SlackClient

logger = logging.getLogger(__name__)

# Ten years back.
MAX_WEEK_OFFSET = 520
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_week_offset(value: Optional[str] = None) -> int:
    """Coerce the ``weekOffset`` query value.

    The leading integer is used (``"1.5"`` is 1). Anything without one, or
    negative, is 0; offsets beyond ``MAX_WEEK_OFFSET`` are clamped to it.
    """

    match = _LEADING_INT.match(value or "")
    if match is None:
        return 0
    return min(max(int(match.group(1)), 0), MAX_WEEK_OFFSET)


def build_service(settings: Settings) -> TeamTrackService:
    client = SlackClient(settings.slack_bot_token)
    gateway = SlackGateway(client, SnapshotCache(settings.cache_path))
    return TeamTrackService(settings, gateway)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[TeamTrackService] = None,
    publisher: Optional[RealtimePublisher] = None,
) -> FastAPI:
    if service is None:
        settings = settings or load_settings()
        service = build_service(settings)
    publisher = publisher or RealtimePublisher(service, service.settings.poll_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # pragma: no cover - io bound
        publisher.start()
        logger.info("TeamTrack API started; polling every %ss", publisher.interval)
        yield
        await publisher.stop()
        await service.close()
        logger.info("TeamTrack API shutting down")

    app = FastAPI(title="TeamTrack API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.state.service = service
    app.state.publisher = publisher

    def get_service() -> TeamTrackService:
        return service

    def week_offset_dependency(value: Optional[str] = Query(None, alias="weekOffset")) -> int:
        return parse_week_offset(value)

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/employees")
    async def get_employees(
        week_offset: int = Depends(week_offset_dependency),
        svc: TeamTrackService = Depends(get_service),
    ) -> Any:
        try:
            snapshot = await svc.build_snapshot(week_offset)
        except Exception as exc:
            logger.exception("Failed to build employee snapshot")
            return JSONResponse(status_code=500, content={"error": str(exc)})
        return snapshot.to_payload()

    @app.get("/api/leaderboard")
    async def get_leaderboard(
        week_offset: int = Depends(week_offset_dependency),
        svc: TeamTrackService = Depends(get_service),
    ) -> Any:
        try:
            return await svc.build_leaderboard(week_offset)
        except Exception as exc:
            logger.exception("Failed to build leaderboard")
            return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.post("/api/refresh")
    async def refresh() -> Response:
        await publisher.run_cycle()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.websocket("/ws")
    async def updates(websocket: WebSocket) -> None:
        await websocket.accept()
        await publisher.subscribe(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            publisher.unsubscribe(websocket)

    return app


__all__ = ["create_app", "build_service", "parse_week_offset", "MAX_WEEK_OFFSET"]
