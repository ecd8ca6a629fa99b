from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from pydantic import BaseModel, Field

from .config import ConsoleSettings
from .console import OperatorConsole
from .models import ConsoleSnapshot, Severity
from .scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)


class HealthOut(BaseModel):
    status: str
    time_utc: datetime
    uptime_seconds: int

    model_config = {
        "json_schema_extra": {
            "examples": [{"status": "ok", "time_utc": "2026-02-18T12:00:00Z", "uptime_seconds": 42}]
        }
    }


class ActionOut(BaseModel):
    accepted: bool
    console: ConsoleSnapshot


class EventIn(BaseModel):
    message: str
    severity: Severity = Severity.INFO


class MessageIn(BaseModel):
    text: str


class RemoteSourceIn(BaseModel):
    url: str


class ScrollIn(BaseModel):
    scroll_top: float = Field(..., ge=0)
    scroll_height: float = Field(..., ge=0)
    client_height: float = Field(..., ge=0)


def create_app(cfg: ConsoleSettings, console: Optional[OperatorConsole] = None) -> FastAPI:
    """
    Create the operator console HTTP API app.

    When no console is passed, one is built on startup on the server's event
    loop and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "console", None) is None:
            owned = OperatorConsole(AsyncioScheduler(), settings=cfg)
            app.state.console = owned
            logger.info("Console created for HTTP session")
        yield
        if owned is not None:
            owned.close()
            app.state.console = None
            logger.info("Console closed on shutdown")

    app = FastAPI(
        title="Crowd Watch - Operator Console API",
        version="0.1.0",
        description="Activity log, alerts and source selection for the operator console.",
        lifespan=lifespan,
    )
    app.state.console = console

    # Store start time for uptime calculation
    started_monotonic = time.monotonic()

    def _console(request: Request) -> OperatorConsole:
        return request.app.state.console

    def _result(request: Request, accepted: bool) -> ActionOut:
        return ActionOut(accepted=accepted, console=_console(request).snapshot())

    @app.get("/health", response_model=HealthOut, tags=["health"])
    def health() -> HealthOut:
        """Liveness check: returns OK if the console process is running."""
        return HealthOut(
            status="ok",
            time_utc=datetime.now(timezone.utc),
            uptime_seconds=int(time.monotonic() - started_monotonic),
        )

    @app.get("/console", response_model=ConsoleSnapshot, tags=["console"])
    async def get_console(request: Request) -> ConsoleSnapshot:
        return _console(request).snapshot()

    @app.post("/events", response_model=ActionOut, tags=["console"])
    async def push_event(event: EventIn, request: Request) -> ActionOut:
        """Inbound event feed for external generators."""
        _console(request).push_event(event.message, event.severity)
        return _result(request, True)

    @app.post("/alerts", response_model=ActionOut, tags=["alerts"])
    async def send_alert(request: Request) -> ActionOut:
        _console(request).send_alert()
        return _result(request, True)

    @app.post("/alerts/critical", response_model=ActionOut, tags=["alerts"])
    async def send_critical_alert(request: Request) -> ActionOut:
        _console(request).send_critical_alert()
        return _result(request, True)

    @app.post("/messages", response_model=ActionOut, tags=["console"])
    async def send_message(message: MessageIn, request: Request) -> ActionOut:
        return _result(request, _console(request).send_chat_message(message.text))

    @app.post("/source/url", response_model=ActionOut, tags=["source"])
    async def select_remote_source(body: RemoteSourceIn, request: Request) -> ActionOut:
        return _result(request, _console(request).select_remote_source(body.url))

    @app.post("/source/file", response_model=ActionOut, tags=["source"])
    async def select_file_source(request: Request, file: UploadFile = File(...)) -> ActionOut:
        limit = cfg.max_upload_bytes
        declared_type = file.content_type or ""

        if file.size is not None and file.size > limit:
            # Rejected on size alone; don't pull the body into memory.
            data, size = b"", file.size
        else:
            # Never buffer more than one byte past the limit.
            data = await file.read(limit + 1)
            size = file.size if file.size is not None else len(data)
            if len(data) > limit:
                data, size = b"", max(size, len(data))
        await file.close()

        accepted = _console(request).select_file_source(
            data,
            declared_type=declared_type,
            size_bytes=size,
            file_name=file.filename or "upload",
        )
        return _result(request, accepted)

    @app.delete("/source", response_model=ActionOut, tags=["source"])
    async def clear_source(request: Request) -> ActionOut:
        return _result(request, _console(request).clear_source())

    @app.post("/analysis/start", response_model=ActionOut, tags=["analysis"])
    async def start_analysis(request: Request) -> ActionOut:
        return _result(request, _console(request).start_analysis())

    @app.post("/analysis/stop", response_model=ActionOut, tags=["analysis"])
    async def stop_analysis(request: Request) -> ActionOut:
        return _result(request, _console(request).stop_analysis())

    @app.post("/viewport/scroll", response_model=ActionOut, tags=["viewport"])
    async def scroll_sampled(body: ScrollIn, request: Request) -> ActionOut:
        _console(request).scroll_sampled(body.scroll_top, body.scroll_height, body.client_height)
        return _result(request, True)

    @app.post("/viewport/jump", response_model=ActionOut, tags=["viewport"])
    async def jump_to_latest(request: Request) -> ActionOut:
        _console(request).jump_to_latest()
        return _result(request, True)

    return app
