"""FastAPI application that exposes a local JSON API for the batch timer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .clock import ThreadTicker, TickerFactory
from .config import TrackerSettings
from .db import SqliteStore
from .errors import InvalidRangeError
from .paths import get_store_path
from .session import TrackerSession
from .storage import KeyValueStore, PersistenceGateway

logger = logging.getLogger(__name__)


class ElapsedUpdate(BaseModel):
    time: str

    model_config = ConfigDict(extra="forbid")


class RandomRange(BaseModel):
    min: Optional[str] = None
    max: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class QuantityUpdate(BaseModel):
    value: Union[int, float, str]

    model_config = ConfigDict(extra="forbid")


class CommitPayload(BaseModel):
    quantity: Optional[Union[int, float, str]] = None

    model_config = ConfigDict(extra="forbid")


class AnnotationUpdate(BaseModel):
    annotation: str

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    store_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    store: Optional[KeyValueStore] = None,
    ticker_factory: TickerFactory = ThreadTicker,
) -> FastAPI:
    """Instantiate the FastAPI application around a restored session."""
    resolved_store = store or SqliteStore(Path(store_path or get_store_path()))
    session = TrackerSession.restore(
        PersistenceGateway(resolved_store),
        settings or TrackerSettings(),
        ticker_factory=ticker_factory,
    )

    app = FastAPI(title="Batch Timer", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.session = session

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        session.shutdown()

    @app.get("/api/state")
    def state(request: Request) -> Dict[str, Any]:
        return request.app.state.session.state()

    @app.post("/api/clock/start")
    def start_clock(request: Request) -> Dict[str, Any]:
        request.app.state.session.start()
        return request.app.state.session.state()["clock"]

    @app.post("/api/clock/stop")
    def stop_clock(request: Request) -> Dict[str, Any]:
        request.app.state.session.stop()
        return request.app.state.session.state()["clock"]

    @app.post("/api/clock/restart")
    def restart_clock(request: Request) -> Dict[str, Any]:
        request.app.state.session.restart()
        return request.app.state.session.state()["clock"]

    @app.put("/api/clock")
    def set_clock(payload: ElapsedUpdate, request: Request) -> Dict[str, Any]:
        request.app.state.session.set_elapsed_text(payload.time)
        return request.app.state.session.state()["clock"]

    @app.post("/api/clock/random")
    def randomize_clock(payload: RandomRange, request: Request) -> Dict[str, Any]:
        try:
            request.app.state.session.randomize(payload.min, payload.max)
        except InvalidRangeError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return request.app.state.session.state()["clock"]

    @app.put("/api/quantity")
    def set_quantity(payload: QuantityUpdate, request: Request) -> Dict[str, Any]:
        request.app.state.session.set_pending_quantity(payload.value)
        return {"pending_quantity": request.app.state.session.state()["pending_quantity"]}

    @app.post("/api/log")
    def commit_interval(payload: CommitPayload, request: Request) -> Dict[str, Any]:
        entry = request.app.state.session.commit(payload.quantity)
        return {
            "entry": {
                "duration_seconds": entry.duration_seconds,
                "quantity": entry.quantity,
            },
            "totals": request.app.state.session.state()["totals"],
        }

    @app.delete("/api/log/{index}")
    def delete_interval(index: int, request: Request) -> Dict[str, Any]:
        deleted = request.app.state.session.delete_entry(index)
        return {"deleted": deleted, "totals": request.app.state.session.state()["totals"]}

    @app.delete("/api/log")
    def clear_log(
        request: Request,
        confirm: bool = Query(default=False, description="Must be true to clear the log."),
    ) -> Dict[str, Any]:
        if not request.app.state.session.clear_log(lambda _prompt: confirm):
            raise HTTPException(status_code=409, detail="Confirmation required to clear the log.")
        return {"cleared": True}

    @app.post("/api/table")
    def snapshot(request: Request) -> Dict[str, Any]:
        request.app.state.session.snapshot()
        table = request.app.state.session.state()["table"]
        return {"row": table[-1]}

    @app.patch("/api/table/{index}")
    def annotate_row(index: int, payload: AnnotationUpdate, request: Request) -> Dict[str, Any]:
        updated = request.app.state.session.annotate(index, payload.annotation)
        return {"updated": updated}

    @app.delete("/api/table/{index}")
    def delete_row(
        index: int,
        request: Request,
        confirm: bool = Query(default=False, description="Must be true to delete the row."),
    ) -> Dict[str, Any]:
        deleted = request.app.state.session.delete_row(index, lambda _prompt: confirm)
        return {"deleted": deleted}

    @app.delete("/api/table")
    def clear_table(
        request: Request,
        confirm: bool = Query(default=False, description="Must be true to clear the table."),
    ) -> Dict[str, Any]:
        if not request.app.state.session.clear_table(lambda _prompt: confirm):
            raise HTTPException(status_code=409, detail="Confirmation required to clear the table.")
        return {"cleared": True}

    return app
