"""Helpers to launch the local API server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TrackerSettings
from .paths import get_store_path
from .webapp import create_app

logger = logging.getLogger(__name__)


def run_server(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    store_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    log_level: str = "info",
) -> None:
    """Serve one live tracking session until interrupted."""
    resolved_store = store_path or get_store_path()
    app = create_app(
        store_path=resolved_store,
        settings=settings or TrackerSettings(),
    )
    logger.info("Serving batch timer on http://%s:%d using %s", host, port, resolved_store)
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
