"""Status API for Wavelog Gate.

The FastAPI application owns the gateway: its lifespan loads the settings,
starts the listen/forward loop as a background task and stops it again on
shutdown.  Endpoints are read-only views of the :class:`RecordLog` the
gateway reports into; nothing here can steer the pipeline.  A module-level
``app`` is exposed so ``uvicorn wavegate.main:app`` works out of the box.
"""

from __future__ import annotations

import asyncio
import os
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader

from wavegate import __version__
from wavegate.errors import ConfigError
from wavegate.gateway import Gateway
from wavegate.middleware import RequestLogMiddleware
from wavegate.middleware.logging import log_error, log_info
from wavegate.models import EventSink
from wavegate.record_log import MAX_LOG_LINES, RecordLog
from wavegate.settings import Settings, load_settings

GatewayFactory = Callable[[Settings, EventSink], Gateway]


def create_app(
    settings: Optional[Settings] = None,
    config_path: Optional[str] = None,
    gateway_factory: GatewayFactory = Gateway,
) -> FastAPI:
    """Factory function for constructing the FastAPI application.

    ``settings`` skips loading the configuration file.  ``gateway_factory``
    builds the pipeline from the settings and the record log sink.
    """
    record_log = RecordLog()
    api_key = os.getenv("WAVEGATE_API_KEY")

    def _on_gateway_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            record_log.listener_failed(exc)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        gateway = None
        task = None
        try:
            cfg = settings or load_settings(config_path)
        except ConfigError as e:
            log_error("settings_load_failed", error=str(e))
            record_log.config_failed(e)
        else:
            gateway = gateway_factory(cfg, record_log)
            task = asyncio.create_task(gateway.run())
            task.add_done_callback(_on_gateway_done)
        app.state.gateway = gateway
        app.state.gateway_task = task

        yield

        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        if gateway is not None:
            log_info("gateway_draining", in_flight=gateway.in_flight)
            await gateway.drain()

    app = FastAPI(title="Wavelog Gate", version=__version__, lifespan=lifespan)
    app.state.record_log = record_log

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    # -----------------------------------------------------------------------
    # API key dependency
    # -----------------------------------------------------------------------
    api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)

    def require_api_key(x_api_key: str = Depends(api_key_header)) -> None:
        """Validate the ``x-api-key`` header against ``WAVEGATE_API_KEY``."""
        if api_key and x_api_key != api_key:
            raise HTTPException(status_code=401, detail="Missing or invalid API key")

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    @app.get("/")
    def root():
        """Return a simple service descriptor for programmatic clients."""
        return {
            "ok": True,
            "service": "Wavelog Gate",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "status": "/api/status",
            "qsos": "/api/qsos",
        }

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"ok": True}

    @app.get("/api/status")
    def status():
        """Report what the gateway listens on and its latest status line."""
        gateway = getattr(app.state, "gateway", None)
        task = getattr(app.state, "gateway_task", None)
        return {
            "listen_info": record_log.listen_info,
            "status_message": record_log.status_message,
            "running": task is not None and not task.done(),
            "in_flight": gateway.in_flight if gateway is not None else 0,
            "records": len(record_log.records),
        }

    @app.get("/api/qsos", dependencies=[Depends(require_api_key)])
    def qsos(limit: int = Query(default=50, ge=1, le=MAX_LOG_LINES)):
        """Return the most recently processed QSOs, newest first."""
        return {"records": record_log.recent(limit)}

    return app


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = create_app(config_path=os.getenv("WAVEGATE_CONFIG"))
