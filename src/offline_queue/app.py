from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from offline_queue.api.v1.routers import health, queue, ws
from offline_queue.application.exceptions import (
    EnqueueFailedError,
    RequestQueuedError,
    ValidationError,
)
from offline_queue.config import settings
from offline_queue.infrastructure.ws.manager import ConnectionManager
from offline_queue.runtime import QueueRuntime, build_runtime
from offline_queue.workers.background_drain import BackgroundDrainScheduler

logger = logging.getLogger(__name__)


def _make_lifespan(runtime: QueueRuntime | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup / shutdown lifecycle."""
        rt = runtime or build_runtime(settings)
        app.state.runtime = rt

        ws_manager = ConnectionManager()
        ws_manager.bind(rt.notifier)
        app.state.ws_manager = ws_manager

        await rt.start()
        scheduler = BackgroundDrainScheduler(rt.triggers, interval=settings.BACKGROUND_DRAIN_INTERVAL)
        await scheduler.start()
        logger.info("Offline queue runtime started")

        yield

        await scheduler.stop()
        ws_manager.unbind()
        await rt.stop()

    return lifespan


def create_app(runtime: QueueRuntime | None = None) -> FastAPI:
    app = FastAPI(
        title="Offline Request Queue",
        version="0.1.0",
        lifespan=_make_lifespan(runtime),
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(queue.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EnqueueFailedError)
    async def _enqueue_failed(_req: Request, exc: EnqueueFailedError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": exc.detail})

    @app.exception_handler(RequestQueuedError)
    async def _queued(_req: Request, exc: RequestQueuedError) -> JSONResponse:
        return JSONResponse(
            status_code=202,
            content={"detail": exc.detail, "queueId": exc.queue_id, "reason": exc.reason},
        )

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
