from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from offline_queue.api.deps import EngineDep, LifecycleDep, RuntimeDep
from offline_queue.api.v1.schemas.queue import (
    DrainResponse,
    EnqueueRequest,
    LifecycleRequest,
    QueuedRequestResponse,
)
from offline_queue.application.dto.request import NewRequestDTO

router = APIRouter(prefix="/api/v1", tags=["queue"])


@router.get("/queue", response_model=list[QueuedRequestResponse], response_model_by_alias=True)
async def get_queue(engine: EngineDep) -> list[QueuedRequestResponse]:
    queue = await engine.get_queue()
    return [QueuedRequestResponse.model_validate(item) for item in queue]


@router.post(
    "/queue",
    response_model=QueuedRequestResponse,
    response_model_by_alias=True,
    status_code=201,
)
async def enqueue(body: EnqueueRequest, engine: EngineDep) -> QueuedRequestResponse:
    item = await engine.enqueue(
        NewRequestDTO(url=body.url, method=body.method, body=body.body, headers=body.headers)
    )
    return QueuedRequestResponse.model_validate(item)


@router.post("/queue/drain", response_model=DrainResponse)
async def drain(engine: EngineDep) -> DrainResponse:
    report = await engine.drain()
    return DrainResponse.model_validate(report)


@router.post("/lifecycle", status_code=202)
async def lifecycle(body: LifecycleRequest, signals: LifecycleDep) -> dict[str, str]:
    await signals.emit(body.state)
    return {"state": body.state.value}


@router.post("/requests")
async def send_request(body: EnqueueRequest, runtime: RuntimeDep) -> Any:
    """Send live; if that is not possible the request is queued and a 202 is returned."""
    return await runtime.api_client.send(body.url, body.method, body.body, body.headers)
