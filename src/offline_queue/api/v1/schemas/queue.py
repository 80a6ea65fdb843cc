from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from offline_queue.domain.value_objects.enums import AppState, DrainState, HttpMethod


class EnqueueRequest(BaseModel):
    url: str = Field(min_length=1)
    method: HttpMethod
    body: Any | None = None
    headers: dict[str, str] | None = None


class QueuedRequestResponse(BaseModel):
    id: str
    url: str
    method: HttpMethod
    body: Any | None
    headers: dict[str, str] | None
    created_at: datetime
    attempt_count: int

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DrainResponse(BaseModel):
    state: DrainState
    sent: int
    requeued: int
    failed: int
    evicted: int
    persistence_errors: int

    model_config = {"from_attributes": True}


class LifecycleRequest(BaseModel):
    state: AppState
