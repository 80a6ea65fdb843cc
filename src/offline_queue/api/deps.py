"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from offline_queue.infrastructure.signals import LifecycleSignals
from offline_queue.runtime import QueueRuntime
from offline_queue.services.drain_engine import RetryDrainEngine
from offline_queue.services.triggers import TriggerAdapter


def get_runtime(request: Request) -> QueueRuntime:
    return request.app.state.runtime


RuntimeDep = Annotated[QueueRuntime, Depends(get_runtime)]


def get_engine(runtime: RuntimeDep) -> RetryDrainEngine:
    return runtime.engine


EngineDep = Annotated[RetryDrainEngine, Depends(get_engine)]


def get_triggers(runtime: RuntimeDep) -> TriggerAdapter:
    return runtime.triggers


TriggersDep = Annotated[TriggerAdapter, Depends(get_triggers)]


def get_lifecycle(runtime: RuntimeDep) -> LifecycleSignals:
    return runtime.lifecycle


LifecycleDep = Annotated[LifecycleSignals, Depends(get_lifecycle)]
