"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable

import pytest

from offline_queue.application.dto.events import StatusUpdate
from offline_queue.application.dto.request import DeliveryResult, NewRequestDTO
from offline_queue.domain.entities.queued_request import QueuedRequest
from offline_queue.domain.value_objects.enums import HttpMethod
from offline_queue.infrastructure.storage.queue_store import QueueStore
from offline_queue.services.drain_engine import RetryDrainEngine
from offline_queue.services.notifier import EventNotifier

QUEUE_KEY = "@offline_queue"


def make_request_dto(
    *,
    url: str = "http://backend.test/api/records",
    method: HttpMethod = HttpMethod.POST,
    body: Any | None = None,
    headers: dict[str, str] | None = None,
) -> NewRequestDTO:
    return NewRequestDTO(
        url=url,
        method=method,
        body=body if body is not None else {"value": "hello"},
        headers=headers,
    )


@dataclass
class FakeKeyValueStore:
    data: dict[str, str] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    # successful writes left before every further write fails; None means unlimited
    writes_allowed: int | None = None
    writes: int = 0

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("storage read failed")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes or self.writes_allowed == 0:
            raise OSError("storage write failed")
        if self.writes_allowed is not None:
            self.writes_allowed -= 1
        self.writes += 1
        self.data[key] = value

    def records(self, key: str = QUEUE_KEY) -> list[dict[str, Any]]:
        raw = self.data.get(key)
        return json.loads(raw) if raw else []


@dataclass
class FakeTransport:
    """Returns scripted results per queue id, falling back to ``default_ok``."""

    default_ok: bool = True
    scripted: dict[str, list[bool]] = field(default_factory=dict)
    calls: list[QueuedRequest] = field(default_factory=list)
    before_send: Callable[[QueuedRequest], Awaitable[None]] | None = None
    raise_on_send: bool = False

    async def send(self, request: QueuedRequest) -> DeliveryResult:
        self.calls.append(request)
        if self.before_send is not None:
            await self.before_send(request)
        if self.raise_on_send:
            raise RuntimeError("transport exploded")
        outcomes = self.scripted.get(request.id)
        ok = outcomes.pop(0) if outcomes else self.default_ok
        if ok:
            return DeliveryResult(ok=True, status_code=201)
        return DeliveryResult(ok=False, status_code=503, error="HTTP 503")

    def attempts_for(self, queue_id: str) -> int:
        return sum(1 for call in self.calls if call.id == queue_id)


@dataclass
class FakeConnectivity:
    online: bool = True
    checks: int = 0

    async def is_reachable(self) -> bool:
        self.checks += 1
        await asyncio.sleep(0)
        return self.online


@dataclass
class FixedClock:
    current: datetime = field(default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))

    def now(self) -> datetime:
        value = self.current
        self.current = value + timedelta(seconds=1)
        return value


@dataclass
class SequentialIds:
    counter: int = 0

    def new_id(self) -> str:
        self.counter += 1
        return f"req-{self.counter}"


@dataclass
class EventRecorder:
    """Captures events plus the persisted queue as it looked when each fired."""

    kv: FakeKeyValueStore
    queue_snapshots: list[list[dict[str, Any]]] = field(default_factory=list)
    statuses: list[StatusUpdate] = field(default_factory=list)

    def on_queue_changed(self) -> None:
        self.queue_snapshots.append(self.kv.records())

    def on_status(self, update: StatusUpdate) -> None:
        self.statuses.append(update)

    def attach(self, notifier: EventNotifier) -> None:
        notifier.subscribe_queue_changed(self.on_queue_changed)
        notifier.subscribe_status(self.on_status)


@dataclass
class EngineHarness:
    engine: RetryDrainEngine
    kv: FakeKeyValueStore
    transport: FakeTransport
    connectivity: FakeConnectivity
    notifier: EventNotifier
    events: EventRecorder


def build_harness(*, max_attempts: int = 3) -> EngineHarness:
    kv = FakeKeyValueStore()
    transport = FakeTransport()
    connectivity = FakeConnectivity()
    notifier = EventNotifier()
    events = EventRecorder(kv)
    events.attach(notifier)
    engine = RetryDrainEngine(
        QueueStore(kv, QUEUE_KEY),
        transport,
        connectivity,
        notifier,
        max_attempts=max_attempts,
        clock=FixedClock(),
        ids=SequentialIds(),
    )
    return EngineHarness(engine, kv, transport, connectivity, notifier, events)


@pytest.fixture
def harness() -> EngineHarness:
    return build_harness()
