from __future__ import annotations

from typing import Protocol

from offline_queue.domain.entities.queued_request import QueuedRequest


class QueueRepository(Protocol):
    async def load(self) -> list[QueuedRequest]: ...

    async def save(self, queue: list[QueuedRequest]) -> bool: ...
