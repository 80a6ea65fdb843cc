from __future__ import annotations

from typing import Protocol

from offline_queue.application.dto.request import DeliveryResult
from offline_queue.domain.entities.queued_request import QueuedRequest


class Transport(Protocol):
    async def send(self, request: QueuedRequest) -> DeliveryResult: ...
