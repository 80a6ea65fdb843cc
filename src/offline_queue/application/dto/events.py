from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from offline_queue.domain.value_objects.enums import DeliveryStatus, DrainState


@dataclass(frozen=True, slots=True)
class StatusUpdate:
    queue_id: str
    status: DeliveryStatus
    attempt_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"queueId": self.queue_id, "status": self.status.value}
        if self.attempt_count is not None:
            data["attemptCount"] = self.attempt_count
        return data


@dataclass(frozen=True, slots=True)
class DrainReport:
    state: DrainState
    sent: int = 0
    requeued: int = 0
    failed: int = 0
    evicted: int = 0
    persistence_errors: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.sent or self.requeued or self.failed or self.evicted)
