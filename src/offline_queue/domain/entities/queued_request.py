from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from offline_queue.domain.value_objects.enums import HttpMethod
from offline_queue.domain.value_objects.ids import QueueId


@dataclass(frozen=True, slots=True)
class QueuedRequest:
    id: QueueId
    url: str
    method: HttpMethod
    body: Any | None
    headers: dict[str, str] | None
    created_at: datetime
    attempt_count: int = 0

    def with_attempt_count(self, attempt_count: int) -> QueuedRequest:
        if attempt_count < self.attempt_count:
            raise ValueError("attempt_count never decreases")
        return replace(self, attempt_count=attempt_count)
