from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from offline_queue.domain.value_objects.enums import HttpMethod


@dataclass(frozen=True, slots=True)
class NewRequestDTO:
    url: str
    method: HttpMethod
    body: Any | None = None
    headers: dict[str, str] | None = None


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    ok: bool
    status_code: int | None = None
    error: str | None = None
