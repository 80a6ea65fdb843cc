from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from offline_queue.domain.entities.queued_request import QueuedRequest
from offline_queue.domain.value_objects.enums import HttpMethod
from offline_queue.domain.value_objects.ids import QueueId

# epoch values at or above this are milliseconds (1e11 seconds is past the year 5000)
_EPOCH_MILLIS_THRESHOLD = 1e11


def entity_to_record(entity: QueuedRequest) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": entity.id,
        "url": entity.url,
        "method": entity.method.value,
        "createdAt": entity.created_at.isoformat(),
        "attemptCount": entity.attempt_count,
    }
    if entity.body is not None:
        record["body"] = entity.body
    if entity.headers is not None:
        record["headers"] = entity.headers
    return record


def _parse_created_at(raw: Any) -> datetime:
    if isinstance(raw, str):
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            try:
                raw = float(raw)
            except ValueError:
                return datetime.now(timezone.utc)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        seconds = raw / 1000 if raw >= _EPOCH_MILLIS_THRESHOLD else raw
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    return datetime.now(timezone.utc)


def record_to_entity(record: dict[str, Any]) -> QueuedRequest:
    """Build an entity from a stored record.

    Unknown keys are ignored and optional keys fall back to defaults so that
    records written by older or newer builds stay readable. Raises KeyError /
    ValueError when the record cannot identify a request at all: no id, no
    url, or a missing or unknown method.
    """
    headers = record.get("headers")
    return QueuedRequest(
        id=QueueId(str(record["id"])),
        url=str(record["url"]),
        method=HttpMethod(str(record["method"]).upper()),
        body=record.get("body"),
        headers=dict(headers) if isinstance(headers, dict) else None,
        created_at=_parse_created_at(record.get("createdAt")),
        attempt_count=max(int(record.get("attemptCount") or 0), 0),
    )
