from __future__ import annotations

from enum import StrEnum


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class DeliveryStatus(StrEnum):
    SENT = "sent"
    FAILED = "failed"


class ItemOutcome(StrEnum):
    """Result of visiting a single queued request during a drain pass."""

    SENT = "sent"
    REQUEUED = "requeued"
    FAILED = "failed"
    EVICTED = "evicted"


class DrainState(StrEnum):
    COMPLETED = "completed"
    BUSY = "busy"
    OFFLINE = "offline"
    ABORTED = "aborted"


class AppState(StrEnum):
    ACTIVE = "active"
    BACKGROUND = "background"
    INACTIVE = "inactive"


class BackgroundFetchResult(StrEnum):
    NEW_DATA = "new_data"
    NO_DATA = "no_data"
    FAILED = "failed"
