from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class ValidationError(AppError):
    pass


class PersistenceError(AppError):
    pass


class EnqueueFailedError(PersistenceError):
    """The request could not be made durable and must not be treated as queued."""


class RequestQueuedError(AppError):
    """A live send was not possible; the request was queued for replay instead."""

    def __init__(self, queue_id: str, reason: str = "offline") -> None:
        self.queue_id = queue_id
        self.reason = reason
        super().__init__(f"Request queued ({reason}). ID: {queue_id}")
