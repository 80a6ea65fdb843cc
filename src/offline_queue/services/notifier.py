"""In-process observer registries for queue mutations and delivery outcomes."""
from __future__ import annotations

import itertools
import logging
from typing import Callable

from offline_queue.application.dto.events import StatusUpdate

logger = logging.getLogger(__name__)

QueueChangedCallback = Callable[[], None]
StatusCallback = Callable[[StatusUpdate], None]
Unsubscribe = Callable[[], None]


class EventNotifier:
    """Two independent registries, fired synchronously in subscription order.

    Publishing iterates over a snapshot of the registry, so callbacks may
    subscribe or unsubscribe while a publish is in flight. A callback that
    raises is logged and skipped; the remaining callbacks still run. Events
    are not retained: a late subscriber misses earlier events.
    """

    def __init__(self) -> None:
        self._seq = itertools.count()
        self._queue_listeners: dict[int, QueueChangedCallback] = {}
        self._status_listeners: dict[int, StatusCallback] = {}

    def subscribe_queue_changed(self, callback: QueueChangedCallback) -> Unsubscribe:
        return self._register(self._queue_listeners, callback)

    def subscribe_status(self, callback: StatusCallback) -> Unsubscribe:
        return self._register(self._status_listeners, callback)

    def publish_queue_changed(self) -> None:
        for token, callback in list(self._queue_listeners.items()):
            try:
                callback()
            except Exception:
                logger.exception("Queue-changed listener %d failed", token)

    def publish_status(self, update: StatusUpdate) -> None:
        for token, callback in list(self._status_listeners.items()):
            try:
                callback(update)
            except Exception:
                logger.exception(
                    "Status listener %d failed for queue_id=%s", token, update.queue_id,
                )

    @property
    def listener_count(self) -> int:
        return len(self._queue_listeners) + len(self._status_listeners)

    def clear(self) -> None:
        self._queue_listeners.clear()
        self._status_listeners.clear()

    def _register(self, registry: dict[int, Callable], callback: Callable) -> Unsubscribe:
        token = next(self._seq)
        registry[token] = callback

        def unsubscribe() -> None:
            registry.pop(token, None)

        return unsubscribe
