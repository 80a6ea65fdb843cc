"""In-process WebSocket fan-out of queue events."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from fastapi import WebSocket

from offline_queue.application.dto.events import StatusUpdate
from offline_queue.infrastructure.ws.protocol import WsOutbound
from offline_queue.services.notifier import EventNotifier

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Bridges synchronous notifier callbacks to per-connection send queues."""

    def __init__(self) -> None:
        self._outboxes: dict[WebSocket, asyncio.Queue[WsOutbound]] = {}
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def connection_count(self) -> int:
        return len(self._outboxes)

    def bind(self, notifier: EventNotifier) -> None:
        self._unsubscribers.append(notifier.subscribe_queue_changed(self._on_queue_changed))
        self._unsubscribers.append(notifier.subscribe_status(self._on_status))

    def unbind(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    async def connect(self, ws: WebSocket) -> asyncio.Queue[WsOutbound]:
        await ws.accept()
        outbox: asyncio.Queue[WsOutbound] = asyncio.Queue()
        self._outboxes[ws] = outbox
        logger.debug("WS connected (total=%d)", len(self._outboxes))
        return outbox

    def disconnect(self, ws: WebSocket) -> None:
        self._outboxes.pop(ws, None)
        logger.debug("WS disconnected (total=%d)", len(self._outboxes))

    def _on_queue_changed(self) -> None:
        self._fan_out(WsOutbound(type="queue.changed", data={}))

    def _on_status(self, update: StatusUpdate) -> None:
        self._fan_out(WsOutbound(type="queue.status", data=update.to_dict()))

    def _fan_out(self, message: WsOutbound) -> None:
        for outbox in list(self._outboxes.values()):
            outbox.put_nowait(message)
