"""Background reachability polling that reports online/offline transitions."""
from __future__ import annotations

import asyncio
import logging

from offline_queue.application.ports.connectivity import ConnectivityProbe
from offline_queue.infrastructure.signals import AsyncSignal

logger = logging.getLogger(__name__)


class ConnectivityMonitor(AsyncSignal[bool]):
    """Polls a probe and notifies subscribers whenever the answer changes.

    While polling, subscribers run in tasks of their own so a slow subscriber
    (a drain pass) does not hold up the next probe. ``stop()`` waits for them.
    """

    def __init__(self, probe: ConnectivityProbe, *, interval: float = 5.0) -> None:
        super().__init__("connectivity")
        self._probe = probe
        self._interval = interval
        self._online: bool | None = None
        self._task: asyncio.Task[None] | None = None
        self._dispatches: set[asyncio.Task[None]] = set()

    @property
    def online(self) -> bool | None:
        return self._online

    async def check(self) -> bool:
        online, changed = await self._observe()
        if changed:
            await self.emit(online)
        return online

    async def start(self) -> None:
        self._task = asyncio.create_task(self._poll(), name="connectivity-monitor")
        logger.info("Connectivity monitor started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Connectivity monitor stopped")
        if self._dispatches:
            await asyncio.gather(*self._dispatches, return_exceptions=True)

    async def _observe(self) -> tuple[bool, bool]:
        try:
            online = await self._probe.is_reachable()
        except Exception:
            logger.exception("Connectivity probe failed")
            online = False
        if online == self._online:
            return online, False
        logger.info("Network status: %s", "online" if online else "offline")
        self._online = online
        return online, True

    def _dispatch(self, online: bool) -> None:
        task = asyncio.create_task(self.emit(online), name="connectivity-dispatch")
        self._dispatches.add(task)
        task.add_done_callback(self._dispatches.discard)

    async def _poll(self) -> None:
        while True:
            online, changed = await self._observe()
            if changed:
                self._dispatch(online)
            await asyncio.sleep(self._interval)
