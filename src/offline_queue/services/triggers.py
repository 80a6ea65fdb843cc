"""Turns connectivity, lifecycle and scheduler signals into drain requests."""
from __future__ import annotations

import logging
from typing import Callable, Protocol

from offline_queue.application.dto.events import DrainReport
from offline_queue.application.ports.connectivity import SignalSource
from offline_queue.domain.value_objects.enums import AppState, BackgroundFetchResult, DrainState

logger = logging.getLogger(__name__)


class Drainable(Protocol):
    async def drain(self) -> DrainReport: ...


class TriggerAdapter:
    """Edge-triggered forwarding to ``drain()``; holds no retry policy.

    Extra drain calls are cheap because the engine drops overlapping passes,
    so the adapter only filters out repeated "already online" / "already
    active" notifications.
    """

    def __init__(self, engine: Drainable) -> None:
        self._engine = engine
        self._online: bool | None = None
        self._app_state: AppState | None = None
        self._unsubscribers: list[Callable[[], None]] = []

    def prime(self, *, online: bool | None = None, app_state: AppState | None = None) -> None:
        """Seed the last known state without triggering a drain."""
        if online is not None:
            self._online = online
        if app_state is not None:
            self._app_state = app_state

    def attach(
        self,
        connectivity: SignalSource | None = None,
        lifecycle: SignalSource | None = None,
    ) -> None:
        if connectivity is not None:
            self._unsubscribers.append(connectivity.subscribe(self.on_connectivity_changed))
        if lifecycle is not None:
            self._unsubscribers.append(lifecycle.subscribe(self.on_app_state_changed))

    def detach(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    async def on_connectivity_changed(self, online: bool) -> None:
        previous, self._online = self._online, online
        if online and previous is not True:
            logger.info("Network restored, draining queue")
            await self._request_drain("connectivity")

    async def on_app_state_changed(self, state: AppState) -> None:
        previous, self._app_state = self._app_state, AppState(state)
        if self._app_state is AppState.ACTIVE and previous is not AppState.ACTIVE:
            logger.info("App came to foreground, checking queue")
            await self._request_drain("foreground")

    async def on_background_fetch(self) -> BackgroundFetchResult:
        logger.info("Background task: draining queue")
        report = await self._request_drain("background")
        if report is None or report.state is DrainState.ABORTED:
            return BackgroundFetchResult.FAILED
        if report.changed:
            return BackgroundFetchResult.NEW_DATA
        return BackgroundFetchResult.NO_DATA

    async def _request_drain(self, source: str) -> DrainReport | None:
        try:
            report = await self._engine.drain()
        except Exception:
            logger.exception("Drain requested by %s failed", source)
            return None
        logger.debug("Drain (%s) finished: %s", source, report)
        return report
