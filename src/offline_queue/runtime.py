"""Explicit construction and teardown of the queue components."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from offline_queue.application.ports.connectivity import ConnectivityProbe
from offline_queue.config import Settings
from offline_queue.infrastructure.connectivity.monitor import ConnectivityMonitor
from offline_queue.infrastructure.connectivity.probe import HttpConnectivityProbe, StaticConnectivityProbe
from offline_queue.infrastructure.signals import LifecycleSignals
from offline_queue.infrastructure.storage.factory import build_kv_store
from offline_queue.infrastructure.storage.file_kv import FileKeyValueStore
from offline_queue.infrastructure.storage.queue_store import QueueStore
from offline_queue.infrastructure.storage.redis_kv import RedisKeyValueStore
from offline_queue.infrastructure.transport.http import HttpxTransport
from offline_queue.services.api_client import OfflineApiClient
from offline_queue.services.drain_engine import RetryDrainEngine
from offline_queue.services.notifier import EventNotifier
from offline_queue.services.triggers import TriggerAdapter

logger = logging.getLogger(__name__)


@dataclass
class QueueRuntime:
    """One engine instance plus the collaborators wired around it."""

    engine: RetryDrainEngine
    notifier: EventNotifier
    triggers: TriggerAdapter
    monitor: ConnectivityMonitor
    lifecycle: LifecycleSignals
    api_client: OfflineApiClient
    kv: RedisKeyValueStore | FileKeyValueStore
    http: httpx.AsyncClient

    async def start(self) -> None:
        self.triggers.attach(self.monitor, self.lifecycle)
        await self.monitor.start()

    async def stop(self) -> None:
        await self.monitor.stop()
        self.triggers.detach()
        self.notifier.clear()
        await self.http.aclose()
        await self.kv.aclose()
        logger.info("Queue runtime stopped")


def build_runtime(
    settings: Settings,
    *,
    probe: ConnectivityProbe | None = None,
    http: httpx.AsyncClient | None = None,
) -> QueueRuntime:
    http = http or httpx.AsyncClient()
    kv = build_kv_store(settings)
    if probe is None and settings.ASSUME_ONLINE:
        probe = StaticConnectivityProbe(online=True)
    elif probe is None:
        probe = HttpConnectivityProbe(
            http,
            settings.CONNECTIVITY_PROBE_URL,
            timeout=settings.CONNECTIVITY_PROBE_TIMEOUT,
        )
    notifier = EventNotifier()
    engine = RetryDrainEngine(
        QueueStore(kv, settings.QUEUE_STORAGE_KEY),
        HttpxTransport(http, timeout=settings.TRANSPORT_TIMEOUT),
        probe,
        notifier,
        max_attempts=settings.MAX_RETRY_ATTEMPTS,
    )
    return QueueRuntime(
        engine=engine,
        notifier=notifier,
        triggers=TriggerAdapter(engine),
        monitor=ConnectivityMonitor(probe, interval=settings.CONNECTIVITY_POLL_INTERVAL),
        lifecycle=LifecycleSignals(),
        api_client=OfflineApiClient(
            engine,
            http,
            probe,
            base_url=settings.API_BASE_URL,
            timeout=settings.TRANSPORT_TIMEOUT,
        ),
        kv=kv,
        http=http,
    )
