"""Offline request queue: durable enqueue plus the single-flight drain pass."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from offline_queue.application.dto.events import DrainReport, StatusUpdate
from offline_queue.application.dto.request import DeliveryResult, NewRequestDTO
from offline_queue.application.exceptions import EnqueueFailedError, ValidationError
from offline_queue.application.ports.clock import Clock, IdFactory, SystemClock, UuidFactory
from offline_queue.application.ports.connectivity import ConnectivityProbe
from offline_queue.application.ports.transport import Transport
from offline_queue.application.repositories.queue import QueueRepository
from offline_queue.domain.entities.queued_request import QueuedRequest
from offline_queue.domain.value_objects.enums import (
    DeliveryStatus,
    DrainState,
    HttpMethod,
    ItemOutcome,
)
from offline_queue.domain.value_objects.ids import QueueId
from offline_queue.services.notifier import EventNotifier

logger = logging.getLogger(__name__)

MAX_RETRY_ATTEMPTS = 3


@dataclass(frozen=True, slots=True)
class ItemResult:
    outcome: ItemOutcome
    persisted: bool = True


@dataclass(slots=True)
class _PassTally:
    sent: int = 0
    requeued: int = 0
    failed: int = 0
    evicted: int = 0
    persistence_errors: int = 0

    def record(self, result: ItemResult) -> None:
        if result.outcome is ItemOutcome.SENT:
            self.sent += 1
        elif result.outcome is ItemOutcome.REQUEUED:
            self.requeued += 1
        elif result.outcome is ItemOutcome.FAILED:
            self.failed += 1
        else:
            self.evicted += 1
        if not result.persisted:
            self.persistence_errors += 1

    def report(self, state: DrainState) -> DrainReport:
        return DrainReport(
            state=state,
            sent=self.sent,
            requeued=self.requeued,
            failed=self.failed,
            evicted=self.evicted,
            persistence_errors=self.persistence_errors,
        )


class RetryDrainEngine:
    """Owns the persisted queue and replays it against the transport.

    All queue mutations (enqueue, attempt-count updates, removals) run as a
    load-modify-save under one lock. At most one drain pass runs at a time;
    a drain requested while another is running returns immediately.
    """

    def __init__(
        self,
        store: QueueRepository,
        transport: Transport,
        connectivity: ConnectivityProbe,
        notifier: EventNotifier,
        *,
        max_attempts: int = MAX_RETRY_ATTEMPTS,
        clock: Clock | None = None,
        ids: IdFactory | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._store = store
        self._transport = transport
        self._connectivity = connectivity
        self._notifier = notifier
        self._max_attempts = max_attempts
        self._clock = clock or SystemClock()
        self._ids = ids or UuidFactory()
        self._queue_lock = asyncio.Lock()
        self._draining = False
        self._sent_unremoved: set[QueueId] = set()
        self._failed_unremoved: set[QueueId] = set()

    @property
    def notifier(self) -> EventNotifier:
        return self._notifier

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def is_draining(self) -> bool:
        return self._draining

    async def enqueue(self, dto: NewRequestDTO) -> QueuedRequest:
        """Persist a new request at the tail of the queue.

        Raises EnqueueFailedError if the queue could not be written; in that
        case the request is not queued and no event is published.
        """
        if not dto.url:
            raise ValidationError("url is required")
        try:
            method = HttpMethod(str(dto.method).upper())
        except ValueError as exc:
            raise ValidationError(f"unsupported method: {dto.method}") from exc

        item = QueuedRequest(
            id=QueueId(self._ids.new_id()),
            url=dto.url,
            method=method,
            body=dto.body,
            headers=dict(dto.headers) if dto.headers is not None else None,
            created_at=self._clock.now(),
            attempt_count=0,
        )

        async with self._queue_lock:
            queue = await self._store.load()
            queue.append(item)
            saved = await self._store.save(queue)

        if not saved:
            raise EnqueueFailedError(f"Could not persist request {item.method} {item.url}")

        logger.info("Request queued: %s %s (id=%s)", item.method, item.url, item.id)
        self._notifier.publish_queue_changed()
        return item

    async def get_queue(self) -> list[QueuedRequest]:
        return await self._store.load()

    async def drain(self) -> DrainReport:
        """Run one pass over the queue. Never raises."""
        if self._draining:
            logger.debug("Drain already in progress, ignoring request")
            return DrainReport(state=DrainState.BUSY)

        # set before the first await so overlapping callers see it
        self._draining = True
        tally = _PassTally()
        try:
            if not await self._is_reachable():
                logger.info("Cannot drain queue - offline")
                return DrainReport(state=DrainState.OFFLINE)

            snapshot = await self._store.load()
            if snapshot:
                logger.info("Draining queue with %d items", len(snapshot))
            for request in snapshot:
                tally.record(await self._process_item(request))
            return tally.report(DrainState.COMPLETED)
        except Exception:
            logger.exception("Drain pass aborted")
            return tally.report(DrainState.ABORTED)
        finally:
            self._draining = False

    async def _is_reachable(self) -> bool:
        try:
            return await self._connectivity.is_reachable()
        except Exception:
            logger.exception("Connectivity check failed, assuming offline")
            return False

    async def _process_item(self, request: QueuedRequest) -> ItemResult:
        if request.id in self._sent_unremoved:
            # delivered on an earlier pass; only the removal is outstanding
            persisted = await self._remove(request.id)
            if persisted:
                self._sent_unremoved.discard(request.id)
            return ItemResult(ItemOutcome.EVICTED, persisted)

        if request.attempt_count >= self._max_attempts:
            logger.info(
                "Evicting request %s, attempt budget already spent (%d/%d)",
                request.id, request.attempt_count, self._max_attempts,
            )
            if not await self._remove(request.id):
                return ItemResult(ItemOutcome.EVICTED, persisted=False)
            if request.id in self._failed_unremoved:
                self._failed_unremoved.discard(request.id)
                self._publish_failed(request.id, request.attempt_count)
                return ItemResult(ItemOutcome.FAILED)
            return ItemResult(ItemOutcome.EVICTED)

        result = await self._deliver(request)
        if result.ok:
            persisted = await self._remove(request.id)
            if not persisted:
                self._sent_unremoved.add(request.id)
            self._notifier.publish_status(StatusUpdate(request.id, DeliveryStatus.SENT))
            logger.info("Successfully sent queued request: %s", request.id)
            return ItemResult(ItemOutcome.SENT, persisted)

        attempts = request.attempt_count + 1
        logger.warning(
            "Request failed (attempt %d/%d): %s %s",
            attempts, self._max_attempts, request.id, result.error or result.status_code,
        )
        persisted = await self._update_attempt_count(request.id, attempts)
        if attempts < self._max_attempts:
            return ItemResult(ItemOutcome.REQUEUED, persisted)

        logger.info("Max retries reached for request %s, removing from queue", request.id)
        if not await self._remove(request.id):
            # failed is terminal, so it is only reported once the item is gone
            logger.warning("Request %s stays queued until its removal is persisted", request.id)
            if persisted:
                self._failed_unremoved.add(request.id)
            return ItemResult(ItemOutcome.REQUEUED, persisted=False)
        self._publish_failed(request.id, attempts)
        return ItemResult(ItemOutcome.FAILED, persisted)

    def _publish_failed(self, queue_id: QueueId, attempt_count: int) -> None:
        self._notifier.publish_status(
            StatusUpdate(queue_id, DeliveryStatus.FAILED, attempt_count=attempt_count)
        )

    async def _deliver(self, request: QueuedRequest) -> DeliveryResult:
        try:
            return await self._transport.send(request)
        except Exception as exc:
            logger.exception("Transport raised while sending %s", request.id)
            return DeliveryResult(ok=False, error=repr(exc))

    async def _remove(self, queue_id: str) -> bool:
        async with self._queue_lock:
            queue = await self._store.load()
            remaining = [item for item in queue if item.id != queue_id]
            if len(remaining) == len(queue):
                return True
            if not await self._store.save(remaining):
                logger.warning("Removal of %s was not persisted", queue_id)
                return False
        self._notifier.publish_queue_changed()
        return True

    async def _update_attempt_count(self, queue_id: str, attempt_count: int) -> bool:
        async with self._queue_lock:
            queue = await self._store.load()
            for index, item in enumerate(queue):
                if item.id == queue_id:
                    queue[index] = item.with_attempt_count(max(attempt_count, item.attempt_count))
                    break
            else:
                return True
            if not await self._store.save(queue):
                logger.warning("Attempt count %d for %s was not persisted", attempt_count, queue_id)
                return False
        self._notifier.publish_queue_changed()
        return True
