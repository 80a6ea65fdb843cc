"""Durable queue snapshot stored as one serialized blob under one key."""
from __future__ import annotations

import logging

from offline_queue.application.ports.storage import KeyValueStore
from offline_queue.domain.entities.queued_request import QueuedRequest
from offline_queue.infrastructure.storage.mappers import entity_to_record, record_to_entity
from offline_queue.infrastructure.storage.serializer import deserialize_records, serialize_records

logger = logging.getLogger(__name__)


class QueueStore:
    """Implements application.repositories.queue.QueueRepository.

    Pure read/modify/write over a KeyValueStore. Callers are responsible for
    not interleaving load/save pairs that belong to different operations.
    """

    def __init__(self, kv: KeyValueStore, key: str) -> None:
        self._kv = kv
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> list[QueuedRequest]:
        try:
            raw = await self._kv.get(self._key)
        except Exception:
            logger.exception("Error reading queue from key=%s", self._key)
            return []
        if not raw:
            return []

        try:
            records = deserialize_records(raw)
        except ValueError:
            logger.exception("Unreadable queue blob under key=%s, treating as empty", self._key)
            return []

        queue: list[QueuedRequest] = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("Skipping non-object queue entry at index %d", index)
                continue
            try:
                queue.append(record_to_entity(record))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping unreadable queue entry at index %d", index, exc_info=True)
        return queue

    async def save(self, queue: list[QueuedRequest]) -> bool:
        try:
            raw = serialize_records([entity_to_record(item) for item in queue])
            await self._kv.set(self._key, raw)
        except Exception:
            logger.exception("Error writing queue (%d items) to key=%s", len(queue), self._key)
            return False
        return True
