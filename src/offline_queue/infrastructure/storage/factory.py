from __future__ import annotations

import logging

import redis.asyncio as aioredis

from offline_queue.config import Settings
from offline_queue.infrastructure.storage.file_kv import FileKeyValueStore
from offline_queue.infrastructure.storage.redis_kv import RedisKeyValueStore

logger = logging.getLogger(__name__)


def build_kv_store(settings: Settings) -> RedisKeyValueStore | FileKeyValueStore:
    if settings.STORAGE_BACKEND == "redis":
        logger.info("Using Redis queue storage at %s", settings.REDIS_URL)
        return RedisKeyValueStore(aioredis.from_url(settings.REDIS_URL, decode_responses=True))
    logger.info("Using file queue storage under %s", settings.QUEUE_DATA_DIR)
    return FileKeyValueStore(settings.QUEUE_DATA_DIR)
