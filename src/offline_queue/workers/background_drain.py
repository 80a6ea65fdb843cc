"""Periodic background drain: the scheduler side of the trigger adapter."""
from __future__ import annotations

import asyncio
import logging

from offline_queue.config import settings
from offline_queue.runtime import build_runtime
from offline_queue.services.triggers import TriggerAdapter

logger = logging.getLogger(__name__)


class BackgroundDrainScheduler:
    """Calls ``on_background_fetch`` every ``interval`` seconds until stopped."""

    def __init__(self, triggers: TriggerAdapter, *, interval: float) -> None:
        self._triggers = triggers
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self.run(), name="background-drain")
        logger.info("Background drain registered (interval=%.0fs)", self._interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Background drain unregistered")

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                result = await self._triggers.on_background_fetch()
                logger.info("Background drain finished: %s", result)
            except Exception:
                logger.exception("Background drain loop error")


async def run_background_drain() -> None:
    runtime = build_runtime(settings)
    scheduler = BackgroundDrainScheduler(runtime.triggers, interval=settings.BACKGROUND_DRAIN_INTERVAL)

    logger.info(
        "Background drain worker started (interval=%.0fs, max_attempts=%d)",
        settings.BACKGROUND_DRAIN_INTERVAL,
        settings.MAX_RETRY_ATTEMPTS,
    )
    try:
        await runtime.triggers.on_background_fetch()
        await scheduler.run()
    finally:
        await runtime.stop()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_background_drain())


if __name__ == "__main__":
    main()
