"""Entrypoint: python -m offline_queue (host and port from HOST / PORT)."""
from __future__ import annotations

import uvicorn

from offline_queue.config import settings


def main() -> None:
    uvicorn.run(
        "offline_queue.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
