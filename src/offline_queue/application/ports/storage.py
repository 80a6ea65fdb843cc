from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Durable blob storage addressed by a string key."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...
