"""File-backed key-value store: one file per key, replaced atomically."""
from __future__ import annotations

import asyncio
import hashlib
import os
import tempfile
from pathlib import Path


class FileKeyValueStore:
    """Implements application.ports.storage.KeyValueStore on the local filesystem."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    def path_for(self, key: str) -> Path:
        # keys like "@offline_queue" are not guaranteed to be valid file names
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in key).strip("_")
        return self._dir / f"{safe or 'key'}-{digest}.json"

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, self.path_for(key), value)

    async def ping(self) -> bool:
        return await asyncio.to_thread(self._writable)

    async def aclose(self) -> None:
        return None

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, path: Path, value: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _writable(self) -> bool:
        self._dir.mkdir(parents=True, exist_ok=True)
        return os.access(self._dir, os.W_OK)
