"""Root conftest: loads .env.test and pins test-safe settings before any module imports."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for line in _env_test.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())

os.environ.setdefault("STORAGE_BACKEND", "file")
os.environ.setdefault("QUEUE_DATA_DIR", tempfile.mkdtemp(prefix="offline-queue-test-"))
os.environ.setdefault("ASSUME_ONLINE", "true")
os.environ.setdefault("BACKGROUND_DRAIN_INTERVAL", "3600")
os.environ.setdefault("CONNECTIVITY_POLL_INTERVAL", "3600")
