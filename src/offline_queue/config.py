from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    STORAGE_BACKEND: Literal["redis", "file"] = "file"
    REDIS_URL: str = "redis://localhost:6379/0"
    QUEUE_DATA_DIR: str = ".offline_queue"
    QUEUE_STORAGE_KEY: str = "@offline_queue"

    MAX_RETRY_ATTEMPTS: int = 3
    TRANSPORT_TIMEOUT: float = 10.0

    API_BASE_URL: str = "http://localhost:3000/api"

    CONNECTIVITY_PROBE_URL: str = "http://localhost:3000/health"
    CONNECTIVITY_PROBE_TIMEOUT: float = 3.0
    CONNECTIVITY_POLL_INTERVAL: float = 5.0
    ASSUME_ONLINE: bool = False

    BACKGROUND_DRAIN_INTERVAL: float = 15 * 60

    WS_HEARTBEAT_SECONDS: int = 30

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "info"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
