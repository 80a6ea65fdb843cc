"""Producer-side send: try live, fall back to the offline queue."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from offline_queue.application.dto.request import NewRequestDTO
from offline_queue.application.exceptions import RequestQueuedError
from offline_queue.application.ports.connectivity import ConnectivityProbe
from offline_queue.domain.value_objects.enums import HttpMethod
from offline_queue.services.drain_engine import RetryDrainEngine

logger = logging.getLogger(__name__)


def resolve_url(url: str, base_url: str) -> str:
    if url.startswith(("http://", "https://")):
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


class OfflineApiClient:
    """Sends requests live when possible and queues them otherwise.

    A queued request surfaces as RequestQueuedError carrying the queue id;
    a request that could not even be queued surfaces as EnqueueFailedError.
    """

    def __init__(
        self,
        engine: RetryDrainEngine,
        client: httpx.AsyncClient,
        connectivity: ConnectivityProbe,
        *,
        base_url: str,
        timeout: float = 10.0,
    ) -> None:
        self._engine = engine
        self._client = client
        self._connectivity = connectivity
        self._base_url = base_url
        self._timeout = timeout

    async def send(
        self,
        url: str,
        method: HttpMethod,
        body: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        dto = NewRequestDTO(
            url=resolve_url(url, self._base_url),
            method=HttpMethod(method),
            body=body,
            headers=headers,
        )

        if not await self._connectivity.is_reachable():
            queued = await self._engine.enqueue(dto)
            raise RequestQueuedError(queued.id, "offline")

        try:
            response = await self._client.request(
                dto.method.value,
                dto.url,
                json=dto.body,
                headers=dto.headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.info("Live %s %s failed (%r), queueing", dto.method, dto.url, exc)
            queued = await self._engine.enqueue(dto)
            raise RequestQueuedError(queued.id, "failed") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
