"""HTTP replay of queued requests."""
from __future__ import annotations

import logging

import httpx

from offline_queue.application.dto.request import DeliveryResult
from offline_queue.domain.entities.queued_request import QueuedRequest

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Implements application.ports.transport.Transport.

    Every problem (connection error, timeout, non-2xx status) is reported as
    a failed DeliveryResult; nothing is raised to the caller.
    """

    def __init__(self, client: httpx.AsyncClient, *, timeout: float = 10.0) -> None:
        self._client = client
        self._timeout = timeout

    async def send(self, request: QueuedRequest) -> DeliveryResult:
        try:
            response = await self._client.request(
                request.method.value,
                request.url,
                json=request.body,
                headers=request.headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException:
            return DeliveryResult(ok=False, error="timeout")
        except httpx.HTTPError as exc:
            return DeliveryResult(ok=False, error=repr(exc))

        if response.is_success:
            return DeliveryResult(ok=True, status_code=response.status_code)
        return DeliveryResult(
            ok=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}",
        )
