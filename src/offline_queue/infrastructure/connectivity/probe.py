from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class HttpConnectivityProbe:
    """Implements application.ports.connectivity.ConnectivityProbe.

    Any HTTP response from the probe URL counts as reachable; the status code
    is irrelevant because the question is only whether the backend answers.
    """

    def __init__(self, client: httpx.AsyncClient, url: str, *, timeout: float = 3.0) -> None:
        self._client = client
        self._url = url
        self._timeout = timeout

    async def is_reachable(self) -> bool:
        try:
            await self._client.head(self._url, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.debug("Probe %s unreachable: %r", self._url, exc)
            return False
        return True


class StaticConnectivityProbe:
    """Reports a fixed flag; handy for hosts that push connectivity in themselves."""

    def __init__(self, online: bool = True) -> None:
        self.online = online

    async def is_reachable(self) -> bool:
        return self.online
