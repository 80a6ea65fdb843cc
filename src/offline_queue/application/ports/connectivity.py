from __future__ import annotations

from typing import Any, Callable, Coroutine, Protocol


class ConnectivityProbe(Protocol):
    async def is_reachable(self) -> bool: ...


class SignalSource(Protocol):
    """Anything that pushes signals to async callbacks and hands back an unsubscribe handle."""

    def subscribe(self, callback: Callable[[Any], Coroutine[Any, Any, None]]) -> Callable[[], None]: ...
