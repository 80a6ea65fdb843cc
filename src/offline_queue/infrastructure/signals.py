"""Async fan-out used by connectivity and lifecycle sources."""
from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

AsyncCallback = Callable[[T], Coroutine[Any, Any, None]]


class AsyncSignal(Generic[T]):
    """Implements application.ports.connectivity.SignalSource.

    Callbacks are awaited one after another in subscription order; a failing
    callback is logged and does not stop the others.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._callbacks: list[AsyncCallback[T]] = []

    def subscribe(self, callback: AsyncCallback[T]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

        return unsubscribe

    async def emit(self, value: T) -> None:
        for callback in list(self._callbacks):
            try:
                await callback(value)
            except Exception:
                logger.exception("Error in %s signal callback", self._name)


class LifecycleSignals(AsyncSignal[Any]):
    """App lifecycle transitions pushed in by the host (or the HTTP surface)."""

    def __init__(self) -> None:
        super().__init__("lifecycle")
