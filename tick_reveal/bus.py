"""In-process signal bus for sequence events."""
from __future__ import annotations

from typing import Any, Callable

_Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Observer channel between schedulers and their consumers.

    ``emit`` dispatches synchronously, in subscription order. ``publish``
    queues a signal for the next ``flush`` for consumers that want to
    react outside the scheduler's call stack.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: _Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, signal_name: str, **data: Any) -> None:
        for handler in list(self._subscribers.get(signal_name, [])):
            handler(signal_name, data)

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    def flush(self) -> None:
        snapshot = self._queue
        self._queue = []
        for signal_name, data in snapshot:
            self.emit(signal_name, **data)

    def clear(self) -> None:
        self._queue.clear()

    def forward_to(self, other: SignalBus, *signal_names: str) -> None:
        """Queue the named signals onto ``other`` for deferred dispatch."""

        def _forward(signal_name: str, data: dict[str, Any]) -> None:
            other.publish(signal_name, **data)

        for name in signal_names:
            self.subscribe(name, _forward)
