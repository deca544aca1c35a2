"""VirtualClock — discrete-event timer service."""
from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class Timer:
    """A callback due at ``due`` seconds of clock time."""

    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class VirtualClock:
    """Clock whose time only moves when ``advance`` is called.

    Timers that come due inside an advance window fire in due order,
    ties in scheduling order. A timer scheduled by a callback fires in
    the same advance if it is due before the window closes.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._heap: list[Timer] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._heap if timer.active)

    def next_due(self) -> float | None:
        """Due time of the earliest live timer, or None when idle."""
        self._discard_cancelled()
        return self._heap[0].due if self._heap else None

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        timer = Timer(due=self._now + delay, seq=next(self._seq), callback=callback)
        heapq.heappush(self._heap, timer)
        return timer

    def cancel(self, timer: Timer) -> None:
        """Cancel a timer. Cancelling twice, or after it fired, is a no-op."""
        timer.cancelled = True

    def advance(self, dt: float) -> int:
        """Move time forward by ``dt``, firing due timers. Returns fire count."""
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        return self._advance_to(self._now + dt)

    def _advance_to(self, deadline: float) -> int:
        fired = 0
        while self._heap and self._heap[0].due <= deadline:
            timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            self._now = max(self._now, timer.due)
            timer.fired = True
            timer.callback()
            fired += 1
        self._now = deadline
        return fired

    def run_until_idle(self, limit: int = 100_000) -> int:
        """Jump from timer to timer until none are pending."""
        fired = 0
        while fired < limit:
            due = self.next_due()
            if due is None:
                break
            fired += self._advance_to(max(due, self._now))
        return fired

    def reset(self, start: float = 0.0) -> None:
        self._heap.clear()
        self._now = start

    def _discard_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
