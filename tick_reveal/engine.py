"""Engine - fixed-timestep driver for reveal schedulers."""
from __future__ import annotations

import os
import random
import time

from tick_reveal.bus import SignalBus
from tick_reveal.celebration import CelebrationScheduler
from tick_reveal.clock import VirtualClock
from tick_reveal.entrance import EntranceScheduler
from tick_reveal.scheduler import BlinkScheduler
from tick_reveal.selector import TileSelector
from tick_reveal.types import CelebrationConfig, EntranceConfig


class Engine:
    """Owns a virtual clock, a seeded random source and a signal bus.

    ``step``/``run`` advance the clock by whole ticks for deterministic
    playback; ``run_forever`` paces the same ticks against wall time.
    """

    def __init__(
        self, tps: int = 60, seed: int | None = None, bus: SignalBus | None = None
    ) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._tps = tps
        self._dt = 1.0 / tps
        self._tick_number = 0
        self._clock = VirtualClock()
        self._bus = bus if bus is not None else SignalBus()
        self._stop_requested = False

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def clock(self) -> VirtualClock:
        return self._clock

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def blink_scheduler(self) -> BlinkScheduler:
        return BlinkScheduler(self._clock, self._bus, TileSelector(self._rng))

    def celebration_scheduler(
        self, config: CelebrationConfig | None = None
    ) -> CelebrationScheduler:
        return CelebrationScheduler(
            self._clock, self._bus, TileSelector(self._rng), config
        )

    def entrance_scheduler(
        self,
        config: EntranceConfig | None = None,
        celebration_config: CelebrationConfig | None = None,
    ) -> EntranceScheduler:
        selector = TileSelector(self._rng)
        celebration = CelebrationScheduler(
            self._clock, self._bus, selector, celebration_config
        )
        return EntranceScheduler(self._clock, self._bus, selector, config, celebration)

    def request_stop(self) -> None:
        self._stop_requested = True

    def step(self) -> None:
        self._tick_number += 1
        self._clock.advance(self._dt)
        self._bus.flush()

    def run(self, n: int) -> None:
        self._stop_requested = False
        for _ in range(n):
            self.step()
            if self._stop_requested:
                break

    def run_until_idle(self, max_ticks: int = 1_000_000) -> int:
        """Step until no timers are pending. Returns ticks taken."""
        self._stop_requested = False
        ticks = 0
        while self._clock.pending and ticks < max_ticks:
            self.step()
            ticks += 1
            if self._stop_requested:
                break
        return ticks

    def run_forever(self) -> None:
        """Step in real time until stopped or nothing is left to fire."""
        self._stop_requested = False
        dt = self._dt
        while not self._stop_requested and self._clock.pending:
            start = time.monotonic()
            self.step()
            if self._stop_requested:
                break
            elapsed = time.monotonic() - start
            sleep_time = dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)
