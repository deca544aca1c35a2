"""CelebrationScheduler — random multi-tile blinks after a reveal."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from tick_reveal.bus import SignalBus
from tick_reveal.clock import Timer, VirtualClock
from tick_reveal.selector import TileSelector
from tick_reveal.types import (
    ALL_TILES_RESET,
    CELEBRATION_COMPLETED,
    CELEBRATION_STARTED,
    TILE_PULSED,
    CelebrationConfig,
    ConflictingOperation,
    InvalidArgument,
    is_integer,
)

logger = logging.getLogger(__name__)


def remaining_duration(
    music_duration: float, entrance_elapsed: float, config: CelebrationConfig
) -> float:
    """How long to celebrate given the music length and time already used."""
    if music_duration <= 0:
        return config.default_duration
    return max(music_duration - entrance_elapsed, config.minimum_remaining)


@dataclass
class CelebrationRun:
    """Runtime state of one celebration."""

    tile_count: int
    duration: float
    elapsed: float = 0.0
    last_batch: list[int] = field(default_factory=list)
    batch_count: int = 0
    finished: bool = False
    cancelled: bool = False
    timer: Timer | None = field(default=None, repr=False)


class CelebrationScheduler:
    """Pulses batches of distinct tiles at random intervals for a duration."""

    def __init__(
        self,
        clock: VirtualClock,
        bus: SignalBus | None = None,
        selector: TileSelector | None = None,
        config: CelebrationConfig | None = None,
    ) -> None:
        self._clock = clock
        self._bus = bus if bus is not None else SignalBus()
        self._selector = selector if selector is not None else TileSelector()
        self._config = config if config is not None else CelebrationConfig()
        self._active: CelebrationRun | None = None

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def config(self) -> CelebrationConfig:
        return self._config

    @property
    def active(self) -> CelebrationRun | None:
        return self._active

    def start(self, tile_count: int, duration: float | None = None) -> CelebrationRun:
        if not is_integer(tile_count):
            raise InvalidArgument(f"tile_count must be an integer, got {tile_count!r}")
        if tile_count <= 0:
            raise InvalidArgument(f"tile_count must be > 0, got {tile_count}")
        if duration is None:
            duration = self._config.default_duration
        if not math.isfinite(duration) or duration <= 0:
            raise InvalidArgument(f"duration must be finite and > 0, got {duration}")
        if self._active is not None:
            raise ConflictingOperation("a celebration is already running")

        run = CelebrationRun(tile_count=tile_count, duration=duration)
        self._active = run
        logger.debug("Starting celebration: %d tiles for %.2fs", tile_count, duration)
        self._bus.emit(CELEBRATION_STARTED, tile_count=tile_count, duration=duration)
        if not run.finished:
            run.timer = self._clock.call_later(0.0, lambda: self._tick(run))
        return run

    def stop(self) -> None:
        run = self._active
        if run is None:
            return
        if run.timer is not None:
            self._clock.cancel(run.timer)
            run.timer = None
        run.finished = True
        run.cancelled = True
        self._active = None
        logger.debug("Celebration cancelled after %d batches", run.batch_count)
        self._bus.emit(ALL_TILES_RESET)
        self._bus.emit(CELEBRATION_COMPLETED, cancelled=True)

    def _tick(self, run: CelebrationRun) -> None:
        run.timer = None
        if run.finished:
            return
        if run.elapsed >= run.duration:
            run.timer = self._clock.call_later(
                self._config.pulse.total, lambda: self._finish(run)
            )
            return

        rng = self._selector.random
        count = rng.randint(self._config.min_simultaneous, self._config.max_simultaneous)
        batch = self._selector.select_batch(run.tile_count, count, run.last_batch)
        run.last_batch = batch
        run.batch_count += 1
        for index in batch:
            self._bus.emit(TILE_PULSED, index=index)
            if run.finished:
                return

        interval = rng.uniform(self._config.min_interval, self._config.max_interval)
        run.timer = self._clock.call_later(interval, lambda: self._tick(run))
        run.elapsed += interval

    def _finish(self, run: CelebrationRun) -> None:
        run.timer = None
        run.finished = True
        if self._active is run:
            self._active = None
        logger.debug("Celebration finished after %d batches", run.batch_count)
        self._bus.emit(ALL_TILES_RESET)
        self._bus.emit(CELEBRATION_COMPLETED, cancelled=False)
