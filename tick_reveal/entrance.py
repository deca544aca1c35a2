"""EntranceScheduler — tiles appear in shuffled order, then celebrate."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from tick_reveal.bus import SignalBus
from tick_reveal.celebration import (
    CelebrationRun,
    CelebrationScheduler,
    remaining_duration,
)
from tick_reveal.clock import Timer, VirtualClock
from tick_reveal.selector import TileSelector
from tick_reveal.types import (
    ALL_TILES_ENTERED,
    ALL_TILES_RESET,
    CELEBRATION_COMPLETED,
    ENTRANCE_COMPLETED,
    ENTRANCE_STARTED,
    TILE_ENTERED,
    ConflictingOperation,
    EntranceConfig,
    InvalidArgument,
    is_integer,
)

logger = logging.getLogger(__name__)

ENTERING = "entering"
SETTLING = "settling"
CELEBRATING = "celebrating"


@dataclass
class EntranceRun:
    """Runtime state of one entrance."""

    tile_count: int
    order: list[int]
    music_duration: float
    stage: str = ENTERING
    entered: int = 0
    elapsed: float = 0.0
    finished: bool = False
    cancelled: bool = False
    celebration: CelebrationRun | None = None
    timer: Timer | None = field(default=None, repr=False)


class EntranceScheduler:
    """Reveals a row of tiles one at a time, then hands off to a celebration.

    Tiles enter in ``TileSelector.shuffled`` order, ``delay_between_reveals``
    apart. After the last gap the phase waits ``reveal_duration`` for the
    final appear animation. The time used so far is subtracted from
    ``music_duration`` to size the celebration (see ``remaining_duration``).
    """

    def __init__(
        self,
        clock: VirtualClock,
        bus: SignalBus | None = None,
        selector: TileSelector | None = None,
        config: EntranceConfig | None = None,
        celebration: CelebrationScheduler | None = None,
    ) -> None:
        self._clock = clock
        self._bus = bus if bus is not None else SignalBus()
        self._selector = selector if selector is not None else TileSelector()
        self._config = config if config is not None else EntranceConfig()
        if celebration is None:
            celebration = CelebrationScheduler(clock, self._bus, self._selector)
        elif celebration.bus is not self._bus:
            raise InvalidArgument("celebration must publish on the same bus")
        self._celebration = celebration
        self._active: EntranceRun | None = None

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def config(self) -> EntranceConfig:
        return self._config

    @property
    def celebration(self) -> CelebrationScheduler:
        return self._celebration

    @property
    def active(self) -> EntranceRun | None:
        return self._active

    def start(self, tile_count: int, music_duration: float = 0.0) -> EntranceRun:
        """Begin an entrance. A non-positive ``music_duration`` means no music."""
        if not is_integer(tile_count):
            raise InvalidArgument(f"tile_count must be an integer, got {tile_count!r}")
        if tile_count <= 0:
            raise InvalidArgument(f"tile_count must be > 0, got {tile_count}")
        if isinstance(music_duration, bool) or not math.isfinite(music_duration):
            raise InvalidArgument(f"music_duration must be finite, got {music_duration!r}")
        if self._active is not None:
            raise ConflictingOperation("an entrance is already running")
        if self._celebration.active is not None:
            raise ConflictingOperation("a celebration is already running")

        run = EntranceRun(
            tile_count=tile_count,
            order=self._selector.shuffled(tile_count),
            music_duration=music_duration,
        )
        self._active = run
        logger.debug("Starting entrance: %d tiles", tile_count)
        self._bus.emit(ENTRANCE_STARTED, tile_count=tile_count, order=list(run.order))
        if not run.finished:
            run.timer = self._clock.call_later(0.0, lambda: self._enter_next(run))
        return run

    def stop(self) -> None:
        """Cancel the entrance, including a celebration it started."""
        run = self._active
        if run is None:
            return
        if run.timer is not None:
            self._clock.cancel(run.timer)
            run.timer = None
        run.finished = True
        run.cancelled = True
        self._active = None
        self._bus.unsubscribe(CELEBRATION_COMPLETED, self._on_celebration_completed)
        logger.debug(
            "Entrance cancelled in %s stage after %d tiles", run.stage, run.entered
        )
        if run.stage == CELEBRATING and self._celebration.active is not None:
            self._celebration.stop()
        else:
            self._bus.emit(ALL_TILES_RESET)
        self._bus.emit(ENTRANCE_COMPLETED, cancelled=True)

    def _enter_next(self, run: EntranceRun) -> None:
        run.timer = None
        if run.finished:
            return
        index = run.order[run.entered]
        run.entered += 1
        self._bus.emit(TILE_ENTERED, index=index)
        if run.finished:
            return

        delay = self._config.delay_between_reveals
        if run.entered < run.tile_count:
            run.timer = self._clock.call_later(delay, lambda: self._enter_next(run))
            return
        run.stage = SETTLING
        run.timer = self._clock.call_later(
            delay + self._config.reveal_duration, lambda: self._settle(run)
        )

    def _settle(self, run: EntranceRun) -> None:
        run.timer = None
        cfg = self._config
        run.elapsed = run.tile_count * cfg.delay_between_reveals + cfg.reveal_duration
        logger.debug("All %d tiles entered after %.2fs", run.tile_count, run.elapsed)
        self._bus.emit(ALL_TILES_ENTERED, elapsed=run.elapsed)
        if run.finished:
            return

        duration = remaining_duration(
            run.music_duration, run.elapsed, self._celebration.config
        )
        run.stage = CELEBRATING
        run.celebration = self._celebration.start(run.tile_count, duration)
        if run.finished:
            return
        self._bus.subscribe(CELEBRATION_COMPLETED, self._on_celebration_completed)

    def _on_celebration_completed(self, signal_name: str, data: dict[str, Any]) -> None:
        run = self._active
        if run is None or run.celebration is None or not run.celebration.finished:
            return
        self._bus.unsubscribe(CELEBRATION_COMPLETED, self._on_celebration_completed)
        run.finished = True
        run.cancelled = bool(data.get("cancelled", False))
        self._active = None
        logger.debug("Entrance finished, cancelled=%s", run.cancelled)
        self._bus.emit(ENTRANCE_COMPLETED, cancelled=run.cancelled)
