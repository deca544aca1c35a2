"""BlinkScheduler — decelerating blink sequence with a rigged reveal."""
from __future__ import annotations

import logging

from tick_reveal.bus import SignalBus
from tick_reveal.clock import Timer, VirtualClock
from tick_reveal.easing import interval_at
from tick_reveal.selector import TileSelector
from tick_reveal.types import (
    ALL_TILES_RESET,
    SEQUENCE_COMPLETED,
    SEQUENCE_STARTED,
    TILE_PULSED,
    TILE_REVEALED,
    CancelledSequence,
    ConflictingOperation,
    InvalidArgument,
    Phase,
    SequenceConfig,
    SequenceState,
    is_integer,
)

logger = logging.getLogger(__name__)


class SequenceHandle:
    """Caller-side view of one run. Returned by ``BlinkScheduler.start``."""

    def __init__(self, state: SequenceState, config: SequenceConfig) -> None:
        self._state = state
        self._config = config
        self._timer: Timer | None = None

    @property
    def state(self) -> SequenceState:
        return self._state

    @property
    def config(self) -> SequenceConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def done(self) -> bool:
        return self._state.phase is Phase.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self._state.cancelled

    def result(self) -> int | None:
        """Revealed index once completed, None while still running.

        Raises CancelledSequence if the run was stopped before the reveal.
        """
        if self._state.cancelled:
            raise CancelledSequence(
                f"sequence targeting {self._state.target_index} was cancelled"
            )
        if not self.done:
            return None
        return self._state.target_index


class BlinkScheduler:
    """Drives one blink sequence at a time on a clock.

    Phases run BLINKING -> COOLDOWN -> REVEAL_PENDING -> COMPLETED. Pulses
    are picked at random and never decide the outcome; the reveal always
    lands on the target given to ``start``.
    """

    def __init__(
        self,
        clock: VirtualClock,
        bus: SignalBus | None = None,
        selector: TileSelector | None = None,
    ) -> None:
        self._clock = clock
        self._bus = bus if bus is not None else SignalBus()
        self._selector = selector if selector is not None else TileSelector()
        self._active: SequenceHandle | None = None

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def selector(self) -> TileSelector:
        return self._selector

    @property
    def active(self) -> SequenceHandle | None:
        return self._active

    @property
    def is_running(self) -> bool:
        return self._active is not None

    # --- Control ---

    def start(
        self,
        tile_count: int,
        target_index: int,
        config: SequenceConfig | None = None,
    ) -> SequenceHandle:
        """Begin a sequence. The first pulse fires on the next clock advance."""
        if config is None:
            config = SequenceConfig()
        elif not isinstance(config, SequenceConfig):
            raise InvalidArgument(f"expected SequenceConfig, got {type(config).__name__}")
        if not is_integer(tile_count):
            raise InvalidArgument(f"tile_count must be an integer, got {tile_count!r}")
        if not is_integer(target_index):
            raise InvalidArgument(
                f"target_index must be an integer, got {target_index!r}"
            )
        if tile_count <= 0:
            raise InvalidArgument(f"tile_count must be > 0, got {tile_count}")
        if not 0 <= target_index < tile_count:
            raise InvalidArgument(
                f"target_index must be in [0, {tile_count}), got {target_index}"
            )
        if self._active is not None:
            raise ConflictingOperation("a blink sequence is already running")

        state = SequenceState(
            tile_count=tile_count, target_index=target_index, phase=Phase.BLINKING
        )
        handle = SequenceHandle(state, config)
        self._active = handle
        logger.debug(
            "Starting blink sequence: %d tiles, target %d", tile_count, target_index
        )
        self._bus.emit(SEQUENCE_STARTED, tile_count=tile_count)
        if state.phase is Phase.BLINKING:
            handle._timer = self._clock.call_later(0.0, lambda: self._tick(handle))
        return handle

    def stop(self, handle: SequenceHandle | None = None) -> None:
        """Cancel a run from any phase. No-op if it already finished."""
        if handle is None:
            handle = self._active
        if handle is None or handle.done:
            return
        if handle._timer is not None:
            self._clock.cancel(handle._timer)
            handle._timer = None
        state = handle.state
        state.cancelled = True
        state.phase = Phase.COMPLETED
        if self._active is handle:
            self._active = None
        logger.debug("Blink sequence cancelled after %d pulses", state.pulse_count)
        self._bus.emit(ALL_TILES_RESET)
        self._bus.emit(SEQUENCE_COMPLETED, index=None, cancelled=True)

    # --- Phases ---

    def _tick(self, handle: SequenceHandle) -> None:
        state, config = handle.state, handle.config
        handle._timer = None
        if state.phase is not Phase.BLINKING:
            return
        if state.elapsed >= config.total_duration:
            self._enter_cooldown(handle)
            return

        interval = interval_at(config, state.elapsed / config.total_duration)
        index = self._selector.select(state.tile_count, state.last_selected_index)
        state.last_selected_index = index
        state.pulse_count += 1
        self._bus.emit(TILE_PULSED, index=index)
        if state.phase is not Phase.BLINKING:
            return

        if state.tile_count == 1:
            # Nothing to shuffle between; one pulse, then straight to cooldown.
            state.elapsed = max(state.elapsed, config.total_duration)
            handle._timer = self._clock.call_later(0.0, lambda: self._tick(handle))
            return

        handle._timer = self._clock.call_later(interval, lambda: self._tick(handle))
        state.elapsed += interval

    def _enter_cooldown(self, handle: SequenceHandle) -> None:
        handle.state.phase = Phase.COOLDOWN
        logger.debug(
            "Blinking finished after %d pulses, cooling down", handle.state.pulse_count
        )
        handle._timer = self._clock.call_later(
            handle.config.pulse.total, lambda: self._end_cooldown(handle)
        )

    def _end_cooldown(self, handle: SequenceHandle) -> None:
        handle._timer = None
        handle.state.phase = Phase.REVEAL_PENDING
        self._bus.emit(ALL_TILES_RESET)
        if handle.state.phase is not Phase.REVEAL_PENDING:
            return
        handle._timer = self._clock.call_later(
            handle.config.final_reveal_delay, lambda: self._reveal(handle)
        )

    def _reveal(self, handle: SequenceHandle) -> None:
        handle._timer = None
        state = handle.state
        state.phase = Phase.COMPLETED
        if self._active is handle:
            self._active = None
        logger.debug("Blink sequence completed, revealing tile %d", state.target_index)
        self._bus.emit(TILE_REVEALED, index=state.target_index)
        self._bus.emit(SEQUENCE_COMPLETED, index=state.target_index, cancelled=False)
