"""Core data types for blink-sequence reveals."""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

from tick_reveal.easing import EASINGS

# Signal names published on the bus.
SEQUENCE_STARTED = "sequence_started"
TILE_PULSED = "tile_pulsed"
ALL_TILES_RESET = "all_tiles_reset"
TILE_REVEALED = "tile_revealed"
SEQUENCE_COMPLETED = "sequence_completed"
CELEBRATION_STARTED = "celebration_started"
CELEBRATION_COMPLETED = "celebration_completed"
ENTRANCE_STARTED = "entrance_started"
TILE_ENTERED = "tile_entered"
ALL_TILES_ENTERED = "all_tiles_entered"
ENTRANCE_COMPLETED = "entrance_completed"


class InvalidArgument(ValueError):
    """Raised on malformed configuration or out-of-range start arguments."""


class ConflictingOperation(RuntimeError):
    """Raised when starting a sequence while another is active on the same owner."""


class CancelledSequence(Exception):
    """Raised when asking a cancelled sequence for its revealed index."""


def _require_finite(obj: object, *names: str) -> None:
    for name in names:
        value = getattr(obj, name)
        if not math.isfinite(value):
            raise InvalidArgument(f"{name} must be finite, got {value}")


def is_integer(value: object) -> bool:
    """True for ints, excluding bools."""
    return isinstance(value, int) and not isinstance(value, bool)


def _require_int(obj: object, *names: str) -> None:
    for name in names:
        value = getattr(obj, name)
        if not is_integer(value):
            raise InvalidArgument(f"{name} must be an integer, got {value!r}")


class Phase(enum.Enum):
    IDLE = "idle"
    BLINKING = "blinking"
    COOLDOWN = "cooldown"
    REVEAL_PENDING = "reveal_pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PulseTiming:
    """Fade-in, hold and fade-out of one blink, in seconds.

    Ease names refer to entries of ``tick_reveal.easing.EASINGS``.
    """

    fade_in: float = 0.05
    hold: float = 0.1
    fade_out: float = 0.08
    fade_in_ease: str = "ease_out"
    fade_out_ease: str = "ease_in"

    def __post_init__(self) -> None:
        _require_finite(self, "fade_in", "hold", "fade_out")
        for name in ("fade_in", "hold", "fade_out"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidArgument(f"{name} must be >= 0, got {value}")
        for name in ("fade_in_ease", "fade_out_ease"):
            value = getattr(self, name)
            if value not in EASINGS:
                raise InvalidArgument(f"unknown easing {value!r} for {name}")

    @property
    def total(self) -> float:
        return self.fade_in + self.hold + self.fade_out

    def intensity(self, t: float) -> float:
        """Highlight level in [0, 1] at ``t`` seconds into the blink."""
        if t < 0 or t >= self.total:
            return 0.0
        if t < self.fade_in:
            return EASINGS[self.fade_in_ease](t / self.fade_in)
        t -= self.fade_in
        if t < self.hold:
            return 1.0
        t -= self.hold
        return 1.0 - EASINGS[self.fade_out_ease](t / self.fade_out)


@dataclass(frozen=True)
class SequenceConfig:
    """Immutable timing configuration for one blink sequence.

    Attributes:
        total_duration: Seconds spent in the decelerating blink phase.
        start_interval: Gap between the first pulses (fast).
        end_interval: Gap between the last pulses (slow).
        easing_power: Exponent applied to progress; 1 is linear, higher
            values stay near ``start_interval`` longer before slowing.
        final_reveal_delay: Pause after the reset, before the reveal.
        pulse: Blink cycle of a single tile; its total sizes the cooldown.
    """

    total_duration: float = 3.0
    start_interval: float = 0.08
    end_interval: float = 0.5
    easing_power: float = 2.0
    final_reveal_delay: float = 0.75
    pulse: PulseTiming = field(default_factory=PulseTiming)

    def __post_init__(self) -> None:
        _require_finite(
            self, "total_duration", "start_interval", "end_interval",
            "easing_power", "final_reveal_delay",
        )
        if self.total_duration <= 0:
            raise InvalidArgument(
                f"total_duration must be > 0, got {self.total_duration}"
            )
        if self.start_interval <= 0:
            raise InvalidArgument(
                f"start_interval must be > 0, got {self.start_interval}"
            )
        if self.end_interval < self.start_interval:
            raise InvalidArgument(
                f"end_interval must be >= start_interval "
                f"({self.start_interval}), got {self.end_interval}"
            )
        if self.easing_power < 1:
            raise InvalidArgument(
                f"easing_power must be >= 1, got {self.easing_power}"
            )
        if self.final_reveal_delay < 0:
            raise InvalidArgument(
                f"final_reveal_delay must be >= 0, got {self.final_reveal_delay}"
            )


@dataclass(frozen=True)
class CelebrationConfig:
    """Immutable configuration for the multi-tile celebration blinks."""

    min_simultaneous: int = 1
    max_simultaneous: int = 2
    min_interval: float = 0.15
    max_interval: float = 0.35
    default_duration: float = 2.0
    minimum_remaining: float = 0.5
    pulse: PulseTiming = field(default_factory=PulseTiming)

    def __post_init__(self) -> None:
        _require_int(self, "min_simultaneous", "max_simultaneous")
        _require_finite(
            self, "min_interval", "max_interval", "default_duration",
            "minimum_remaining",
        )
        if self.min_simultaneous < 1:
            raise InvalidArgument(
                f"min_simultaneous must be >= 1, got {self.min_simultaneous}"
            )
        if self.max_simultaneous < self.min_simultaneous:
            raise InvalidArgument(
                f"max_simultaneous must be >= min_simultaneous "
                f"({self.min_simultaneous}), got {self.max_simultaneous}"
            )
        if self.min_interval <= 0:
            raise InvalidArgument(
                f"min_interval must be > 0, got {self.min_interval}"
            )
        if self.max_interval < self.min_interval:
            raise InvalidArgument(
                f"max_interval must be >= min_interval "
                f"({self.min_interval}), got {self.max_interval}"
            )
        if self.default_duration <= 0:
            raise InvalidArgument(
                f"default_duration must be > 0, got {self.default_duration}"
            )
        if self.minimum_remaining <= 0:
            raise InvalidArgument(
                f"minimum_remaining must be > 0, got {self.minimum_remaining}"
            )


@dataclass(frozen=True)
class EntranceConfig:
    """Tiles appear one by one in shuffled order before the celebration.

    Attributes:
        delay_between_reveals: Gap after each tile appears.
        reveal_duration: Length of a tile's own appear animation; the
            phase waits this long after the last gap.
    """

    delay_between_reveals: float = 0.1
    reveal_duration: float = 0.3

    def __post_init__(self) -> None:
        _require_finite(self, "delay_between_reveals", "reveal_duration")
        if self.delay_between_reveals < 0:
            raise InvalidArgument(
                f"delay_between_reveals must be >= 0, got {self.delay_between_reveals}"
            )
        if self.reveal_duration < 0:
            raise InvalidArgument(
                f"reveal_duration must be >= 0, got {self.reveal_duration}"
            )


_FIXED_FIELDS = ("tile_count", "target_index")


@dataclass
class SequenceState:
    """Runtime state of one blink sequence. Mutated only by the scheduler.

    ``tile_count`` and ``target_index`` are snapshotted at start and
    cannot be reassigned afterwards.
    """

    tile_count: int
    target_index: int
    phase: Phase = Phase.IDLE
    elapsed: float = 0.0
    last_selected_index: int | None = None
    pulse_count: int = 0
    cancelled: bool = False

    def __setattr__(self, name: str, value: object) -> None:
        if name in _FIXED_FIELDS and name in self.__dict__:
            raise AttributeError(f"{name} is fixed for the lifetime of a sequence")
        super().__setattr__(name, value)
