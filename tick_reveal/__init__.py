"""tick-reveal - Slot-machine style blink sequences with a rigged reveal."""
from __future__ import annotations

from tick_reveal.bus import SignalBus
from tick_reveal.celebration import CelebrationScheduler, remaining_duration
from tick_reveal.clock import Timer, VirtualClock
from tick_reveal.collaborators import Audio, Binding, Tile, bind_audio, bind_tiles
from tick_reveal.config import (
    config_to_dict,
    load_celebration_config,
    load_celebration_config_file,
    load_config,
    load_entrance_config,
    load_config_file,
)
from tick_reveal.easing import EASINGS, interval_at, lerp, plan_intervals
from tick_reveal.engine import Engine
from tick_reveal.entrance import EntranceRun, EntranceScheduler
from tick_reveal.scheduler import BlinkScheduler, SequenceHandle
from tick_reveal.selector import TileSelector
from tick_reveal.types import (
    ALL_TILES_ENTERED,
    ALL_TILES_RESET,
    CELEBRATION_COMPLETED,
    CELEBRATION_STARTED,
    ENTRANCE_COMPLETED,
    ENTRANCE_STARTED,
    SEQUENCE_COMPLETED,
    SEQUENCE_STARTED,
    TILE_ENTERED,
    TILE_PULSED,
    TILE_REVEALED,
    CancelledSequence,
    CelebrationConfig,
    ConflictingOperation,
    EntranceConfig,
    InvalidArgument,
    Phase,
    PulseTiming,
    SequenceConfig,
    SequenceState,
)

__all__ = [
    "BlinkScheduler",
    "SequenceHandle",
    "CelebrationScheduler",
    "remaining_duration",
    "EntranceScheduler",
    "EntranceRun",
    "TileSelector",
    "VirtualClock",
    "Timer",
    "Engine",
    "SignalBus",
    "Tile",
    "Audio",
    "Binding",
    "bind_tiles",
    "bind_audio",
    "EASINGS",
    "interval_at",
    "lerp",
    "plan_intervals",
    "load_config",
    "load_config_file",
    "load_celebration_config",
    "load_celebration_config_file",
    "load_entrance_config",
    "config_to_dict",
    "SequenceConfig",
    "CelebrationConfig",
    "EntranceConfig",
    "PulseTiming",
    "SequenceState",
    "Phase",
    "InvalidArgument",
    "ConflictingOperation",
    "CancelledSequence",
    "SEQUENCE_STARTED",
    "TILE_PULSED",
    "ALL_TILES_RESET",
    "TILE_REVEALED",
    "SEQUENCE_COMPLETED",
    "CELEBRATION_STARTED",
    "CELEBRATION_COMPLETED",
    "ENTRANCE_STARTED",
    "TILE_ENTERED",
    "ALL_TILES_ENTERED",
    "ENTRANCE_COMPLETED",
]
