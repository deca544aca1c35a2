"""Bindings from sequence signals to tile and audio collaborators."""
from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from tick_reveal.bus import SignalBus
from tick_reveal.types import (
    ALL_TILES_RESET,
    TILE_ENTERED,
    TILE_PULSED,
    TILE_REVEALED,
    CelebrationConfig,
    PulseTiming,
    SequenceConfig,
)

_Handler = Callable[[str, dict[str, Any]], None]


class Tile(Protocol):
    """One on-screen tile. Rendering of the fades is up to the implementer."""

    def enter(self) -> None: ...

    def pulse(self, timing: PulseTiming) -> None: ...

    def reveal_final(self, timing: PulseTiming) -> None: ...

    def reset(self) -> None: ...


class Audio(Protocol):
    def on_pulse(self) -> None: ...

    def on_reveal(self) -> None: ...


class Binding:
    """Subscriptions made by a bind_* call. ``detach`` removes them all."""

    def __init__(self, bus: SignalBus) -> None:
        self._bus = bus
        self._handlers: list[tuple[str, _Handler]] = []

    def _add(self, signal_name: str, handler: _Handler) -> None:
        self._bus.subscribe(signal_name, handler)
        self._handlers.append((signal_name, handler))

    def detach(self) -> None:
        for signal_name, handler in self._handlers:
            self._bus.unsubscribe(signal_name, handler)
        self._handlers.clear()


def bind_tiles(
    bus: SignalBus,
    tiles: Sequence[Tile | None],
    timing: PulseTiming | SequenceConfig | CelebrationConfig | None = None,
) -> Binding:
    """Route entrance, pulse, reveal and reset signals onto a row of tiles.

    ``timing`` is handed to every ``pulse`` and ``reveal_final`` call. Passing
    the SequenceConfig or CelebrationConfig that drives the row uses its
    ``pulse`` so the tiles fade exactly as long as the scheduler waits.
    With None the default PulseTiming is used, which only matches configs
    left at their default pulse.

    Missing tiles (None) and out-of-range indices are ignored.
    """
    if timing is None:
        timing = PulseTiming()
    elif isinstance(timing, (SequenceConfig, CelebrationConfig)):
        timing = timing.pulse
    binding = Binding(bus)

    def _tile(index: int) -> Tile | None:
        if 0 <= index < len(tiles):
            return tiles[index]
        return None

    def on_entered(signal_name: str, data: dict[str, Any]) -> None:
        tile = _tile(data["index"])
        if tile is not None:
            tile.enter()

    def on_pulsed(signal_name: str, data: dict[str, Any]) -> None:
        tile = _tile(data["index"])
        if tile is not None:
            tile.pulse(timing)

    def on_revealed(signal_name: str, data: dict[str, Any]) -> None:
        tile = _tile(data["index"])
        if tile is not None:
            tile.reveal_final(timing)

    def on_reset(signal_name: str, data: dict[str, Any]) -> None:
        for tile in tiles:
            if tile is not None:
                tile.reset()

    binding._add(TILE_ENTERED, on_entered)
    binding._add(TILE_PULSED, on_pulsed)
    binding._add(TILE_REVEALED, on_revealed)
    binding._add(ALL_TILES_RESET, on_reset)
    return binding


def bind_audio(bus: SignalBus, audio: Audio | None) -> Binding:
    """Notify an optional sound player of pulses and the reveal."""
    binding = Binding(bus)
    if audio is None:
        return binding

    def on_pulsed(signal_name: str, data: dict[str, Any]) -> None:
        audio.on_pulse()

    def on_revealed(signal_name: str, data: dict[str, Any]) -> None:
        audio.on_reveal()

    binding._add(TILE_PULSED, on_pulsed)
    binding._add(TILE_REVEALED, on_revealed)
    return binding
