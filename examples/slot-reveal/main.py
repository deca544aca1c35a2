"""Slot Reveal — interactive blink-sequence demo.

Exercises BlinkScheduler, CelebrationScheduler, EntranceScheduler, bind_tiles
and the Engine.

Controls:
  Space   Start a reveal (target picked from the row below)
  1-9     Choose the rigged winner
  S       Stop the running reveal
  C       Celebrate (multi-tile blinks)
  E       Deal the row in again, then celebrate
  +/-     Add or remove a tile
  Esc     Quit

Run: python examples/slot-reveal/main.py
"""
from __future__ import annotations

import sys

import pygame

from tick_reveal import (
    ENTRANCE_STARTED,
    SEQUENCE_COMPLETED,
    ConflictingOperation,
    Engine,
    PulseTiming,
    SequenceConfig,
    VirtualClock,
    bind_tiles,
)

# Timing
FPS = 60
TPS = 120

# Layout
TILE_W = 90
TILE_H = 120
TILE_GAP = 16
MARGIN = 40
STATUS_H = 36
MAX_TILES = 9

# Colors
BG_COLOR = (20, 20, 30)
TILE_BASE = (45, 45, 65)
TILE_GLOW = (250, 210, 90)
TILE_WIN = (120, 230, 140)
TARGET_MARK = (200, 90, 90)
TEXT_COLOR = (200, 200, 210)
TEXT_DIM = (120, 120, 140)


class TileView:
    """On-screen tile. Remembers when it last blinked and whether it won."""

    def __init__(self, clock: VirtualClock) -> None:
        self._clock = clock
        self._pulse_started: float | None = None
        self._timing = PulseTiming()
        self.won = False
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def enter(self) -> None:
        self.visible = True

    def pulse(self, timing: PulseTiming) -> None:
        self._timing = timing
        self._pulse_started = self._clock.now

    def reveal_final(self, timing: PulseTiming) -> None:
        self._timing = timing
        self.won = True

    def reset(self) -> None:
        self._pulse_started = None
        self.won = False

    def glow(self) -> float:
        if self._pulse_started is None:
            return 0.0
        return self._timing.intensity(self._clock.now - self._pulse_started)


def _mix(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> tuple[int, ...]:
    return tuple(int(x + (y - x) * t) for x, y in zip(a, b))


class GameState:
    """Holds the engine, schedulers and the tile row."""

    def __init__(self) -> None:
        self.engine = Engine(tps=TPS, seed=42)
        self.config = SequenceConfig()
        self.scheduler = self.engine.blink_scheduler()
        self.celebration = self.engine.celebration_scheduler()
        self.entrance = self.engine.entrance_scheduler()
        self.tile_count = 5
        self.target = 2
        self.reveals = 0
        self.message = "Space to spin"
        self.tiles: list[TileView] = []
        self.binding = None
        self._rebuild_tiles()
        self.engine.bus.subscribe(SEQUENCE_COMPLETED, self._on_completed)
        self.engine.bus.subscribe(ENTRANCE_STARTED, self._on_entrance_started)

    def _rebuild_tiles(self) -> None:
        if self.binding is not None:
            self.binding.detach()
        self.tiles = [TileView(self.engine.clock) for _ in range(self.tile_count)]
        self.binding = bind_tiles(self.engine.bus, self.tiles, self.config.pulse)

    def _on_completed(self, signal: str, data: dict) -> None:
        if data["cancelled"]:
            self.message = "Stopped"
        else:
            self.reveals += 1
            self.message = f"Tile {data['index'] + 1} wins"

    def _on_entrance_started(self, signal: str, data: dict) -> None:
        for tile in self.tiles:
            tile.hide()

    def busy(self) -> bool:
        return (
            self.scheduler.is_running
            or self.celebration.active is not None
            or self.entrance.active is not None
        )

    def deal(self) -> None:
        if self.busy():
            return
        self.entrance.start(self.tile_count)
        self.message = "Dealing..."

    def spin(self) -> None:
        if self.entrance.active is not None or self.celebration.active is not None:
            return
        try:
            self.scheduler.start(self.tile_count, self.target, self.config)
        except ConflictingOperation:
            self.message = "Already spinning"
            return
        self.message = "Spinning..."

    def resize(self, delta: int) -> None:
        if self.busy():
            return
        self.tile_count = min(max(self.tile_count + delta, 1), MAX_TILES)
        self.target = min(self.target, self.tile_count - 1)
        self._rebuild_tiles()


def draw_row(surface: pygame.Surface, state: GameState, font: pygame.font.Font) -> None:
    for i, tile in enumerate(state.tiles):
        if not tile.visible:
            continue
        x = MARGIN + i * (TILE_W + TILE_GAP)
        y = MARGIN
        color = TILE_WIN if tile.won else _mix(TILE_BASE, TILE_GLOW, tile.glow())
        pygame.draw.rect(surface, color, (x, y, TILE_W, TILE_H), border_radius=8)
        label = font.render(str(i + 1), True, TEXT_COLOR)
        surface.blit(label, (x + TILE_W // 2 - label.get_width() // 2, y + TILE_H + 6))
        if i == state.target:
            pygame.draw.rect(surface, TARGET_MARK, (x, y + TILE_H + 24, TILE_W, 3))


def draw_status(surface: pygame.Surface, state: GameState, font: pygame.font.Font) -> None:
    h = surface.get_height()
    text = f"{state.message}   reveals: {state.reveals}   seed: {state.engine.seed}"
    surface.blit(font.render(text, True, TEXT_COLOR), (MARGIN, h - STATUS_H + 10))
    hint = "Space spin  1-9 target  S stop  C celebrate  E deal  +/- tiles  Esc quit"
    surface.blit(font.render(hint, True, TEXT_DIM), (MARGIN, h - STATUS_H - 14))


def main() -> None:
    pygame.init()
    width = MARGIN * 2 + MAX_TILES * (TILE_W + TILE_GAP)
    height = MARGIN * 2 + TILE_H + 60 + STATUS_H
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption("Slot Reveal — tick-reveal demo")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 13)

    state = GameState()

    tick_interval = 1.0 / TPS
    accumulator = 0.0
    running = True

    while running:
        dt = clock.tick(FPS) / 1000.0
        accumulator += dt

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    state.spin()
                elif event.key == pygame.K_s:
                    state.scheduler.stop()
                    state.celebration.stop()
                    state.entrance.stop()
                elif event.key == pygame.K_c:
                    if not state.busy():
                        state.celebration.start(state.tile_count)
                elif event.key == pygame.K_e:
                    state.deal()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    state.resize(1)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    state.resize(-1)
                elif pygame.K_1 <= event.key <= pygame.K_9:
                    choice = event.key - pygame.K_1
                    if choice < state.tile_count and not state.scheduler.is_running:
                        state.target = choice

        # --- Tick ---
        while accumulator >= tick_interval:
            state.engine.step()
            accumulator -= tick_interval

        # --- Render ---
        screen.fill(BG_COLOR)
        draw_row(screen, state, font)
        draw_status(screen, state, font)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
