"""Tests for CelebrationScheduler and remaining_duration."""
from __future__ import annotations

import logging
import math
import random
from collections import defaultdict

import pytest
from tick_reveal import (
    ALL_TILES_RESET,
    CELEBRATION_COMPLETED,
    CELEBRATION_STARTED,
    TILE_PULSED,
    CelebrationConfig,
    CelebrationScheduler,
    ConflictingOperation,
    InvalidArgument,
    PulseTiming,
    SignalBus,
    TileSelector,
    VirtualClock,
    remaining_duration,
)

SIGNALS = [CELEBRATION_STARTED, TILE_PULSED, ALL_TILES_RESET, CELEBRATION_COMPLETED]


def make_celebration(config: CelebrationConfig | None = None, seed: int = 8):
    clock = VirtualClock()
    bus = SignalBus()
    events: list[tuple[str, dict, float]] = []
    for name in SIGNALS:
        bus.subscribe(name, lambda s, d: events.append((s, d, clock.now)))
    celebration = CelebrationScheduler(
        clock, bus, TileSelector(random.Random(seed)), config
    )
    return celebration, clock, events


def batches(events) -> list[list[int]]:
    by_time: dict[float, list[int]] = defaultdict(list)
    for name, data, t in events:
        if name == TILE_PULSED:
            by_time[t].append(data["index"])
    return [by_time[t] for t in sorted(by_time)]


class TestRemainingDuration:
    def test_no_music_uses_default(self) -> None:
        cfg = CelebrationConfig(default_duration=2.0)
        assert remaining_duration(0.0, 1.0, cfg) == 2.0
        assert remaining_duration(-1.0, 1.0, cfg) == 2.0

    def test_music_left(self) -> None:
        assert remaining_duration(5.0, 1.5, CelebrationConfig()) == 3.5

    def test_floor_at_minimum(self) -> None:
        cfg = CelebrationConfig(minimum_remaining=0.5)
        assert remaining_duration(3.0, 4.0, cfg) == 0.5


class TestCelebrationRun:
    def test_event_order(self) -> None:
        celebration, clock, events = make_celebration()
        celebration.start(6, duration=1.5)
        clock.run_until_idle()

        seq = [name for name, _, _ in events]
        assert seq[0] == CELEBRATION_STARTED
        assert seq[-2:] == [ALL_TILES_RESET, CELEBRATION_COMPLETED]
        assert set(seq[1:-2]) == {TILE_PULSED}
        assert events[-1][1] == {"cancelled": False}
        assert celebration.active is None

    def test_batch_sizes_within_bounds(self) -> None:
        cfg = CelebrationConfig(min_simultaneous=2, max_simultaneous=3)
        celebration, clock, events = make_celebration(cfg)
        run = celebration.start(8, duration=3.0)
        clock.run_until_idle()

        groups = batches(events)
        assert len(groups) == run.batch_count
        for group in groups:
            assert 2 <= len(group) <= 3
            assert len(set(group)) == len(group)

    def test_consecutive_batches_disjoint(self) -> None:
        celebration, clock, events = make_celebration(CelebrationConfig(max_simultaneous=2))
        celebration.start(6, duration=4.0)
        clock.run_until_idle()

        groups = batches(events)
        assert len(groups) > 3
        for prev, cur in zip(groups, groups[1:]):
            assert not set(prev) & set(cur)

    def test_batch_capped_at_tile_count(self) -> None:
        cfg = CelebrationConfig(min_simultaneous=3, max_simultaneous=4)
        celebration, clock, events = make_celebration(cfg)
        celebration.start(2, duration=1.0)
        clock.run_until_idle()
        assert all(sorted(group) == [0, 1] for group in batches(events))

    def test_intervals_within_bounds(self) -> None:
        cfg = CelebrationConfig(min_interval=0.2, max_interval=0.4)
        celebration, clock, events = make_celebration(cfg)
        celebration.start(5, duration=3.0)
        clock.run_until_idle()

        times = sorted({t for name, _, t in events if name == TILE_PULSED})
        gaps = [b - a for a, b in zip(times, times[1:])]
        assert all(0.2 - 1e-9 <= g <= 0.4 + 1e-9 for g in gaps)

    def test_reset_waits_for_last_blink(self) -> None:
        pulse = PulseTiming(fade_in=0.1, hold=0.2, fade_out=0.1)
        celebration, clock, events = make_celebration(CelebrationConfig(pulse=pulse))
        run = celebration.start(4, duration=1.0)
        clock.run_until_idle()

        reset_time = next(t for name, _, t in events if name == ALL_TILES_RESET)
        assert reset_time == pytest.approx(run.elapsed + pulse.total)
        assert run.elapsed >= 1.0

    def test_default_duration(self) -> None:
        celebration, clock, events = make_celebration(CelebrationConfig(default_duration=1.25))
        run = celebration.start(4)
        assert run.duration == 1.25
        assert events[0][1] == {"tile_count": 4, "duration": 1.25}


class TestCelebrationControl:
    def test_invalid_arguments(self) -> None:
        celebration, clock, events = make_celebration()
        with pytest.raises(InvalidArgument):
            celebration.start(0)
        with pytest.raises(InvalidArgument):
            celebration.start(3, duration=0.0)
        assert events == []

    @pytest.mark.parametrize("tile_count", [2.5, True, "4", None])
    def test_non_integer_tile_count_rejected(self, tile_count: object) -> None:
        celebration, clock, events = make_celebration()
        with pytest.raises(InvalidArgument, match="tile_count must be an integer"):
            celebration.start(tile_count, duration=1.0)  # type: ignore[arg-type]
        assert events == []
        assert celebration.active is None
        assert clock.pending == 0
        celebration.start(4, duration=1.0)
        assert celebration.active is not None

    @pytest.mark.parametrize("duration", [math.inf, math.nan])
    def test_non_finite_duration_rejected(self, duration: float) -> None:
        celebration, clock, events = make_celebration()
        with pytest.raises(InvalidArgument, match="duration must be finite"):
            celebration.start(4, duration=duration)
        assert celebration.active is None

    def test_conflicting_start(self) -> None:
        celebration, clock, events = make_celebration()
        celebration.start(4, duration=1.0)
        with pytest.raises(ConflictingOperation):
            celebration.start(4, duration=1.0)

    def test_stop(self) -> None:
        celebration, clock, events = make_celebration()
        run = celebration.start(4, duration=5.0)
        clock.advance(1.0)
        celebration.stop()

        assert [name for name, _, _ in events][-2:] == [ALL_TILES_RESET, CELEBRATION_COMPLETED]
        assert events[-1][1] == {"cancelled": True}
        assert run.cancelled
        count = len(events)

        clock.advance(10.0)
        celebration.stop()
        assert len(events) == count

    def test_stop_logs_cancellation(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="tick_reveal.celebration")
        celebration, clock, events = make_celebration()
        run = celebration.start(4, duration=5.0)
        clock.advance(1.0)
        celebration.stop()

        messages = [r.getMessage() for r in caplog.records]
        assert f"Celebration cancelled after {run.batch_count} batches" in messages
