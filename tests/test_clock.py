"""Tests for VirtualClock."""
from __future__ import annotations

import pytest
from tick_reveal import VirtualClock


class TestScheduling:
    def test_fires_when_due(self) -> None:
        clock = VirtualClock()
        fired = []
        clock.call_later(1.0, lambda: fired.append(clock.now))

        clock.advance(0.5)
        assert fired == []
        clock.advance(0.5)
        assert fired == [1.0]

    def test_zero_delay_fires_on_next_advance(self) -> None:
        clock = VirtualClock()
        fired = []
        clock.call_later(0.0, lambda: fired.append("now"))
        assert fired == []
        clock.advance(0.0)
        assert fired == ["now"]

    def test_due_order(self) -> None:
        clock = VirtualClock()
        order = []
        clock.call_later(0.3, lambda: order.append("c"))
        clock.call_later(0.1, lambda: order.append("a"))
        clock.call_later(0.2, lambda: order.append("b"))
        clock.advance(1.0)
        assert order == ["a", "b", "c"]

    def test_ties_fire_in_scheduling_order(self) -> None:
        clock = VirtualClock()
        order = []
        for name in "xyz":
            clock.call_later(0.5, lambda name=name: order.append(name))
        clock.advance(0.5)
        assert order == ["x", "y", "z"]

    def test_now_is_due_time_inside_callback(self) -> None:
        clock = VirtualClock()
        seen = []
        clock.call_later(0.25, lambda: seen.append(clock.now))
        clock.advance(1.0)
        assert seen == [0.25]
        assert clock.now == 1.0

    def test_nested_timer_fires_in_same_window(self) -> None:
        clock = VirtualClock()
        fired = []

        def first() -> None:
            fired.append("first")
            clock.call_later(0.2, lambda: fired.append("second"))

        clock.call_later(0.1, first)
        assert clock.advance(1.0) == 2
        assert fired == ["first", "second"]

    def test_nested_timer_past_window_waits(self) -> None:
        clock = VirtualClock()
        fired = []
        clock.call_later(0.1, lambda: clock.call_later(1.0, lambda: fired.append(1)))
        clock.advance(0.5)
        assert fired == []
        assert clock.pending == 1

    def test_negative_delay_raises(self) -> None:
        with pytest.raises(ValueError, match="delay must be >= 0"):
            VirtualClock().call_later(-1.0, lambda: None)

    def test_negative_advance_raises(self) -> None:
        with pytest.raises(ValueError, match="dt must be >= 0"):
            VirtualClock().advance(-0.1)


class TestCancel:
    def test_cancelled_timer_never_fires(self) -> None:
        clock = VirtualClock()
        fired = []
        timer = clock.call_later(0.1, lambda: fired.append(1))
        clock.cancel(timer)
        clock.advance(1.0)
        assert fired == []
        assert not timer.active

    def test_cancel_twice_is_noop(self) -> None:
        clock = VirtualClock()
        timer = clock.call_later(0.1, lambda: None)
        clock.cancel(timer)
        clock.cancel(timer)
        assert clock.pending == 0

    def test_cancel_after_fire_is_noop(self) -> None:
        clock = VirtualClock()
        timer = clock.call_later(0.1, lambda: None)
        clock.advance(0.2)
        assert timer.fired
        clock.cancel(timer)
        assert clock.pending == 0


class TestIdle:
    def test_run_until_idle(self) -> None:
        clock = VirtualClock()
        fired = []
        clock.call_later(2.0, lambda: fired.append(clock.now))
        clock.call_later(5.0, lambda: fired.append(clock.now))
        assert clock.run_until_idle() == 2
        assert fired == [2.0, 5.0]
        assert clock.now == 5.0

    def test_next_due_skips_cancelled(self) -> None:
        clock = VirtualClock()
        timer = clock.call_later(1.0, lambda: None)
        clock.call_later(3.0, lambda: None)
        clock.cancel(timer)
        assert clock.next_due() == 3.0

    def test_next_due_none_when_idle(self) -> None:
        assert VirtualClock().next_due() is None

    def test_reset(self) -> None:
        clock = VirtualClock()
        clock.call_later(1.0, lambda: None)
        clock.advance(0.5)
        clock.reset()
        assert clock.now == 0.0
        assert clock.pending == 0
