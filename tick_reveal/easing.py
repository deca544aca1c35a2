"""Easing functions and the blink deceleration curve."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from tick_reveal.types import SequenceConfig


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return 1 - (-2 * t + 2) ** 2 / 2


EASINGS: dict[str, Callable[[float], float]] = {
    "linear": linear,
    "ease_in": ease_in,
    "ease_out": ease_out,
    "ease_in_out": ease_in_out,
}


def power(t: float, exponent: float) -> float:
    return t**exponent


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def interval_at(config: SequenceConfig, progress: float) -> float:
    """Gap before the next pulse at ``progress`` (clamped to [0, 1])."""
    progress = min(max(progress, 0.0), 1.0)
    eased = power(progress, config.easing_power)
    return lerp(config.start_interval, config.end_interval, eased)


def plan_intervals(config: SequenceConfig) -> list[float]:
    """Every interval a run with ``config`` waits through, in order.

    The schedule does not depend on tile selection, so the pulse count is
    ``len(plan_intervals(config))``.
    """
    intervals: list[float] = []
    elapsed = 0.0
    while elapsed < config.total_duration:
        interval = interval_at(config, elapsed / config.total_duration)
        intervals.append(interval)
        elapsed += interval
    return intervals
