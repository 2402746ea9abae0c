"""Delay schedules between retry attempts.

A backoff is any callable mapping the 1-based number of the attempt that just
failed to the seconds to wait before the next one.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..errors import InvalidConfiguration

Backoff = Callable[[int], float]


def _require_non_negative(name: str, value: float) -> float:
    if value < 0:
        raise InvalidConfiguration(f"{name} must be non-negative, got {value}")
    return float(value)


def fixed_backoff(seconds: float) -> Backoff:
    """Wait the same ``seconds`` after every failed attempt."""

    delay = _require_non_negative("seconds", seconds)

    def _backoff(attempt: int) -> float:
        return delay

    return _backoff


def progressive_backoff(step: float = 10.0, maximum: Optional[float] = None) -> Backoff:
    """Wait ``step * attempt`` seconds (10s, 20s, 30s ...), capped at ``maximum``."""

    step_seconds = _require_non_negative("step", step)
    cap = _require_non_negative("maximum", maximum) if maximum is not None else None

    def _backoff(attempt: int) -> float:
        delay = step_seconds * max(1, attempt)
        return min(delay, cap) if cap is not None else delay

    return _backoff


def scheduled_backoff(delays: Sequence[float]) -> Backoff:
    """Walk an explicit list of delays, repeating the last one when exhausted."""

    schedule = [_require_non_negative("delays", value) for value in delays]
    if not schedule:
        raise InvalidConfiguration("delays must contain at least one value")

    def _backoff(attempt: int) -> float:
        position = min(max(1, attempt), len(schedule)) - 1
        return schedule[position]

    return _backoff


__all__ = ["Backoff", "fixed_backoff", "progressive_backoff", "scheduled_backoff"]
