"""Fixed-cadence time slots for caption-style output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..batch.models import Segment
from ..errors import InvalidConfiguration


@dataclass(frozen=True, slots=True)
class TimedSegment:
    """A segment with its ``[start, end)`` display window in seconds."""

    segment: Segment
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


def allocate_timestamps(
    segments: Sequence[Segment],
    display_seconds: float,
    pause_seconds: float,
) -> List[TimedSegment]:
    """Give segment ``i`` the window starting at ``i * (display + pause)``.

    The schedule is a presentation cadence, not a measurement: it depends only
    on the position of each segment.
    """

    if display_seconds <= 0:
        raise InvalidConfiguration(f"display_seconds must be greater than zero, got {display_seconds}")
    if pause_seconds < 0:
        raise InvalidConfiguration(f"pause_seconds must be non-negative, got {pause_seconds}")
    slot = display_seconds + pause_seconds
    timed: List[TimedSegment] = []
    for position, segment in enumerate(segments):
        start = position * slot
        timed.append(TimedSegment(segment=segment, start=start, end=start + display_seconds))
    return timed


__all__ = ["TimedSegment", "allocate_timestamps"]
