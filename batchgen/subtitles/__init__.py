"""Caption track generation."""

from .generator import build_subtitle_cues, combine_scripts, generate_srt
from .io import render_srt, seconds_to_timestamp, write_srt
from .models import SubtitleCue, SubtitleJobOptions
from .timing import TimedSegment, allocate_timestamps

__all__ = [
    "SubtitleCue",
    "SubtitleJobOptions",
    "TimedSegment",
    "allocate_timestamps",
    "build_subtitle_cues",
    "combine_scripts",
    "generate_srt",
    "render_srt",
    "seconds_to_timestamp",
    "write_srt",
]
