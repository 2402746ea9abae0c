"""SubRip serialization helpers."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from .models import SubtitleCue


def seconds_to_timestamp(value: float) -> str:
    """Format ``value`` seconds as ``HH:MM:SS,mmm``."""

    total_ms = max(0, int(round(value * 1000)))
    hours, remainder = divmod(total_ms, 3600_000)
    minutes, remainder = divmod(remainder, 60_000)
    seconds, milliseconds = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{milliseconds:03d}"


def render_srt(cues: Sequence[SubtitleCue]) -> str:
    """Return ``cues`` as SRT text, renumbered from 1.

    Every block is the index, the time range, the text lines and a blank
    line; the document ends with a single newline.
    """

    fragments: List[str] = []
    for index, cue in enumerate(cues, start=1):
        fragments.append(f"{index}")
        fragments.append(f"{seconds_to_timestamp(cue.start)} --> {seconds_to_timestamp(cue.end)}")
        fragments.extend(cue.lines)
        fragments.append("")
    if not fragments:
        return ""
    return "\n".join(fragments).strip() + "\n"


def write_srt(path: Path, cues: Sequence[SubtitleCue]) -> None:
    """Serialize ``cues`` to ``path`` using SRT formatting."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_srt(cues), encoding="utf-8")


__all__ = ["render_srt", "seconds_to_timestamp", "write_srt"]
