"""Turn plain text into a timed caption track."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from ..text.segmentation import SentenceBoundary, WordBoundary, segment
from .common import logger
from .io import render_srt
from .models import SubtitleCue, SubtitleJobOptions
from .timing import allocate_timestamps


def combine_scripts(contents: Iterable[str]) -> str:
    """Join several scripts into one body of text separated by blank lines."""

    return "\n\n".join(text.strip() for text in contents if text and text.strip())


def build_subtitle_cues(text: str, options: Optional[SubtitleJobOptions] = None) -> List[SubtitleCue]:
    """Segment ``text`` and give every segment a fixed display window."""

    resolved = options or SubtitleJobOptions()
    if resolved.split_mode == "word":
        policy: Any = WordBoundary(resolved.chars_per_subtitle)
    else:
        policy = SentenceBoundary(resolved.chars_per_subtitle)
    segments = segment(text, policy)
    timed = allocate_timestamps(segments, resolved.display_seconds, resolved.pause_seconds)
    cues = [
        SubtitleCue(index=item.segment.index + 1, start=item.start, end=item.end, lines=[item.segment.text])
        for item in timed
    ]
    logger.debug(
        "Built subtitle cues",
        extra={"event": "subtitles.cues_built", "cue_count": len(cues), **resolved.to_dict()},
    )
    return cues


def generate_srt(
    text: str,
    options: Optional[SubtitleJobOptions] = None,
    **overrides: Any,
) -> str:
    """Return an SRT document for ``text``.

    ``overrides`` are :class:`SubtitleJobOptions` fields and take precedence
    over ``options``.
    """

    if overrides:
        base = options.to_dict() if options is not None else {}
        base.update(overrides)
        options = SubtitleJobOptions(**base)
    return render_srt(build_subtitle_cues(text, options))


__all__ = ["build_subtitle_cues", "combine_scripts", "generate_srt"]
