"""Remove context that a continuation model echoed back at the start of its output.

When part *N* is generated with the ending of part *N-1* as context, models
often repeat that ending before writing anything new. :func:`trim_overlap`
detects the echo with a bag-of-words comparison and drops the repeated lines.
It is a best-effort clean-up; some duplication can survive it.
"""

from __future__ import annotations

from typing import List, Set

import regex

from .normalization import normalize_whitespace
from .segmentation import split_sentences

SIMILARITY_THRESHOLD = 0.6
MIN_SHARED_WORD_LENGTH = 4
CANDIDATE_WINDOW_PADDING = 200
MAX_SCANNED_LINES = 10
MIN_MATCH_LINE_LENGTH = 20

_WORD_PATTERN = regex.compile(r"[\p{L}\p{N}']+")


def _vocabulary(text: str) -> Set[str]:
    return {word.casefold() for word in _WORD_PATTERN.findall(text or "")}


def _comparable(text: str) -> str:
    return normalize_whitespace(text).casefold()


def overlap_similarity(previous_tail: str, candidate: str) -> float:
    """Share of the tail's distinct words found near the start of ``candidate``.

    Only words of at least four characters count as shared; short function
    words appear everywhere and would inflate the score.
    """

    tail_words = _vocabulary(previous_tail)
    if not tail_words:
        return 0.0
    window = (candidate or "")[: len(previous_tail) + CANDIDATE_WINDOW_PADDING]
    window_words = _vocabulary(window)
    shared = [
        word for word in tail_words if len(word) >= MIN_SHARED_WORD_LENGTH and word in window_words
    ]
    return len(shared) / len(tail_words)


def _is_echoed(fragment: str, tail: str) -> bool:
    comparable = _comparable(fragment)
    return len(comparable) >= MIN_MATCH_LINE_LENGTH and comparable in tail


def _strip_echoed_sentences(line: str, tail: str) -> str:
    sentences = split_sentences(line)
    dropped = 0
    for sentence in sentences:
        if not _is_echoed(sentence, tail):
            break
        dropped += 1
    if not dropped:
        return line
    return " ".join(sentences[dropped:])


def trim_overlap(previous_tail: str, candidate: str) -> str:
    """Return ``candidate`` without the lines that repeat ``previous_tail``."""

    if not candidate or not (previous_tail or "").strip():
        return candidate
    if overlap_similarity(previous_tail, candidate) <= SIMILARITY_THRESHOLD:
        return candidate

    tail = _comparable(previous_tail)
    lines: List[str] = candidate.split("\n")
    cut = 0
    for position, line in enumerate(lines[:MAX_SCANNED_LINES]):
        if _is_echoed(line, tail):
            cut = position + 1

    remaining = lines[cut:]
    trimmed = cut > 0
    # An echo can share its line with the first new sentence.
    if remaining:
        head = _strip_echoed_sentences(remaining[0], tail)
        if head != remaining[0]:
            remaining = [head, *remaining[1:]]
            trimmed = True

    if not trimmed:
        return candidate
    return "\n".join(remaining).strip()


__all__ = [
    "SIMILARITY_THRESHOLD",
    "overlap_similarity",
    "trim_overlap",
]
