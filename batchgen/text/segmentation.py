"""Split long text into bounded, boundary-respecting segments.

Every policy is a pure function of its input: the same text and policy always
produce the same segments. Boundary detection is heuristic; sentence splitting
in particular breaks after abbreviations such as "Mr." because any ``.``
followed by whitespace counts as a terminator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import regex

from ..batch.models import Segment
from ..errors import InvalidConfiguration
from .normalization import normalize_whitespace

_QUOTES = "\"'“”‘’«»"

# A run of terminators closes a sentence when quotes follow it (the quotes
# belong to the sentence) or when whitespace or end of text follows it.
_SENTENCE_END_PATTERN = regex.compile(rf"[.!?]+(?:[{_QUOTES}]+|(?=\s|$))")
_PARAGRAPH_BREAK_PATTERN = regex.compile(r"\n[ \t]*\n\s*")
_SECONDARY_BREAKS = (";", ":", ",")
_SECONDARY_BREAK_MIN_RATIO = 0.5


def _require_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfiguration(f"{name} must be at least 1, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class WordBoundary:
    """Chunks of at most ``max_chars``, broken at spaces where possible."""

    max_chars: int

    def __post_init__(self) -> None:
        _require_positive("max_chars", self.max_chars)


@dataclass(frozen=True, slots=True)
class SentenceBoundary:
    """Whole sentences packed into chunks of at most ``max_chars``."""

    max_chars: int

    def __post_init__(self) -> None:
        _require_positive("max_chars", self.max_chars)


@dataclass(frozen=True, slots=True)
class ProportionalParts:
    """``parts`` roughly equal groups of whole paragraphs."""

    parts: int

    def __post_init__(self) -> None:
        _require_positive("parts", self.parts)


@dataclass(frozen=True, slots=True)
class LineBoundary:
    """One segment per non-blank line, optionally word-split when too long."""

    auto_split_max_chars: Optional[int] = None

    def __post_init__(self) -> None:
        if self.auto_split_max_chars is not None:
            _require_positive("auto_split_max_chars", self.auto_split_max_chars)


Policy = Union[WordBoundary, SentenceBoundary, ProportionalParts, LineBoundary]


def split_words(text: str, max_chars: int) -> List[str]:
    """Return whitespace-normalized chunks of at most ``max_chars`` characters.

    Each chunk ends at the last space that keeps it within the limit. A run of
    non-space characters longer than the limit is cut at exactly ``max_chars``.
    """

    _require_positive("max_chars", max_chars)
    source = normalize_whitespace(text)
    chunks: List[str] = []
    start = 0
    length = len(source)
    while start < length:
        end = min(start + max_chars, length)
        if end < length:
            # A space right after the window still lets the window fill up.
            space = source.rfind(" ", start, end + 1)
            if space > start:
                end = space
        chunk = source[start:end].strip()
        if chunk:
            chunks.append(chunk)
        start = end
        while start < length and source[start] == " ":
            start += 1
    return chunks


def split_sentences(text: str) -> List[str]:
    """Return the sentences of ``text`` with whitespace normalized."""

    source = normalize_whitespace(text)
    sentences: List[str] = []
    cursor = 0
    for match in _SENTENCE_END_PATTERN.finditer(source):
        sentence = source[cursor : match.end()].strip()
        if sentence:
            sentences.append(sentence)
        cursor = match.end()
    tail = source[cursor:].strip()
    if tail:
        sentences.append(tail)
    return sentences


def _split_long_sentence(sentence: str, max_chars: int) -> List[str]:
    pieces: List[str] = []
    rest = sentence
    min_break = max_chars * _SECONDARY_BREAK_MIN_RATIO
    while len(rest) > max_chars:
        window = rest[:max_chars]
        cut = max(window.rfind(mark) for mark in _SECONDARY_BREAKS) + 1
        if cut < min_break:
            space = rest.rfind(" ", 0, max_chars + 1)
            cut = space if space > 0 else max_chars
        piece = rest[:cut].strip()
        if piece:
            pieces.append(piece)
        rest = rest[cut:].lstrip()
    if rest:
        pieces.append(rest)
    return pieces


def pack_sentences(sentences: Sequence[str], max_chars: int) -> List[str]:
    """Greedily join ``sentences`` with single spaces into chunks <= ``max_chars``."""

    _require_positive("max_chars", max_chars)
    chunks: List[str] = []
    current = ""
    for sentence in sentences:
        pieces = [sentence] if len(sentence) <= max_chars else _split_long_sentence(sentence, max_chars)
        for piece in pieces:
            if not current:
                current = piece
            elif len(current) + 1 + len(piece) <= max_chars:
                current = f"{current} {piece}"
            else:
                chunks.append(current)
                current = piece
    if current:
        chunks.append(current)
    return chunks


def split_paragraphs(text: str) -> List[str]:
    """Return the non-empty paragraphs of ``text`` (blank-line separated)."""

    stripped = (text or "").replace("\r\n", "\n").strip()
    if not stripped:
        return []
    return [part.strip() for part in _PARAGRAPH_BREAK_PATTERN.split(stripped) if part.strip()]


def split_proportional(text: str, parts: int) -> List[str]:
    """Divide ``text`` into ``parts`` groups of paragraphs of similar length.

    Exactly ``parts`` groups come back whenever the text has at least that
    many paragraphs; otherwise every paragraph becomes its own group.
    """

    _require_positive("parts", parts)
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return []
    target = math.ceil(len(text) / parts)
    groups: List[str] = []
    current: List[str] = []
    current_length = 0
    for position, paragraph in enumerate(paragraphs):
        if current and len(groups) < parts - 1:
            remaining = len(paragraphs) - position
            parts_after_current = parts - len(groups) - 1
            over_target = current_length + 2 + len(paragraph) > target
            if over_target or remaining <= parts_after_current:
                groups.append("\n\n".join(current))
                current = []
                current_length = 0
        current_length = current_length + 2 + len(paragraph) if current else len(paragraph)
        current.append(paragraph)
    if current:
        groups.append("\n\n".join(current))
    return groups


def split_lines(text: str, auto_split_max_chars: Optional[int] = None) -> List[str]:
    """Return each non-blank line, word-splitting lines above the optional cap."""

    chunks: List[str] = []
    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if auto_split_max_chars is not None and len(line) > auto_split_max_chars:
            chunks.extend(split_words(line, auto_split_max_chars))
        else:
            chunks.append(line)
    return chunks


def split_text(text: str, policy: Policy) -> List[str]:
    """Return the raw chunk strings produced by ``policy``."""

    if isinstance(policy, WordBoundary):
        return split_words(text, policy.max_chars)
    if isinstance(policy, SentenceBoundary):
        return pack_sentences(split_sentences(text), policy.max_chars)
    if isinstance(policy, ProportionalParts):
        return split_proportional(text, policy.parts)
    if isinstance(policy, LineBoundary):
        return split_lines(text, policy.auto_split_max_chars)
    raise InvalidConfiguration(f"Unsupported segmentation policy: {policy!r}")


def segment(text: str, policy: Policy) -> List[Segment]:
    """Split ``text`` under ``policy`` into indexed :class:`Segment` objects."""

    if text is None:
        raise InvalidConfiguration("text must be a string, got None")
    return [Segment(index=index, text=chunk) for index, chunk in enumerate(split_text(text, policy))]


__all__ = [
    "LineBoundary",
    "Policy",
    "ProportionalParts",
    "SentenceBoundary",
    "WordBoundary",
    "pack_sentences",
    "segment",
    "split_lines",
    "split_paragraphs",
    "split_proportional",
    "split_sentences",
    "split_text",
    "split_words",
]
