"""Text helpers."""

from .normalization import clean_generated_text, normalize_whitespace
from .overlap import overlap_similarity, trim_overlap
from .segmentation import (
    LineBoundary,
    ProportionalParts,
    SentenceBoundary,
    WordBoundary,
    segment,
)

__all__ = [
    "LineBoundary",
    "ProportionalParts",
    "SentenceBoundary",
    "WordBoundary",
    "clean_generated_text",
    "normalize_whitespace",
    "overlap_similarity",
    "segment",
    "trim_overlap",
]
