"""Exceptions shared by the segmenter and the batch orchestrator."""

from __future__ import annotations

from typing import Optional


class BatchEngineError(RuntimeError):
    """Base class for engine errors."""


class InvalidConfiguration(BatchEngineError, ValueError):
    """Raised when a caller passes parameters the engine cannot work with."""


class GenerationFailed(BatchEngineError):
    """Recorded when ``generate`` keeps failing for one segment."""

    def __init__(self, segment_index: int, error: str, *, attempts: Optional[int] = None) -> None:
        super().__init__(f"Generation failed for segment {segment_index}: {error}")
        self.segment_index = segment_index
        self.error = error
        self.attempts = attempts


__all__ = ["BatchEngineError", "GenerationFailed", "InvalidConfiguration"]
