"""Segmented batch-generation engine.

Text is split into bounded segments by :mod:`batchgen.text.segmentation` and
then driven through a caller-supplied ``generate`` step by
:mod:`batchgen.batch.orchestrator`.
"""

from .batch import (
    BatchItem,
    BatchItemStatus,
    BatchOrchestrator,
    BatchRun,
    BatchSummary,
    Segment,
)
from .errors import BatchEngineError, GenerationFailed, InvalidConfiguration
from .text.segmentation import (
    LineBoundary,
    ProportionalParts,
    SentenceBoundary,
    WordBoundary,
    segment,
)

__all__ = [
    "BatchEngineError",
    "BatchItem",
    "BatchItemStatus",
    "BatchOrchestrator",
    "BatchRun",
    "BatchSummary",
    "GenerationFailed",
    "InvalidConfiguration",
    "LineBoundary",
    "ProportionalParts",
    "Segment",
    "SentenceBoundary",
    "WordBoundary",
    "segment",
]
