"""Batch orchestration over text segments."""

from .backoff import fixed_backoff, progressive_backoff, scheduled_backoff
from .models import (
    BatchItem,
    BatchItemStatus,
    BatchProgress,
    BatchRun,
    BatchSummary,
    Segment,
)
from .orchestrator import BatchOrchestrator

__all__ = [
    "BatchItem",
    "BatchItemStatus",
    "BatchOrchestrator",
    "BatchProgress",
    "BatchRun",
    "BatchSummary",
    "Segment",
    "fixed_backoff",
    "progressive_backoff",
    "scheduled_backoff",
]
