"""Typed containers for segments and batch runs."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..errors import GenerationFailed


@dataclass(frozen=True, slots=True)
class Segment:
    """One bounded chunk of source text, addressed by its position."""

    index: int
    text: str
    char_count: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "char_count", len(self.text))


class BatchItemStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchItemStatus.SUCCESS, BatchItemStatus.FAILED, BatchItemStatus.SKIPPED)


@dataclass(slots=True)
class BatchItem:
    """A segment plus its generation state within a run."""

    segment: Segment
    status: BatchItemStatus = BatchItemStatus.PENDING
    result: Any = None
    retries: int = 0
    error: Optional[str] = None

    @property
    def index(self) -> int:
        return self.segment.index

    def reset(self) -> None:
        self.status = BatchItemStatus.PENDING
        self.result = None
        self.retries = 0
        self.error = None


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Progress payload handed to progress callbacks."""

    current: int
    total: int


@dataclass(slots=True)
class BatchRun:
    """State of one orchestration session over an ordered item list.

    ``cancel_requested`` only ever flips to ``True`` during a run; it is
    cleared when the orchestrator starts the next run or retry sub-run.
    """

    items: List[BatchItem]
    cancel_requested: bool = False
    completed: int = 0
    total: int = 0

    @classmethod
    def from_segments(cls, segments: List[Segment]) -> "BatchRun":
        items = [BatchItem(segment=segment) for segment in segments]
        return cls(items=items, total=len(items))

    @property
    def progress(self) -> BatchProgress:
        return BatchProgress(current=self.completed, total=self.total)

    def request_cancel(self) -> None:
        self.cancel_requested = True

    def snapshot(self) -> Tuple[BatchItem, ...]:
        """Return copies of the items that observers may keep."""

        return tuple(dataclasses.replace(item) for item in self.items)

    def count(self, status: BatchItemStatus) -> int:
        return sum(1 for item in self.items if item.status is status)


@dataclass(frozen=True)
class BatchSummary:
    """Terminal tally returned once a run loop exits."""

    success_count: int
    failed_count: int
    skipped_count: int
    items: Tuple[BatchItem, ...]
    cancelled: bool = False
    failures: Tuple[GenerationFailed, ...] = ()
    # Counts for the pass that produced this summary. A retry pass drives
    # only the failed subset of the run.
    processed: Optional[int] = None
    scheduled: Optional[int] = None

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def all_succeeded(self) -> bool:
        return self.success_count == self.total

    @classmethod
    def from_run(
        cls,
        run: BatchRun,
        *,
        cancelled: bool,
        failures: Tuple[GenerationFailed, ...] = (),
        processed: Optional[int] = None,
        scheduled: Optional[int] = None,
    ) -> "BatchSummary":
        return cls(
            success_count=run.count(BatchItemStatus.SUCCESS),
            failed_count=run.count(BatchItemStatus.FAILED),
            skipped_count=run.count(BatchItemStatus.SKIPPED),
            items=run.snapshot(),
            cancelled=cancelled,
            failures=failures,
            processed=processed,
            scheduled=scheduled,
        )

    def results(self) -> List[Any]:
        """Artifacts of successful items, in segment order."""

        return [item.result for item in self.items if item.status is BatchItemStatus.SUCCESS]

    def describe(self) -> str:
        """Human-readable tally of the run."""

        total = self.total
        if self.cancelled:
            processed = self.processed
            if processed is None:
                processed = self.success_count + self.failed_count
            scheduled = self.scheduled if self.scheduled is not None else total
            if scheduled < total:
                return (
                    f"Cancelled after {processed} of {scheduled} items in this pass; "
                    f"run has {self.success_count} succeeded, {self.failed_count} failed, "
                    f"{self.skipped_count} skipped."
                )
            return (
                f"Cancelled after {processed} of {scheduled} items "
                f"({self.success_count} succeeded, {self.failed_count} failed, "
                f"{self.skipped_count} skipped)."
            )
        if self.failed_count == 0 and self.skipped_count == 0:
            noun = "item" if total == 1 else "items"
            return f"All {total} {noun} succeeded."
        message = (
            f"Partial success: {self.success_count} of {total} succeeded, "
            f"{self.failed_count} failed"
        )
        if self.skipped_count:
            message += f", {self.skipped_count} skipped"
        return message + "."


__all__ = [
    "BatchItem",
    "BatchItemStatus",
    "BatchProgress",
    "BatchRun",
    "BatchSummary",
    "Segment",
]
