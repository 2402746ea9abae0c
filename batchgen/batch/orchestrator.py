"""Sequential driver that pushes segments through a slow, fallible generator.

Items are processed strictly one after another: providers rate-limit per
account, and continuation-style generation needs each output before the next
request can be built. Failures are retried with an injectable backoff and then
recorded per item; a started run never raises because one item failed.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union
from uuid import uuid4

from .. import logging_manager as log_mgr
from ..config import EngineConfig, get_engine_config
from ..errors import GenerationFailed, InvalidConfiguration
from ..progress_tracker import ProgressTracker
from ..retry_annotations import describe_exception, format_retry_failure
from .backoff import Backoff, fixed_backoff
from .models import BatchItem, BatchItemStatus, BatchProgress, BatchRun, BatchSummary, Segment

logger = log_mgr.get_logger().getChild("batch")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_INTER_ITEM_DELAY_SECONDS = 1.0

GenerateFn = Callable[[Segment], Union[Any, Awaitable[Any]]]
ProgressCallback = Callable[[BatchProgress], None]
SleepFn = Callable[[float], Awaitable[Any]]


class BatchOrchestrator:
    """Run ``generate`` over segments with retry, cancellation and progress.

    ``generate`` may be a coroutine function or a plain callable; anything it
    raises (other than cancellation of the surrounding task) counts as a
    failed attempt. ``progress_callback`` receives a :class:`BatchProgress`
    after each item reaches a terminal state.
    """

    def __init__(
        self,
        generate: Optional[GenerateFn],
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff: Optional[Backoff] = None,
        inter_item_delay: float = DEFAULT_INTER_ITEM_DELAY_SECONDS,
        progress_callback: Optional[ProgressCallback] = None,
        progress_tracker: Optional[ProgressTracker] = None,
        sleep: SleepFn = asyncio.sleep,
        label: str = "generation",
    ) -> None:
        if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
            raise InvalidConfiguration(f"max_attempts must be a positive integer, got {max_attempts!r}")
        if inter_item_delay < 0:
            raise InvalidConfiguration(f"inter_item_delay must be non-negative, got {inter_item_delay}")
        self._generate = generate
        self.max_attempts = max_attempts
        self.backoff: Backoff = backoff or fixed_backoff(DEFAULT_RETRY_DELAY_SECONDS)
        self.inter_item_delay = float(inter_item_delay)
        self.progress_callback = progress_callback
        self.progress_tracker = progress_tracker
        self.label = label
        self._sleep = sleep
        self._active_run: Optional[BatchRun] = None

    @classmethod
    def from_config(
        cls,
        generate: Optional[GenerateFn],
        config: Optional[EngineConfig] = None,
        **overrides: Any,
    ) -> "BatchOrchestrator":
        """Build an orchestrator from :class:`EngineConfig` values."""

        resolved = config or get_engine_config()
        options: dict[str, Any] = {
            "max_attempts": resolved.max_attempts,
            "backoff": resolved.build_backoff(),
            "inter_item_delay": resolved.inter_item_delay_seconds,
        }
        options.update(overrides)
        return cls(generate, **options)

    @property
    def active_run(self) -> Optional[BatchRun]:
        return self._active_run

    def create_run(self, segments: Sequence[Segment]) -> BatchRun:
        """Validate inputs and wrap ``segments`` in a fresh :class:`BatchRun`."""

        if self._generate is None or not callable(self._generate):
            raise InvalidConfiguration("A callable generate function is required")
        if not segments:
            raise InvalidConfiguration("At least one segment is required to start a batch")
        return BatchRun.from_segments(list(segments))

    async def run(self, segments: Sequence[Segment]) -> BatchSummary:
        """Create a run for ``segments`` and drive it to completion."""

        return await self.execute(self.create_run(segments))

    async def execute(self, run: BatchRun) -> BatchSummary:
        """Drive the pending items of ``run`` through generation in order.

        Items that already reached a terminal state keep their status and
        artifact; use :meth:`retry_failed` to re-run failures.
        """

        pending = [item for item in run.items if item.status is BatchItemStatus.PENDING]
        return await self._drive(run, pending, stage="run")

    async def retry_failed(self, run: BatchRun) -> BatchSummary:
        """Re-run only the failed items of ``run``; other items are left untouched."""

        failed = [item for item in run.items if item.status is BatchItemStatus.FAILED]
        for item in failed:
            item.reset()
        return await self._drive(run, failed, stage="retry_failed")

    def request_cancel(self) -> None:
        """Ask the active run to stop before its next item."""

        if self._active_run is not None:
            self._active_run.request_cancel()

    async def _drive(self, run: BatchRun, items: List[BatchItem], *, stage: str) -> BatchSummary:
        run.cancel_requested = False
        run.completed = 0
        run.total = len(items)
        self._active_run = run
        failures: List[GenerationFailed] = []
        cancelled = False
        processed = 0
        started = time.perf_counter()
        tracker = self.progress_tracker

        with log_mgr.log_context(run_id=uuid4().hex[:12], stage=stage):
            logger.info(
                "Batch run started",
                extra={"event": "batch.run.start", "total": run.total, "label": self.label},
            )
            if tracker is not None:
                tracker.start(run.total, metadata={"stage": stage, "label": self.label})
            try:
                for position, item in enumerate(items):
                    if run.cancel_requested:
                        cancelled = True
                        self._skip_remaining(run, items[position:])
                        break
                    item.status = BatchItemStatus.GENERATING
                    processed += 1
                    if tracker is not None:
                        tracker.publish_progress({"index": item.index, "status": item.status.value})

                    failure = await self._generate_with_retry(item)
                    if failure is not None:
                        failures.append(failure)
                    self._record_completion(run, item)

                    is_last = position == len(items) - 1
                    if not is_last and not run.cancel_requested and self.inter_item_delay > 0:
                        await self._sleep(self.inter_item_delay)
            finally:
                if self._active_run is run:
                    self._active_run = None

            summary = BatchSummary.from_run(
                run,
                cancelled=cancelled,
                failures=tuple(failures),
                processed=processed,
                scheduled=len(items),
            )
            duration_ms = int((time.perf_counter() - started) * 1000)
            logger.info(
                summary.describe(),
                extra={
                    "event": "batch.run.finish",
                    "status": "cancelled" if cancelled else "completed",
                    "duration_ms": duration_ms,
                    "success_count": summary.success_count,
                    "failed_count": summary.failed_count,
                    "skipped_count": summary.skipped_count,
                },
            )
            if tracker is not None:
                tracker.mark_finished(
                    {
                        "cancelled": cancelled,
                        "success_count": summary.success_count,
                        "failed_count": summary.failed_count,
                        "skipped_count": summary.skipped_count,
                    }
                )
        return summary

    async def _generate_with_retry(self, item: BatchItem) -> Optional[GenerationFailed]:
        last_error = "no additional details"
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = self._generate(item.segment)  # type: ignore[misc]
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                item.retries += 1
                last_error = describe_exception(exc)
            else:
                item.status = BatchItemStatus.SUCCESS
                item.result = result
                item.error = None
                return None

            if attempt < self.max_attempts:
                delay = self.backoff(attempt)
                logger.warning(
                    "Generation attempt failed; retrying",
                    extra={
                        "event": "batch.item.retry",
                        "index": item.index,
                        "attempt": attempt,
                        "delay_seconds": delay,
                        "reason": last_error,
                    },
                )
                if self.progress_tracker is not None:
                    self.progress_tracker.publish_progress(
                        {"index": item.index, "retry": attempt, "retry_reason": last_error}
                    )
                await self._sleep(delay)

        item.status = BatchItemStatus.FAILED
        item.result = None
        item.error = format_retry_failure(self.label, self.max_attempts, reason=last_error)
        logger.error(
            "Generation failed after exhausting retries",
            extra={
                "event": "batch.item.failed",
                "index": item.index,
                "attempts": self.max_attempts,
                "reason": last_error,
            },
        )
        return GenerationFailed(item.index, item.error, attempts=self.max_attempts)

    def _skip_remaining(self, run: BatchRun, remaining: Sequence[BatchItem]) -> None:
        skipped = 0
        for item in remaining:
            if item.status is BatchItemStatus.PENDING:
                item.status = BatchItemStatus.SKIPPED
                skipped += 1
                self._record_completion(run, item)
        logger.info(
            "Batch run cancelled",
            extra={"event": "batch.run.cancelled", "skipped": skipped, "completed": run.completed},
        )

    def _record_completion(self, run: BatchRun, item: BatchItem) -> None:
        run.completed += 1
        if self.progress_tracker is not None:
            self.progress_tracker.record_step_completion(index=item.index, status=item.status.value)
        if self.progress_callback is None:
            return
        try:
            self.progress_callback(run.progress)
        except Exception:
            logger.exception(
                "Progress callback raised",
                extra={"event": "batch.progress.callback_error", "index": item.index},
            )


__all__ = [
    "BatchOrchestrator",
    "DEFAULT_INTER_ITEM_DELAY_SECONDS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_RETRY_DELAY_SECONDS",
]
