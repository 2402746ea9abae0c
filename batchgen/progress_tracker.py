"""Progress bookkeeping and event fan-out for batch runs."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import AsyncIterator, Callable, Dict, List, Mapping, Optional, Tuple

from . import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("progress")


@dataclass(frozen=True)
class ProgressSnapshot:
    """Immutable view of the current run statistics."""

    completed: int
    total: Optional[int]
    elapsed: float
    speed: float
    eta: Optional[float]


@dataclass(frozen=True)
class ProgressEvent:
    """Structured message emitted by :class:`ProgressTracker`."""

    event_type: str
    snapshot: ProgressSnapshot
    timestamp: float
    metadata: Mapping[str, object]


class ProgressEventStream:
    """Asynchronous iterator that yields :class:`ProgressEvent` objects.

    The stream ends after the tracker's ``complete`` event or when
    :meth:`close` is called.
    """

    _SENTINEL = object()

    def __init__(self, tracker: "ProgressTracker") -> None:
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._closed = False
        self._unsubscribe = tracker.register_observer(self._on_event)

    def _on_event(self, event: ProgressEvent) -> None:
        if self._closed:
            return
        self._queue.put_nowait(event)
        if event.event_type == "complete":
            self.close()

    def __aiter__(self) -> AsyncIterator[ProgressEvent]:
        return self

    async def __anext__(self) -> ProgressEvent:
        item = await self._queue.get()
        if item is self._SENTINEL:
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    async def aclose(self) -> None:
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        self._queue.put_nowait(self._SENTINEL)


class ProgressTracker:
    """Track completion counts for one batch run and notify observers.

    The tracker is written by a single run loop, so it keeps no locks.
    """

    def __init__(self, total: Optional[int] = None) -> None:
        self._start_time = time.perf_counter()
        self._completed = 0
        self._total: Optional[int] = total
        self._observers: List[Callable[[ProgressEvent], None]] = []
        self._completion_emitted = False
        self._status_counts: Dict[str, int] = {}

    def start(self, total: int, metadata: Optional[Dict[str, object]] = None) -> None:
        """Reset counters for a new run of ``total`` items and emit ``start``."""

        self._start_time = time.perf_counter()
        self._completed = 0
        self._total = max(0, total)
        self._completion_emitted = False
        self._status_counts = {}
        self._emit_event("start", metadata={"total": self._total, **(metadata or {})})

    def publish_progress(self, metadata: Optional[Dict[str, object]] = None) -> None:
        """Emit a ``progress`` event without touching the counters."""

        self._emit_event("progress", metadata=dict(metadata or {}))

    def record_step_completion(
        self,
        *,
        index: int,
        status: str,
        metadata: Optional[Dict[str, object]] = None,
    ) -> None:
        """Count one finished item and emit a ``progress`` event."""

        self._completed += 1
        self._status_counts[status] = self._status_counts.get(status, 0) + 1
        extra = dict(metadata or {})
        extra.update({"index": index, "status": status, "completed": self._completed})
        if self._total is not None:
            extra.setdefault("total", self._total)
        self._emit_event("progress", metadata=extra)

    def mark_finished(self, metadata: Optional[Dict[str, object]] = None) -> None:
        """Emit the terminal ``complete`` event once per run."""

        if self._completion_emitted:
            return
        self._completion_emitted = True
        payload = dict(metadata or {})
        payload.setdefault("status_counts", dict(self._status_counts))
        self._emit_event("complete", metadata=payload)

    def snapshot(self) -> ProgressSnapshot:
        """Return a snapshot of the current progress statistics."""

        completed = self._completed
        total = self._total
        elapsed = max(0.0, time.perf_counter() - self._start_time)
        speed = completed / elapsed if elapsed > 0 and completed > 0 else 0.0
        eta: Optional[float]
        if speed > 0 and total is not None:
            remaining = max(total - completed, 0)
            eta = remaining / speed if remaining > 0 else 0.0
        else:
            eta = None
        return ProgressSnapshot(
            completed=completed,
            total=total,
            elapsed=elapsed,
            speed=speed,
            eta=eta,
        )

    def is_complete(self) -> bool:
        """Return whether every expected item has been counted."""

        if self._total is None:
            return False
        return self._completed >= self._total

    def register_observer(
        self, callback: Callable[[ProgressEvent], None]
    ) -> Callable[[], None]:
        """Register ``callback`` to receive :class:`ProgressEvent` notifications."""

        self._observers = [*self._observers, callback]

        def _unregister() -> None:
            observers = list(self._observers)
            try:
                observers.remove(callback)
            except ValueError:
                return
            self._observers = observers

        return _unregister

    def events(self) -> ProgressEventStream:
        """Return an asynchronous iterator of :class:`ProgressEvent` objects."""

        return ProgressEventStream(self)

    def _emit_event(self, event_type: str, *, metadata: Optional[Dict[str, object]] = None) -> None:
        event = ProgressEvent(
            event_type=event_type,
            snapshot=self.snapshot(),
            timestamp=time.perf_counter(),
            metadata=MappingProxyType(dict(metadata or {})),
        )
        observers: Tuple[Callable[[ProgressEvent], None], ...] = tuple(self._observers)
        for observer in observers:
            try:
                observer(event)
            except Exception:
                logger.debug(
                    "Progress observer raised",
                    exc_info=True,
                    extra={"event": "progress.observer_error", "event_type": event_type},
                )


__all__ = [
    "ProgressEvent",
    "ProgressEventStream",
    "ProgressSnapshot",
    "ProgressTracker",
]
