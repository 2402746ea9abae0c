"""Continuation-style generation for multi-part script expansion.

Each part is expanded with the ending of the previous expanded part as
context, so the parts read as one narrative. The orchestrator runs items
sequentially, which is what lets :class:`ContinuationGenerator` carry that
context from one call to the next.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Union

from .. import logging_manager as log_mgr
from ..config import EngineConfig, get_engine_config
from ..errors import InvalidConfiguration
from ..text.normalization import clean_generated_text
from ..text.overlap import trim_overlap
from .models import BatchItem, BatchItemStatus, Segment

logger = log_mgr.get_logger().getChild("batch.expansion")

DEFAULT_TAIL_CHARS = 500

ExpandFn = Callable[[Segment, str], Union[str, Awaitable[str]]]


class ContinuationGenerator:
    """``generate`` callable that chains each output into the next prompt.

    ``expand(segment, previous_tail)`` produces the raw continuation, where
    ``previous_tail`` is the ending of the closest earlier part that has been
    expanded (or of ``initial_context`` when there is none). Tails are kept
    per segment index, so re-running a failed part later still hands it the
    ending of the part before it. The raw text is cleaned of markdown
    decoration and any echoed context is trimmed before it is returned and
    remembered.
    """

    def __init__(
        self,
        expand: ExpandFn,
        *,
        tail_chars: int = DEFAULT_TAIL_CHARS,
        initial_context: str = "",
        clean: bool = True,
    ) -> None:
        if not callable(expand):
            raise InvalidConfiguration("expand must be callable")
        if isinstance(tail_chars, bool) or not isinstance(tail_chars, int) or tail_chars < 1:
            raise InvalidConfiguration(f"tail_chars must be a positive integer, got {tail_chars!r}")
        self._expand = expand
        self.tail_chars = tail_chars
        self.clean = clean
        self._initial_tail = initial_context[-tail_chars:] if initial_context else ""
        self._tails: Dict[int, str] = {}

    @classmethod
    def from_config(
        cls,
        expand: ExpandFn,
        config: Optional[EngineConfig] = None,
        **overrides: Any,
    ) -> "ContinuationGenerator":
        """Build a generator whose tail length comes from :class:`EngineConfig`."""

        resolved = config or get_engine_config()
        options: Dict[str, Any] = {"tail_chars": resolved.continuation_tail_chars}
        options.update(overrides)
        return cls(expand, **options)

    @property
    def previous_tail(self) -> str:
        """Ending of the furthest part expanded so far."""

        if not self._tails:
            return self._initial_tail
        return self._tails[max(self._tails)]

    def tail_for(self, index: int) -> str:
        """Return the context handed to the part at ``index``."""

        earlier = [known for known in self._tails if known < index]
        if not earlier:
            return self._initial_tail
        return self._tails[max(earlier)]

    async def __call__(self, segment: Segment) -> str:
        tail = self.tail_for(segment.index)
        raw = self._expand(segment, tail)
        if inspect.isawaitable(raw):
            raw = await raw
        text = clean_generated_text(raw) if self.clean else (raw or "")
        if tail:
            trimmed = trim_overlap(tail, text)
            if trimmed != text:
                logger.debug(
                    "Trimmed echoed context from continuation",
                    extra={
                        "event": "expansion.overlap_trimmed",
                        "index": segment.index,
                        "removed_chars": len(text) - len(trimmed),
                    },
                )
            text = trimmed
        if not text.strip():
            # An empty continuation is a failed attempt, not a result.
            raise ValueError(f"Empty continuation for segment {segment.index}")
        self._tails[segment.index] = text[-self.tail_chars :]
        return text


def assemble_expanded_script(
    items: Iterable[BatchItem],
    *,
    separator: str = "\n\n",
    formatter: Optional[Callable[[Any], str]] = None,
) -> str:
    """Join expanded parts in order, keeping the original text where expansion failed."""

    pieces = []
    for item in sorted(items, key=lambda entry: entry.index):
        if item.status is BatchItemStatus.SUCCESS and item.result is not None:
            value = formatter(item.result) if formatter else str(item.result)
        else:
            value = item.segment.text
        value = value.strip()
        if value:
            pieces.append(value)
    return separator.join(pieces)


__all__ = ["ContinuationGenerator", "DEFAULT_TAIL_CHARS", "assemble_expanded_script"]
