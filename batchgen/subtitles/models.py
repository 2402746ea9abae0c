"""Typed containers for subtitle generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List

from ..errors import InvalidConfiguration
from .common import (
    DEFAULT_CHARS_PER_SUBTITLE,
    DEFAULT_DISPLAY_SECONDS,
    DEFAULT_PAUSE_SECONDS,
    SPLIT_MODES,
)

if TYPE_CHECKING:  # pragma: no cover - imports used for static analysis only
    from ..config import EngineConfig


@dataclass(slots=True)
class SubtitleCue:
    """Normalized representation of a subtitle cue."""

    index: int
    start: float
    end: float
    lines: List[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return max(0.0, self.end - self.start)

    def as_text(self) -> str:
        return "\n".join(self.lines).strip()


@dataclass(slots=True)
class SubtitleJobOptions:
    """Runtime configuration for turning text into a caption track."""

    chars_per_subtitle: int = DEFAULT_CHARS_PER_SUBTITLE
    display_seconds: float = DEFAULT_DISPLAY_SECONDS
    pause_seconds: float = DEFAULT_PAUSE_SECONDS
    split_mode: str = "sentence"

    def __post_init__(self) -> None:
        chars = self.chars_per_subtitle
        if isinstance(chars, bool) or not isinstance(chars, int) or chars < 1:
            raise InvalidConfiguration("chars_per_subtitle must be a positive integer")
        try:
            display = float(self.display_seconds)
            pause = float(self.pause_seconds)
        except (TypeError, ValueError):
            raise InvalidConfiguration("display_seconds and pause_seconds must be numbers") from None
        if display <= 0:
            raise InvalidConfiguration("display_seconds must be greater than zero")
        if pause < 0:
            raise InvalidConfiguration("pause_seconds must be non-negative")
        mode = (self.split_mode or "sentence").strip().lower()
        if mode not in SPLIT_MODES:
            raise InvalidConfiguration("split_mode must be 'sentence' or 'word'")
        self.display_seconds = display
        self.pause_seconds = pause
        self.split_mode = mode

    @classmethod
    def from_config(cls, config: "EngineConfig", **overrides: Any) -> "SubtitleJobOptions":
        values: dict[str, Any] = {
            "chars_per_subtitle": config.chars_per_subtitle,
            "display_seconds": config.display_seconds,
            "pause_seconds": config.pause_seconds,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def to_dict(self) -> dict[str, object]:
        return {
            "chars_per_subtitle": self.chars_per_subtitle,
            "display_seconds": self.display_seconds,
            "pause_seconds": self.pause_seconds,
            "split_mode": self.split_mode,
        }


__all__ = ["SubtitleCue", "SubtitleJobOptions"]
