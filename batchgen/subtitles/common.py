"""Shared constants and logger used across subtitle modules."""

from __future__ import annotations

from .. import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("subtitles")

SRT_EXTENSION = ".srt"
SPLIT_MODES = frozenset({"sentence", "word"})

DEFAULT_CHARS_PER_SUBTITLE = 500
DEFAULT_DISPLAY_SECONDS = 29.0
DEFAULT_PAUSE_SECONDS = 1.0

__all__ = [
    "DEFAULT_CHARS_PER_SUBTITLE",
    "DEFAULT_DISPLAY_SECONDS",
    "DEFAULT_PAUSE_SECONDS",
    "SPLIT_MODES",
    "SRT_EXTENSION",
    "logger",
]
