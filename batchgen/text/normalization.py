"""Whitespace and markdown clean-up for source and generated text."""

from __future__ import annotations

import regex

_WHITESPACE_PATTERN = regex.compile(r"\s+")

# Applied in order; line-anchored patterns run in multiline mode.
_MARKDOWN_RULES: tuple[tuple[regex.Pattern[str], str], ...] = (
    (regex.compile(r"^#+\s*", regex.MULTILINE), ""),
    (regex.compile(r"^\*+\s*", regex.MULTILINE), ""),
    (regex.compile(r"^-+\s*", regex.MULTILINE), ""),
    (regex.compile(r"^/+\s*", regex.MULTILINE), ""),
    (regex.compile(r"^—+\s*", regex.MULTILINE), ""),
    (regex.compile(r"^–+\s*", regex.MULTILINE), ""),
    (regex.compile(r"\*\*"), ""),
    (regex.compile(r"\*"), ""),
    (regex.compile(r"_{2,}"), ""),
    (regex.compile(r"-{3,}"), "\n"),
    (regex.compile(r"\n{3,}"), "\n\n"),
)


def normalize_whitespace(value: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""

    return _WHITESPACE_PATTERN.sub(" ", value or "").strip()


def clean_generated_text(text: str) -> str:
    """Strip the markdown decoration models like to add to prose.

    Headers, bullet markers, bold/italic asterisks, underscore runs and leading
    dashes or slashes are removed; horizontal rules become line breaks and
    runs of blank lines are collapsed to one.
    """

    cleaned = (text or "").replace("\r\n", "\n")
    for pattern, replacement in _MARKDOWN_RULES:
        cleaned = pattern.sub(replacement, cleaned)
    return cleaned.strip()


__all__ = ["clean_generated_text", "normalize_whitespace"]
