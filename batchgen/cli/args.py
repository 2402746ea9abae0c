"""Argument parsing helpers for the batchgen CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

POLICY_CHOICES = ("word", "sentence", "lines", "parts")


def _add_shared_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to an engine YAML file (defaults to conf/engine.yaml).",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batchgen",
        description="Split text into bounded segments and build caption tracks.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    srt_parser = subparsers.add_parser("srt", help="Generate an SRT caption track from text")
    srt_parser.add_argument("input_file", help="UTF-8 text file to caption ('-' for stdin).")
    srt_parser.add_argument("--chars", type=int, help="Maximum characters per subtitle.")
    srt_parser.add_argument("--display", type=float, help="Seconds each subtitle stays on screen.")
    srt_parser.add_argument("--pause", type=float, help="Seconds of gap between subtitles.")
    srt_parser.add_argument(
        "--split-mode",
        choices=["sentence", "word"],
        default="sentence",
        help="Break subtitles at sentence or word boundaries.",
    )
    srt_parser.add_argument(
        "--output",
        help="Destination file or directory; prints to stdout when omitted.",
    )
    _add_shared_arguments(srt_parser)

    split_parser = subparsers.add_parser("split", help="Print the segments of a text as JSON lines")
    split_parser.add_argument("input_file", help="UTF-8 text file to split ('-' for stdin).")
    split_parser.add_argument("--policy", choices=POLICY_CHOICES, default="sentence")
    split_parser.add_argument("--max-chars", type=int, default=500, help="Cap for word/sentence policies.")
    split_parser.add_argument("--parts", type=int, default=1, help="Number of parts for the parts policy.")
    split_parser.add_argument(
        "--auto-split",
        type=int,
        default=None,
        help="Word-split lines longer than this under the lines policy.",
    )
    _add_shared_arguments(split_parser)
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_cli_parser().parse_args(argv)


__all__ = ["POLICY_CHOICES", "build_cli_parser", "parse_cli_args"]
