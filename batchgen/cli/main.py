"""Entry point dispatching batchgen CLI commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .. import logging_manager as log_mgr
from ..config import load_engine_config
from ..errors import InvalidConfiguration
from ..subtitles import SubtitleJobOptions, build_subtitle_cues, render_srt, write_srt
from ..subtitles.common import SRT_EXTENSION
from ..text.segmentation import (
    LineBoundary,
    Policy,
    ProportionalParts,
    SentenceBoundary,
    WordBoundary,
    segment,
)
from .args import parse_cli_args

logger = log_mgr.get_logger().getChild("cli")

EXIT_OK = 0
EXIT_USAGE = 2


def _read_input(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    return Path(value).expanduser().read_text(encoding="utf-8")


def _resolve_output(value: str, input_file: str) -> Path:
    destination = Path(value).expanduser()
    if destination.is_dir():
        stem = Path(input_file).stem if input_file != "-" else "captions"
        return destination / f"{stem}{SRT_EXTENSION}"
    return destination


def _run_srt(args: argparse.Namespace) -> int:
    config = load_engine_config(args.config)
    options = SubtitleJobOptions.from_config(
        config,
        chars_per_subtitle=args.chars,
        display_seconds=args.display,
        pause_seconds=args.pause,
        split_mode=args.split_mode,
    )
    cues = build_subtitle_cues(_read_input(args.input_file), options)
    if args.output:
        destination = _resolve_output(args.output, args.input_file)
        write_srt(destination, cues)
        logger.info(
            "Wrote caption track",
            extra={"event": "cli.srt.written", "path": str(destination), "cue_count": len(cues)},
        )
    else:
        sys.stdout.write(render_srt(cues))
    return EXIT_OK


def _build_policy(args: argparse.Namespace) -> Policy:
    if args.policy == "word":
        return WordBoundary(args.max_chars)
    if args.policy == "lines":
        return LineBoundary(args.auto_split)
    if args.policy == "parts":
        return ProportionalParts(args.parts)
    return SentenceBoundary(args.max_chars)


def _run_split(args: argparse.Namespace) -> int:
    policy = _build_policy(args)
    for item in segment(_read_input(args.input_file), policy):
        payload = {"index": item.index, "char_count": item.char_count, "text": item.text}
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
    return EXIT_OK


_COMMANDS = {"srt": _run_srt, "split": _run_split}


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    """Execute the CLI with the supplied ``argv`` sequence."""

    args = parse_cli_args(argv)
    log_mgr.configure_logging_level(debug_enabled=args.debug)
    handler = _COMMANDS[args.command]
    try:
        return handler(args)
    except InvalidConfiguration as exc:
        logger.error(str(exc), extra={"event": "cli.invalid_configuration", "command": args.command})
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_USAGE
    except (OSError, ValueError) as exc:
        logger.error(str(exc), extra={"event": "cli.input_error", "command": args.command})
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_USAGE


__all__ = ["run_cli"]
