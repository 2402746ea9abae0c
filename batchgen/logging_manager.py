"""JSON logging for batchgen runs.

Every record is one JSON object. Batch fields (``run_id``, ``stage``,
``event``, ``index``, ``attempt``, ``status``, ``duration_ms``) are promoted to
the top level; anything else passed through ``extra`` lands under ``"extra"``.
``run_id`` and ``stage`` usually come from :func:`log_context`, which the
orchestrator opens around each pass.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, List, Optional

LOGGER_NAME = "batchgen"
LOG_DIR_ENV_VAR = "BATCHGEN_LOG_DIR"
LOG_FILE_NAME = "batchgen.log"
DEFAULT_LOG_LEVEL = logging.INFO
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent

BATCH_FIELDS: tuple[str, ...] = (
    "run_id",
    "stage",
    "event",
    "index",
    "attempt",
    "status",
    "duration_ms",
)

# Attributes every LogRecord carries; none of them is caller-supplied extra.
_RECORD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

_run_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "batchgen_run_context", default={}
)
_logger: Optional[logging.Logger] = None


def resolve_log_dir() -> Path:
    """Return ``$BATCHGEN_LOG_DIR`` or ``<project>/log``."""

    override = os.environ.get(LOG_DIR_ENV_VAR)
    return Path(override).expanduser() if override else _PACKAGE_ROOT / "log"


class JSONLogFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra: Dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in BATCH_FIELDS:
                if value is not None:
                    payload[key] = value
            elif key not in _RECORD_ATTRIBUTES:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class RunContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _run_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _build_handlers(log_dir: Path) -> List[logging.Handler]:
    log_dir.mkdir(parents=True, exist_ok=True)
    handlers: List[logging.Handler] = [
        RotatingFileHandler(
            log_dir / LOG_FILE_NAME, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
        ),
        logging.StreamHandler(),
    ]
    formatter = JSONLogFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        # Logger-level filters skip records from child loggers.
        handler.addFilter(RunContextFilter())
    return handlers


def get_logger() -> logging.Logger:
    """Return the ``batchgen`` logger, attaching its handlers on first use."""

    global _logger
    if _logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.propagate = False
        for handler in _build_handlers(resolve_log_dir()):
            logger.addHandler(handler)
        _logger = logger
        configure_logging_level(log_level=DEFAULT_LOG_LEVEL)
    return _logger


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int] = None) -> int:
    """Set the logger and handler level; ``debug_enabled`` backs the CLI ``--debug``."""

    if log_level is None:
        log_level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger = get_logger()
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    return log_level


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[Dict[str, object]]:
    """Tag records logged inside the block with ``values`` (``None`` is dropped).

    Yields the merged context; nested blocks override outer keys.
    """

    merged = {**_run_context.get(), **{key: value for key, value in values.items() if value is not None}}
    token = _run_context.set(merged)
    try:
        yield dict(merged)
    finally:
        _run_context.reset(token)


logger = get_logger()
