"""Engine configuration loader and validation utilities."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Mapping, MutableMapping, Optional

import yaml

_DEFAULT_ENGINE_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "conf" / "engine.yaml"

BACKOFF_ENV_VAR = "BATCHGEN_BACKOFF"
_BACKOFF_CHOICES = frozenset({"fixed", "progressive"})

_DEFAULT_CONFIG = {
    "max_attempts": 3,
    "backoff": "fixed",
    "retry_delay_seconds": 1.0,
    "progressive_step_seconds": 10.0,
    "inter_item_delay_seconds": 1.0,
    "chars_per_subtitle": 500,
    "display_seconds": 29.0,
    "pause_seconds": 1.0,
    "continuation_tail_chars": 500,
}


def _coerce_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a positive integer, not a boolean")
    if isinstance(value, int):
        candidate = value
    elif isinstance(value, str) and value.strip():
        if not value.strip().isdigit():
            raise ValueError(f"{name} must be a positive integer")
        candidate = int(value.strip())
    else:
        raise ValueError(f"{name} must be a positive integer")
    if candidate <= 0:
        raise ValueError(f"{name} must be greater than zero")
    return candidate


def _coerce_seconds(name: str, value: Any, *, allow_zero: bool = True) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number of seconds, not a boolean")
    try:
        candidate = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number of seconds") from None
    if candidate < 0 or (not allow_zero and candidate == 0):
        bound = "non-negative" if allow_zero else "greater than zero"
        raise ValueError(f"{name} must be {bound}")
    return candidate


def _coerce_backoff_name(name: str, value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in _BACKOFF_CHOICES:
        return value.strip().lower()
    choices = ", ".join(sorted(_BACKOFF_CHOICES))
    raise ValueError(f"{name} must be one of: {choices}")


def _normalise_payload(data: Mapping[str, Any] | None) -> MutableMapping[str, Any]:
    payload: MutableMapping[str, Any] = dict(_DEFAULT_CONFIG)
    if not data:
        return payload
    for key, value in data.items():
        if key not in payload:
            continue
        payload[key] = value
    return payload


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Validated batch engine configuration values."""

    max_attempts: int
    backoff: str
    retry_delay_seconds: float
    progressive_step_seconds: float
    inter_item_delay_seconds: float
    chars_per_subtitle: int
    display_seconds: float
    pause_seconds: float
    continuation_tail_chars: int

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "EngineConfig":
        normalised = _normalise_payload(payload)
        env_backoff = os.environ.get(BACKOFF_ENV_VAR)
        selected_backoff = env_backoff if env_backoff else normalised["backoff"]
        return cls(
            max_attempts=_coerce_positive_int("max_attempts", normalised["max_attempts"]),
            backoff=_coerce_backoff_name("backoff", selected_backoff),
            retry_delay_seconds=_coerce_seconds(
                "retry_delay_seconds", normalised["retry_delay_seconds"]
            ),
            progressive_step_seconds=_coerce_seconds(
                "progressive_step_seconds", normalised["progressive_step_seconds"]
            ),
            inter_item_delay_seconds=_coerce_seconds(
                "inter_item_delay_seconds", normalised["inter_item_delay_seconds"]
            ),
            chars_per_subtitle=_coerce_positive_int(
                "chars_per_subtitle", normalised["chars_per_subtitle"]
            ),
            display_seconds=_coerce_seconds(
                "display_seconds", normalised["display_seconds"], allow_zero=False
            ),
            pause_seconds=_coerce_seconds("pause_seconds", normalised["pause_seconds"]),
            continuation_tail_chars=_coerce_positive_int(
                "continuation_tail_chars", normalised["continuation_tail_chars"]
            ),
        )

    def build_backoff(self) -> Callable[[int], float]:
        """Return the backoff schedule selected by :attr:`backoff`."""

        from batchgen.batch.backoff import fixed_backoff, progressive_backoff

        if self.backoff == "progressive":
            return progressive_backoff(self.progressive_step_seconds)
        return fixed_backoff(self.retry_delay_seconds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_attempts": self.max_attempts,
            "backoff": self.backoff,
            "retry_delay_seconds": self.retry_delay_seconds,
            "progressive_step_seconds": self.progressive_step_seconds,
            "inter_item_delay_seconds": self.inter_item_delay_seconds,
            "chars_per_subtitle": self.chars_per_subtitle,
            "display_seconds": self.display_seconds,
            "pause_seconds": self.pause_seconds,
            "continuation_tail_chars": self.continuation_tail_chars,
        }


def load_engine_config(path: Optional[Path | str] = None) -> EngineConfig:
    """Load and validate the engine configuration from disk."""

    config_path = Path(path) if path else _DEFAULT_ENGINE_CONFIG_PATH
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw_data = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        raw_data = {}
    if not isinstance(raw_data, Mapping):
        raise ValueError(f"{config_path} must contain a mapping of settings")
    return EngineConfig.from_mapping(raw_data)


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    """Return the cached engine configuration."""

    return load_engine_config()


__all__ = ["BACKOFF_ENV_VAR", "EngineConfig", "get_engine_config", "load_engine_config"]
