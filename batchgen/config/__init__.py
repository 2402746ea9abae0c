"""Configuration helpers for the batch engine."""

from .loader import EngineConfig, get_engine_config, load_engine_config

__all__ = [
    "EngineConfig",
    "get_engine_config",
    "load_engine_config",
]
