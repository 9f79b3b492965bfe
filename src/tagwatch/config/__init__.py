"""Config module exports."""

from tagwatch.config.loader import load_config
from tagwatch.config.models import (
    LoggingConfig,
    TagsConfig,
    TagwatchConfig,
    WatchConfig,
)
from tagwatch.config.root_decl import load_root_declaration, validate_root

__all__ = [
    "load_config",
    "load_root_declaration",
    "validate_root",
    "TagwatchConfig",
    "LoggingConfig",
    "TagsConfig",
    "WatchConfig",
]
