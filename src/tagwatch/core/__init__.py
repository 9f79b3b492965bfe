"""Core module exports."""

from tagwatch.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    TagwatchError,
    ToolError,
)
from tagwatch.core.logging import (
    clear_batch_id,
    configure_logging,
    get_batch_id,
    get_logger,
    set_batch_id,
)
from tagwatch.core.progress import spinner, status

__all__ = [
    # Errors
    "TagwatchError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ToolError",
    # Logging
    "clear_batch_id",
    "configure_logging",
    "get_batch_id",
    "get_logger",
    "set_batch_id",
    # Progress
    "spinner",
    "status",
]
