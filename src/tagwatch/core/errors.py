"""tagwatch error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Tool (ctags)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004
    CONFIG_INVALID_ROOT = 2005

    # Tool (3xxx)
    TOOL_NOT_FOUND = 3001
    TOOL_DISCOVERY_FAILED = 3002
    TOOL_NO_FILETYPES = 3003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_BATCH_NOT_COMPLETED = 9002


@dataclass(frozen=True, slots=True)
class TagwatchError(Exception):
    """Base error with structured context for logs and CLI output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TagwatchError):
    """Configuration and root declaration errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def invalid_root(cls, root: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_ROOT,
            message=f"Invalid watch root {root!r}: {reason}",
            details={"root": str(root), "reason": reason},
        )


class ToolError(TagwatchError):
    """Errors talking to the ctags executable."""

    @classmethod
    def not_found(cls, command: str) -> "ToolError":
        return cls(
            code=ErrorCode.TOOL_NOT_FOUND,
            message=f"ctags executable not found: {command}",
            details={"command": command},
        )

    @classmethod
    def discovery_failed(cls, command: str, returncode: int, stderr: str) -> "ToolError":
        return cls(
            code=ErrorCode.TOOL_DISCOVERY_FAILED,
            message=f"'{command}' exited with status {returncode} while listing file types",
            details={"command": command, "returncode": returncode, "stderr": stderr},
        )

    @classmethod
    def no_filetypes(cls, command: str) -> "ToolError":
        return cls(
            code=ErrorCode.TOOL_NO_FILETYPES,
            message=f"'{command}' reported no file name patterns",
            details={"command": command},
        )


class InternalError(TagwatchError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def batch_not_completed(cls, batch_id: str) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_BATCH_NOT_COMPLETED,
            message=f"Batch {batch_id} was handled without being completed",
            details={"batch_id": batch_id},
        )
