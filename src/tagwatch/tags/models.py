"""Tags models - marker resolutions, invocations and batch outcomes."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum

# Marker file path -> marker directory (trailing "/"). One entry per distinct
# marker; insertion order follows the first event that resolved to it.
RootMap = dict[str, str]


@dataclass(frozen=True)
class MarkerResolution:
    """Nearest marker file above a changed path."""

    marker_path: str
    marker_dir: str  # always ends with "/"


@dataclass(frozen=True)
class Invocation:
    """A fully assembled ctags run for one project root."""

    ctags_command: str
    ctags_args: str  # empty, or starts with a space
    marker_path: str
    marker_dir: str
    exclude_path: str | None = None

    def render(self) -> str:
        """Render as one shell command string."""
        args = self.ctags_args
        if self.exclude_path is not None:
            args += f" --exclude=@{shlex.quote(self.exclude_path)}"
        return (
            f"{self.ctags_command}{args}"
            f" -f {shlex.quote(self.marker_path)}"
            f" -R {shlex.quote(self.marker_dir)}"
        )


class BatchOutcome(Enum):
    """How a batch was completed."""

    UPDATED = "updated"  # ctags chain exited 0
    SKIPPED = "skipped"  # no project affected, explicit no-op completion
    FAILED = "failed"  # ctags chain exited non-zero or could not start


@dataclass(frozen=True)
class BatchResult:
    """Result of handling one batch."""

    outcome: BatchOutcome
    roots: RootMap
    command: str | None = None
    returncode: int | None = None
    duration_seconds: float = 0.0
    error_detail: str | None = None
