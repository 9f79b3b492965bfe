"""Path string helpers for change events.

Change events are plain absolute path strings. A trailing separator marks a
directory, so these helpers work on strings rather than ``pathlib.Path``
(which would drop that trailing separator).
"""

from __future__ import annotations

import os
import re

_SEPARATORS = re.compile(r"[\\/]+")


def split_path(path: str) -> list[str]:
    """Split *path* into its non-empty components.

    Runs of separators collapse, and both ``/`` and ``\\`` count as one.

    >>> split_path("/repo//src/a.c")
    ['repo', 'src', 'a.c']
    """
    return [part for part in _SEPARATORS.split(path) if part]


def join_path(components: list[str]) -> str:
    """Join components back into an absolute path without a trailing separator."""
    return "/" + "/".join(components)


def is_dir_path(path: str) -> bool:
    """True when *path* denotes a directory (ends with a separator)."""
    return path.endswith(("/", "\\"))


def as_dir_path(path: str) -> str:
    """Normalize *path* to end with exactly one ``/``."""
    return path.rstrip("/\\") + "/"


def basename(path: str) -> str:
    """Last path component, or ``""`` for the filesystem root."""
    components = split_path(path)
    return components[-1] if components else ""


def to_event_path(path: str | os.PathLike[str], *, is_dir: bool | None = None) -> str:
    """Render a filesystem path as a change-event string.

    When *is_dir* is ``None`` the filesystem is consulted; paths that no longer
    exist (deletions) are treated as files.
    """
    text = os.path.abspath(os.fspath(path))
    if is_dir is None:
        is_dir = os.path.isdir(text)
    return as_dir_path(text) if is_dir else text.rstrip("/\\")
