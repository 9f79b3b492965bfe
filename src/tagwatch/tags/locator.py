"""Upward search for the marker file that owns a changed path."""

from __future__ import annotations

import os

from tagwatch.core.paths import is_dir_path, join_path, split_path
from tagwatch.tags.models import MarkerResolution


def locate(path: str, marker_name: str) -> MarkerResolution | None:
    """Find the nearest *marker_name* file at or above *path*.

    A file path starts the search in its parent directory; a directory path
    (trailing separator) starts in the directory itself. Each level costs one
    existence check. Returns None when no ancestor holds the marker.
    """
    components = split_path(path)
    if not is_dir_path(path) and components:
        components.pop()

    # The filesystem root itself is never checked
    while components:
        directory = join_path(components)
        candidate = f"{directory}/{marker_name}"
        if os.path.exists(candidate):
            return MarkerResolution(marker_path=candidate, marker_dir=directory + "/")
        components.pop()

    return None
