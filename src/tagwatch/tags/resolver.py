"""Resolve a batch of change events to the projects whose tags need updating."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from tagwatch.tags.ignore import should_ignore
from tagwatch.tags.locator import locate
from tagwatch.tags.models import RootMap

if TYPE_CHECKING:
    from tagwatch.tags.filetypes import FileTypeRegistry

logger = structlog.get_logger()


def resolve(
    events: Iterable[str],
    marker_name: str,
    registry: FileTypeRegistry,
) -> RootMap:
    """Map every relevant event to its nearest marker.

    Events under the same project collapse into a single entry keyed by the
    marker path. Events with no marker above them are dropped.
    """
    roots: RootMap = {}

    for path in events:
        if should_ignore(path, marker_name, registry):
            logger.debug("path_ignored", path=path)
            continue

        resolution = locate(path, marker_name)
        if resolution is None:
            logger.warning("marker_not_found", path=path, marker=marker_name)
            continue

        if resolution.marker_path not in roots:
            logger.debug(
                "root_resolved",
                path=path,
                marker=resolution.marker_path,
                root=resolution.marker_dir,
            )
            roots[resolution.marker_path] = resolution.marker_dir

    return roots
