"""Change resolution and ctags command assembly."""

from tagwatch.tags.filetypes import FileTypePattern, FileTypeRegistry, parse_list_maps
from tagwatch.tags.ignore import should_ignore
from tagwatch.tags.invocation import build, build_all, build_invocation, chain
from tagwatch.tags.locator import locate
from tagwatch.tags.models import (
    BatchOutcome,
    BatchResult,
    Invocation,
    MarkerResolution,
    RootMap,
)
from tagwatch.tags.resolver import resolve

__all__ = [
    "BatchOutcome",
    "BatchResult",
    "FileTypePattern",
    "FileTypeRegistry",
    "Invocation",
    "MarkerResolution",
    "RootMap",
    "build",
    "build_all",
    "build_invocation",
    "chain",
    "locate",
    "parse_list_maps",
    "resolve",
    "should_ignore",
]
