"""Relevance filter for individual change events."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagwatch.core.paths import basename, is_dir_path

if TYPE_CHECKING:
    from tagwatch.tags.filetypes import FileTypeRegistry


def should_ignore(path: str, marker_name: str, registry: FileTypeRegistry) -> bool:
    """Decide whether a changed *path* can be skipped.

    Rules, first match wins:
    1. Directories are never ignored; adding or removing one changes what
       ``ctags -R`` sees even though it has no extension.
    2. The marker file is always ignored. ctags writes it, and reacting to
       that write would loop forever.
    3. Any other file is ignored unless ctags knows its file name pattern.
    """
    if is_dir_path(path):
        return False

    filename = basename(path)
    if filename == marker_name:
        return True

    return not registry.matches(filename)
