"""ctags command assembly for resolved project roots."""

from __future__ import annotations

import os
from collections.abc import Iterable

import structlog

from tagwatch.tags.models import Invocation, RootMap

logger = structlog.get_logger()

CHAIN_SEPARATOR = " && "


def normalize_args(ctags_args: str) -> str:
    """Prefix non-empty arguments with one space so they append cleanly."""
    stripped = ctags_args.strip()
    return f" {stripped}" if stripped else ""


def build_invocation(
    marker_path: str,
    marker_dir: str,
    exclude_file_name: str,
    ctags_command: str,
    ctags_args: str,
) -> Invocation:
    """Assemble the ctags run for one root.

    An exclusion list next to the marker is passed with ``--exclude=@``; when
    there is none the run covers the whole directory.
    """
    candidate = f"{marker_dir}{exclude_file_name}"
    exclude_path: str | None = candidate
    if not os.path.isfile(candidate):
        logger.info("exclude_file_missing", path=candidate)
        exclude_path = None

    return Invocation(
        ctags_command=ctags_command,
        ctags_args=normalize_args(ctags_args),
        marker_path=marker_path,
        marker_dir=marker_dir,
        exclude_path=exclude_path,
    )


def build(
    marker_path: str,
    marker_dir: str,
    exclude_file_name: str,
    ctags_command: str,
    ctags_args: str,
) -> str:
    """Command string for one root. See build_invocation()."""
    return build_invocation(
        marker_path, marker_dir, exclude_file_name, ctags_command, ctags_args
    ).render()


def build_all(
    roots: RootMap,
    exclude_file_name: str,
    ctags_command: str,
    ctags_args: str,
) -> list[str]:
    """Command strings for every root, in RootMap order."""
    return [
        build(marker_path, marker_dir, exclude_file_name, ctags_command, ctags_args)
        for marker_path, marker_dir in roots.items()
    ]


def chain(commands: Iterable[str]) -> str:
    """Join commands so each runs only if the previous one succeeded."""
    return CHAIN_SEPARATOR.join(commands)
