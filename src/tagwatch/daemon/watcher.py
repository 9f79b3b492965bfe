"""File watcher using watchfiles for async filesystem monitoring.

Design:
- One recursive awatch over the root
- Runtime exclusion globs drop paths before they are queued
- Sliding-window debounce turns a burst of changes into one batch
- Existing directories are reported with a trailing "/" so the resolver can
  tell them apart from files; deleted paths are reported as files
- Falls back to polling for cross-filesystem roots (WSL /mnt/*, network mounts)
"""

from __future__ import annotations

import asyncio
import contextlib
import fnmatch
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from tagwatch.config.constants import MAX_DEBOUNCE_WAIT_FACTOR
from tagwatch.core.paths import to_event_path

logger = structlog.get_logger()

DEFAULT_DELAY_SEC = 5.0


def _is_cross_filesystem(path: Path) -> bool:
    """Detect if path is on a cross-filesystem mount (WSL /mnt/*, network drives, etc.)."""
    resolved = path.resolve()
    path_str = str(resolved)
    # WSL accessing Windows filesystem: /mnt/c/, /mnt/d/, etc.
    # Must be single letter followed by / (not /mnt/data/ which is a regular mount)
    if (
        path_str.startswith("/mnt/")
        and len(path_str) > 6
        and path_str[5].isalpha()
        and path_str[6] == "/"
    ):
        return True
    return path_str.startswith(("/run/user/", "/media/", "/net/"))


def is_excluded(rel_path: str, patterns: list[str]) -> bool:
    """Check a root-relative POSIX path against runtime exclusion globs.

    ``*`` crosses separators, so ``.*`` drops a dot-prefixed top-level entry
    together with everything below it.
    """
    return any(fnmatch.fnmatchcase(rel_path, pattern) for pattern in patterns)


@dataclass
class FileWatcher:
    """
    Async file watcher with sliding-window debouncing.

    Changes are buffered until ``delay`` seconds pass without a new one, or
    until ``max_debounce_wait`` seconds after the first buffered change,
    then handed to ``on_batch`` as a list of change-event strings.
    """

    root: Path
    on_batch: Callable[[list[str]], None]
    exclude: list[str] = field(default_factory=lambda: [".*"])
    delay: float = DEFAULT_DELAY_SEC
    max_debounce_wait: float | None = None
    poll_interval: float = 1.0  # Seconds between polls (cross-filesystem)

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _debounce_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _is_cross_fs: bool = field(init=False)
    _pending_changes: dict[str, None] = field(default_factory=dict, init=False)
    _last_change_time: float = field(default=0.0, init=False)
    _first_change_time: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.max_debounce_wait is None:
            self.max_debounce_wait = self.delay * MAX_DEBOUNCE_WAIT_FACTOR
        self._is_cross_fs = _is_cross_filesystem(self.root)

    async def start(self) -> None:
        """Start watching for file changes."""
        if self._watch_task is not None:
            return

        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        self._debounce_task = asyncio.create_task(self._debounce_flush_loop())
        logger.info(
            "file_watcher_started",
            root=str(self.root),
            mode="polling" if self._is_cross_fs else "native",
            delay=self.delay,
            exclude=self.exclude,
        )

    async def stop(self) -> None:
        """Stop watching. Pending changes are flushed first."""
        self._stop_event.set()

        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task
        self._debounce_task = None

        if self._pending_changes:
            self._flush_pending()

        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None

        logger.info("file_watcher_stopped")

    def _queue_change(self, event_path: str) -> None:
        """Queue a change for debounced delivery."""
        now = time.monotonic()

        if not self._pending_changes:
            self._first_change_time = now

        self._pending_changes.setdefault(event_path, None)
        self._last_change_time = now

    def _should_flush(self) -> bool:
        if not self._pending_changes:
            return False

        now = time.monotonic()
        time_since_last = now - self._last_change_time
        time_since_first = now - self._first_change_time

        # Flush if quiet window elapsed OR max wait exceeded
        assert self.max_debounce_wait is not None
        return time_since_last >= self.delay or time_since_first >= self.max_debounce_wait

    def _flush_pending(self) -> None:
        if not self._pending_changes:
            return

        paths = list(self._pending_changes)
        self._pending_changes.clear()
        self._first_change_time = 0.0
        self._last_change_time = 0.0

        dirs = sum(1 for p in paths if p.endswith("/"))
        logger.info("changes_detected", count=len(paths), directories=dirs)

        self.on_batch(paths)

    async def _debounce_flush_loop(self) -> None:
        """Background task that flushes when the quiet window elapses."""
        tick = min(0.1, self.delay / 2)
        while not self._stop_event.is_set():
            await asyncio.sleep(tick)
            if self._should_flush():
                self._flush_pending()

    async def _watch_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    async for changes in awatch(
                        self.root,
                        # exclusion globs are the only runtime filter
                        watch_filter=None,
                        step=50,
                        rust_timeout=10_000,
                        stop_event=self._stop_event,
                        ignore_permission_denied=True,
                        force_polling=self._is_cross_fs,
                        poll_delay_ms=int(self.poll_interval * 1000),
                    ):
                        self._handle_changes(changes)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    if self._stop_event.is_set():
                        return
                    logger.error("watcher_error", error=str(e))
                    # Brief backoff before retry
                    await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            pass

    def _handle_changes(self, changes: set[tuple[Change, str]]) -> None:
        """Filter a raw watchfiles change set and queue what survives."""
        for change_type, path_str in changes:
            path = Path(path_str)
            try:
                rel_path = path.relative_to(self.root)
            except ValueError:
                continue

            rel = rel_path.as_posix()
            if rel in ("", ".") or is_excluded(rel, self.exclude):
                logger.debug("path_excluded", path=rel)
                continue

            is_dir = change_type != Change.deleted and path.is_dir()
            event_path = to_event_path(path, is_dir=is_dir)
            self._queue_change(event_path)
            logger.debug("path_queued", path=event_path, change_type=change_type.name)
