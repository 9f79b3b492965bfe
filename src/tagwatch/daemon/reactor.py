"""Single-slot reaction runner: one batch in flight, the rest coalesce."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

import structlog

from tagwatch.config.constants import MAX_PROCESSES
from tagwatch.core.errors import InternalError
from tagwatch.core.logging import clear_batch_id, set_batch_id
from tagwatch.core.progress import pluralize, spinner, status
from tagwatch.daemon.batch import Batch
from tagwatch.tags.models import BatchOutcome, BatchResult

logger = structlog.get_logger()


class ReactorState(Enum):
    """Reactor state."""

    IDLE = "idle"
    REACTING = "reacting"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass
class ReactorStatus:
    """Current reactor status."""

    state: ReactorState
    queue_size: int
    last_result: BatchResult | None = None
    last_error: str | None = None


@dataclass
class Reactor:
    """
    Runs batch handlers strictly one at a time.

    Design:
    - The watcher submits debounced path sets; they accumulate in a pending set
    - A single loop task takes everything pending as one batch and awaits
      the handler, so at most MAX_PROCESSES (one) reaction is in flight
    - Paths submitted while a reaction runs become the next batch
    - On stop, paths still pending run as one final batch
    - A handler that returns without completing its batch is an internal
      error; a failed reaction never stops the loop
    """

    handler: Callable[[Batch], Awaitable[BatchResult]]
    show_progress: bool = True

    _state: ReactorState = field(default=ReactorState.STOPPED, init=False)
    _pending_paths: dict[str, None] = field(default_factory=dict, init=False)
    _wakeup: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _last_result: BatchResult | None = field(default=None, init=False)
    _last_error: str | None = field(default=None, init=False)
    _on_complete: Callable[[BatchResult], Awaitable[None]] | None = field(default=None, init=False)

    def start(self) -> None:
        """Start the reaction loop."""
        if self._task is not None:
            return
        self._state = ReactorState.IDLE
        self._task = asyncio.create_task(self._run_loop())
        logger.info("reactor_started", max_processes=MAX_PROCESSES)

    async def stop(self, timeout: float = 2.0) -> None:
        """Stop after the in-flight reaction and one final batch of pending paths.

        Whatever is still running after *timeout* seconds is cancelled.
        """
        self._state = ReactorState.STOPPING
        self._wakeup.set()

        if self._task is not None:
            try:
                await asyncio.wait_for(asyncio.shield(self._task), timeout=timeout)
            except TimeoutError:
                logger.warning("reactor_stop_timeout", timeout=timeout)
                self._task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._task
            self._task = None

        self._state = ReactorState.STOPPED
        logger.info("reactor_stopped", dropped_paths=len(self._pending_paths))

    def submit(self, paths: list[str]) -> None:
        """Queue change events for the next batch."""
        for path in paths:
            self._pending_paths.setdefault(path, None)
        logger.debug("paths_queued", new_paths=len(paths), total_pending=len(self._pending_paths))
        self._wakeup.set()

    async def _run_loop(self) -> None:
        while self._state != ReactorState.STOPPING:
            await self._wakeup.wait()
            self._wakeup.clear()

            while self._pending_paths and self._state != ReactorState.STOPPING:
                await self._react(self._take_batch())

        # Changes flushed by the watcher on shutdown still get one last run
        if self._pending_paths:
            await self._react(self._take_batch())

    def _take_batch(self) -> Batch:
        paths = list(self._pending_paths)
        self._pending_paths.clear()
        return Batch(paths=paths)

    async def _react(self, batch: Batch) -> None:
        set_batch_id(batch.batch_id)
        if self._state == ReactorState.IDLE:
            self._state = ReactorState.REACTING
        try:
            if self.show_progress:
                with spinner(f"Checking {pluralize(len(batch.paths), 'changed path')}"):
                    result = await self.handler(batch)
            else:
                result = await self.handler(batch)

            if not batch.completed:
                raise InternalError.batch_not_completed(batch.batch_id)

            self._last_result = result
            self._last_error = result.error_detail
            if self.show_progress:
                _report(result)

            if self._on_complete is not None:
                await self._on_complete(result)

        except Exception as e:
            self._last_error = str(e)
            logger.error("reaction_failed", error=str(e))

        finally:
            if self._state == ReactorState.REACTING:
                self._state = ReactorState.IDLE
            clear_batch_id()

    def set_on_complete(self, callback: Callable[[BatchResult], Awaitable[None]]) -> None:
        """Set callback to invoke after every completed batch."""
        self._on_complete = callback

    @property
    def status(self) -> ReactorStatus:
        return ReactorStatus(
            state=self._state,
            queue_size=len(self._pending_paths),
            last_result=self._last_result,
            last_error=self._last_error,
        )


def _report(result: BatchResult) -> None:
    """One console line per completed batch."""
    projects = pluralize(len(result.roots), "project")
    if result.outcome == BatchOutcome.UPDATED:
        status(f"Updated tags for {projects} in {result.duration_seconds:.2f}s", style="success")
    elif result.outcome == BatchOutcome.FAILED:
        status(f"ctags failed for {projects} (exit {result.returncode})", style="error")
    else:
        status("No tags files affected", style="info")
