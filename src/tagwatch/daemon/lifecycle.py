"""Watch lifecycle management."""

from __future__ import annotations

import asyncio
import signal
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from tagwatch.config.models import TagwatchConfig
from tagwatch.daemon.orchestrator import BatchOrchestrator
from tagwatch.daemon.reactor import Reactor
from tagwatch.daemon.watcher import FileWatcher
from tagwatch.tags.filetypes import FileTypeRegistry

logger = structlog.get_logger()


@dataclass
class WatchController:
    """
    Wires the watch components together.

    Components:
    - BatchOrchestrator: resolves roots and runs ctags for one batch
    - Reactor: runs one batch at a time, coalescing the rest
    - FileWatcher: debounced filesystem monitoring
    """

    root: Path
    config: TagwatchConfig
    registry: FileTypeRegistry
    show_progress: bool = True

    orchestrator: BatchOrchestrator = field(init=False)
    reactor: Reactor = field(init=False)
    watcher: FileWatcher = field(init=False)
    _shutdown_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)

    def __post_init__(self) -> None:
        self.orchestrator = BatchOrchestrator(registry=self.registry, tags=self.config.tags)
        self.reactor = Reactor(
            handler=self.orchestrator.handle,
            show_progress=self.show_progress,
        )
        self.watcher = FileWatcher(
            root=self.root,
            on_batch=self.reactor.submit,
            exclude=list(self.config.watch.exclude),
            delay=self.config.watch.delay_sec,
        )

    async def start(self) -> None:
        """Start all watch components."""
        logger.info("watch_starting", root=str(self.root), filetypes=len(self.registry))
        self.reactor.start()
        await self.watcher.start()
        logger.info("watch_started")

    async def stop(self) -> None:
        """Stop the watcher first (no new events), then drain the reactor."""
        logger.info("watch_stopping")
        await self.watcher.stop()
        await self.reactor.stop(timeout=self.config.watch.stop_timeout_sec)
        self._shutdown_event.set()
        logger.info("watch_stopped")

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    def wait_for_shutdown(self) -> asyncio.Event:
        """Get the shutdown event for external coordination."""
        return self._shutdown_event


async def run_watcher(controller: WatchController) -> None:
    """Run *controller* until SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    shutdown = controller.wait_for_shutdown()

    def signal_handler(sig: signal.Signals) -> None:
        logger.info("shutdown_signal_received", signal=sig.name)
        controller.request_shutdown()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler, sig)

    try:
        await controller.start()
        await shutdown.wait()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await controller.stop()
