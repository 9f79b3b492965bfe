"""tagwatch daemon - file watching and serialized ctags reactions."""

from tagwatch.daemon.batch import Batch
from tagwatch.daemon.lifecycle import WatchController, run_watcher
from tagwatch.daemon.orchestrator import BatchOrchestrator
from tagwatch.daemon.reactor import Reactor
from tagwatch.daemon.watcher import FileWatcher

__all__ = [
    "Batch",
    "BatchOrchestrator",
    "FileWatcher",
    "Reactor",
    "WatchController",
    "run_watcher",
]
