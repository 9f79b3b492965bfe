"""Tests for daemon/reactor.py.

Covers:
- One reaction in flight at a time
- Coalescing of paths submitted during a reaction
- Internal error on handlers that do not complete their batch
- Stop semantics
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from tagwatch.daemon.batch import Batch
from tagwatch.daemon.reactor import Reactor, ReactorState
from tagwatch.tags.models import BatchOutcome, BatchResult


class RecordingHandler:
    """Completes every batch with SKIPPED, optionally blocking first."""

    def __init__(self) -> None:
        self.batches: list[list[str]] = []
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()
        self.done = asyncio.Event()
        self.active = 0
        self.max_active = 0

    async def __call__(self, batch: Batch) -> BatchResult:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.batches.append(batch.paths)
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        result = BatchResult(outcome=BatchOutcome.SKIPPED, roots={})
        batch.complete(result)
        self.active -= 1
        self.done.set()
        return result


async def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def poll() -> None:
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout=timeout)


class TestReactor:
    @pytest.mark.asyncio
    async def test_initial_state(self) -> None:
        reactor = Reactor(handler=RecordingHandler(), show_progress=False)
        assert reactor.status.state == ReactorState.STOPPED
        reactor.start()
        assert reactor.status.state == ReactorState.IDLE
        await reactor.stop()
        assert reactor.status.state == ReactorState.STOPPED

    @pytest.mark.asyncio
    async def test_submitted_paths_become_a_batch(self) -> None:
        handler = RecordingHandler()
        reactor = Reactor(handler=handler, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c", "/r/b.c"])
        await asyncio.wait_for(handler.done.wait(), timeout=2.0)
        await reactor.stop()

        assert handler.batches == [["/r/a.c", "/r/b.c"]]
        assert reactor.status.last_result is not None
        assert reactor.status.last_result.outcome == BatchOutcome.SKIPPED

    @pytest.mark.asyncio
    async def test_paths_during_reaction_coalesce(self) -> None:
        handler = RecordingHandler()
        handler.gate = asyncio.Event()
        reactor = Reactor(handler=handler, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c"])
        await asyncio.wait_for(handler.entered.wait(), timeout=2.0)
        assert reactor.status.state == ReactorState.REACTING

        reactor.submit(["/r/b.c"])
        reactor.submit(["/r/c.c", "/r/b.c"])
        assert reactor.status.queue_size == 2

        handler.gate.set()
        await _wait_for(lambda: len(handler.batches) == 2 and handler.active == 0)
        await reactor.stop()

        assert handler.batches == [["/r/a.c"], ["/r/b.c", "/r/c.c"]]
        assert handler.max_active == 1

    @pytest.mark.asyncio
    async def test_uncompleted_batch_is_internal_error(self) -> None:
        calls: list[Batch] = []

        async def forgetful(batch: Batch) -> BatchResult:
            calls.append(batch)
            return BatchResult(outcome=BatchOutcome.SKIPPED, roots={})

        reactor = Reactor(handler=forgetful, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c"])
        await _wait_for(lambda: reactor.status.last_error is not None)
        assert "without being completed" in (reactor.status.last_error or "")

        # The loop keeps going after the failure
        reactor.submit(["/r/b.c"])
        await _wait_for(lambda: len(calls) == 2)
        await reactor.stop()

    @pytest.mark.asyncio
    async def test_handler_exception_does_not_stop_loop(self) -> None:
        calls = 0

        async def flaky(batch: Batch) -> BatchResult:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("boom")
            result = BatchResult(outcome=BatchOutcome.SKIPPED, roots={})
            batch.complete(result)
            return result

        reactor = Reactor(handler=flaky, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c"])
        await _wait_for(lambda: reactor.status.last_error == "boom")
        reactor.submit(["/r/b.c"])
        await _wait_for(lambda: reactor.status.last_result is not None)
        await reactor.stop()

        assert calls == 2

    @pytest.mark.asyncio
    async def test_on_complete_callback(self) -> None:
        seen: list[BatchResult] = []

        async def on_complete(result: BatchResult) -> None:
            seen.append(result)

        reactor = Reactor(handler=RecordingHandler(), show_progress=False)
        reactor.set_on_complete(on_complete)
        reactor.start()
        reactor.submit(["/r/a.c"])
        await _wait_for(lambda: len(seen) == 1)
        await reactor.stop()

    @pytest.mark.asyncio
    async def test_stop_cancels_after_timeout(self) -> None:
        handler = RecordingHandler()
        handler.gate = asyncio.Event()
        reactor = Reactor(handler=handler, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c"])
        await asyncio.wait_for(handler.entered.wait(), timeout=2.0)
        reactor.submit(["/r/b.c"])
        await reactor.stop(timeout=0.05)

        assert reactor.status.state == ReactorState.STOPPED
        assert handler.batches == [["/r/a.c"]]

    @pytest.mark.asyncio
    async def test_stop_runs_pending_paths_as_final_batch(self) -> None:
        """Paths submitted right before stop are handled, not dropped."""
        handler = RecordingHandler()
        reactor = Reactor(handler=handler, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c"])
        await reactor.stop()

        assert handler.batches == [["/r/a.c"]]
        assert reactor.status.queue_size == 0
        assert reactor.status.state == ReactorState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_during_reaction_drains_next_batch(self) -> None:
        handler = RecordingHandler()
        handler.gate = asyncio.Event()
        reactor = Reactor(handler=handler, show_progress=False)
        reactor.start()

        reactor.submit(["/r/a.c"])
        await asyncio.wait_for(handler.entered.wait(), timeout=2.0)
        reactor.submit(["/r/b.c"])

        stopping = asyncio.create_task(reactor.stop(timeout=2.0))
        await asyncio.sleep(0)
        handler.gate.set()
        await stopping

        assert handler.batches == [["/r/a.c"], ["/r/b.c"]]
        assert handler.max_active == 1
