"""Per-batch orchestration: resolve roots, build commands, run ctags."""

from __future__ import annotations

import asyncio
import contextlib
import time
from dataclasses import dataclass

import structlog

from tagwatch.config.constants import STDERR_TAIL_CHARS
from tagwatch.config.models import TagsConfig
from tagwatch.daemon.batch import Batch
from tagwatch.tags.filetypes import FileTypeRegistry
from tagwatch.tags.invocation import build_all, chain
from tagwatch.tags.models import BatchOutcome, BatchResult, RootMap
from tagwatch.tags.resolver import resolve

logger = structlog.get_logger()


@dataclass
class BatchOrchestrator:
    """
    Turns a batch of change events into at most one ctags command chain.

    Every batch ends in exactly one of two ways:
    - work: some project is affected. One ctags run per marker, joined with
      ``&&`` so they run one after another and stop at the first failure.
    - empty: nothing is affected. The batch is still completed explicitly
      (SKIPPED); a runtime waiting for acknowledgement would stall otherwise.

    The registry is shared read-only; no other state survives a batch.
    """

    registry: FileTypeRegistry
    tags: TagsConfig

    def plan(self, paths: list[str]) -> tuple[RootMap, str | None]:
        """Resolve *paths* and build the chained command without running it."""
        roots = resolve(paths, self.tags.tags_file, self.registry)
        if not roots:
            return roots, None
        commands = build_all(
            roots,
            self.tags.exclude_file,
            self.tags.ctags_command,
            self.tags.ctags_args,
        )
        return roots, chain(commands)

    async def handle(self, batch: Batch) -> BatchResult:
        """Process *batch* and complete it."""
        logger.info("batch_received", paths=len(batch.paths))
        roots, command = self.plan(batch.paths)

        if command is None:
            logger.info("batch_skipped", reason="no_tags_files_affected")
            result = BatchResult(outcome=BatchOutcome.SKIPPED, roots=roots)
        else:
            result = await self._execute(command, roots)

        batch.complete(result)
        return result

    async def _execute(self, command: str, roots: RootMap) -> BatchResult:
        logger.info("ctags_command", command=command, roots=len(roots))
        start_time = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("ctags_spawn_failed", error=str(e))
            return BatchResult(
                outcome=BatchOutcome.FAILED,
                roots=roots,
                command=command,
                duration_seconds=time.monotonic() - start_time,
                error_detail=str(e),
            )

        try:
            _stdout, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            # Shutdown mid-run: don't leave ctags writing half a tags file
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise

        duration = time.monotonic() - start_time
        stderr = stderr_bytes.decode(errors="replace")[-STDERR_TAIL_CHARS:]

        if proc.returncode != 0:
            logger.error(
                "ctags_failed",
                returncode=proc.returncode,
                stderr=stderr,
                duration_seconds=round(duration, 3),
            )
            return BatchResult(
                outcome=BatchOutcome.FAILED,
                roots=roots,
                command=command,
                returncode=proc.returncode,
                duration_seconds=duration,
                error_detail=stderr or f"exit status {proc.returncode}",
            )

        logger.info("ctags_done", roots=len(roots), duration_seconds=round(duration, 3))
        return BatchResult(
            outcome=BatchOutcome.UPDATED,
            roots=roots,
            command=command,
            returncode=0,
            duration_seconds=duration,
        )
