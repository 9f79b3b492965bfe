"""Batches of change events handed from the runtime to a handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from tagwatch.core.errors import InternalError
from tagwatch.tags.models import BatchResult


@dataclass
class Batch:
    """One coalesced burst of change events.

    A batch stays in flight until its handler calls complete(). That holds
    for batches that needed no work too: handlers must complete them with a
    SKIPPED result rather than just returning.
    """

    paths: list[str]
    batch_id: str = field(default_factory=lambda: uuid4().hex[:8])
    _result: BatchResult | None = field(default=None, init=False, repr=False)

    @property
    def completed(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> BatchResult | None:
        return self._result

    def complete(self, result: BatchResult) -> None:
        """Acknowledge the batch. A batch can only be completed once."""
        if self._result is not None:
            raise InternalError.unexpected("batch completed twice", batch_id=self.batch_id)
        self._result = result
