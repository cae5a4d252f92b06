"""DTOs for the background track resolution pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from ...domain.shared.exceptions import InvalidOperationError
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.types import NonNegativeInt


class ProgressReport(BaseModel):
    """Snapshot of a resolution batch handed to progress callbacks."""

    model_config = ConfigDict(frozen=True, strict=True)

    resolved: NonNegativeInt
    failed: NonNegativeInt
    queued: NonNegativeInt
    total: NonNegativeInt
    completed: bool = False

    @property
    def remaining(self) -> int:
        return max(self.total - self.resolved - self.failed, 0)


@dataclass
class ResolutionBatch:
    """Mutable counters for one batch of search queries.

    ``resolved`` only grows and ``resolved + failed`` never exceeds the
    number of queries.
    """

    queries: list[str]
    resolved: int = 0
    failed: int = 0
    queued: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def target(self) -> int:
        return len(self.queries)

    @property
    def done(self) -> int:
        return self.resolved + self.failed

    def record_resolved(self) -> None:
        self._check_capacity()
        self.resolved += 1

    def record_failure(self, query: str) -> None:
        self._check_capacity()
        self.failed += 1
        self.failures.append(query)

    def record_queued(self, count: int) -> None:
        if self.queued + count > self.resolved:
            raise InvalidOperationError(
                operation="record_queued",
                current_state=f"resolved={self.resolved}",
                message=ErrorMessages.QUEUED_EXCEEDS_RESOLVED.format(
                    queued=self.queued + count, resolved=self.resolved
                ),
            )
        self.queued += count

    def snapshot(self, completed: bool = False) -> ProgressReport:
        return ProgressReport(
            resolved=self.resolved,
            failed=self.failed,
            queued=self.queued,
            total=self.target,
            completed=completed,
        )

    def _check_capacity(self) -> None:
        if self.done >= self.target:
            raise InvalidOperationError(
                operation="record_result",
                current_state=f"done={self.done}",
                message=ErrorMessages.RESOLVED_EXCEEDS_TARGET.format(
                    done=self.done + 1, target=self.target
                ),
            )
