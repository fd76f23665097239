"""Port protocols exposed to the host service layer."""

from datetime import timedelta
from typing import Protocol, runtime_checkable

from memory_strategy.domain.models import (
    ConsolidationResult,
    MemoryRecord,
    MemoryStatistics,
    RecallQuery,
    RecallResult,
    RecallStrategy,
    StrategyPerformance,
)


@runtime_checkable
class MemoryStorePort(Protocol):
    """CRUD over memory records."""

    def store(self, record: MemoryRecord) -> MemoryRecord:
        """Store a new record; raises DuplicateKeyError if the id exists."""
        ...

    def get(self, record_id: str) -> MemoryRecord | None:
        ...

    def update(self, record: MemoryRecord) -> MemoryRecord:
        """Replace an existing record; raises NotFoundError if absent."""
        ...

    def delete(self, record_id: str) -> bool:
        ...

    def statistics(self) -> MemoryStatistics:
        ...


@runtime_checkable
class RecallPort(Protocol):
    """Ranked retrieval of memory records."""

    def recall(self, query: RecallQuery) -> RecallResult:
        ...

    def recall_by_tags(self, tags: list[str], max_results: int = 10) -> list[MemoryRecord]:
        ...

    def recall_recent(self, count: int = 10) -> list[MemoryRecord]:
        ...


@runtime_checkable
class ConsolidationPort(Protocol):
    """Promote-or-prune sweeps over the record population."""

    def consolidate(
        self,
        access_count_threshold: int | None = None,
        importance_threshold: float | None = None,
        prune_age: timedelta | None = None,
    ) -> ConsolidationResult:
        ...


@runtime_checkable
class StrategyAdaptationPort(Protocol):
    """Feedback loop for choosing a recall strategy."""

    def get_best_strategy(self) -> RecallStrategy:
        ...

    def record_performance(
        self,
        strategy: RecallStrategy,
        relevance_score: float,
        latency_ms: float,
        was_hit: bool,
    ) -> StrategyPerformance:
        ...


__all__ = ["ConsolidationPort", "MemoryStorePort", "RecallPort", "StrategyAdaptationPort"]
