"""Memory and recall strategy engine.

Episodic memory store with five recall strategies (exact, fuzzy, semantic,
temporal, hybrid), a promote-or-prune consolidation sweep, and per-strategy
performance tracking used to recommend a default strategy.

The engine is an in-process, thread-safe service. The record set lives in a
lock-striped repository; the performance table has one lock per strategy.
No operation performs I/O or retries.
"""

import math
import threading
import time
from datetime import datetime, timedelta
from typing import Any

import logfire

from memory_strategy.core.base import ErrorLevel
from memory_strategy.core.config import Settings
from memory_strategy.core.config import settings as default_settings
from memory_strategy.core.decorators import with_error_handling
from memory_strategy.core.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError
from memory_strategy.core.logging import get_logger, log_context
from memory_strategy.domain.models import (
    ConsolidationResult,
    MemoryRecord,
    MemoryStatistics,
    RecallQuery,
    RecallResult,
    RecallStrategy,
    StrategyPerformance,
)
from memory_strategy.domain.models.utils import clamp_unit, utc_now
from memory_strategy.domain.specifications import (
    CreatedAfterSpecification,
    TagMatchSpecification,
    promotion_specification,
    prune_specification,
)
from memory_strategy.infrastructure.repositories import InMemoryRecordRepository
from memory_strategy.services.scoring import score_candidates

logger = get_logger(__name__)


class MemoryStrategyEngine:
    """Implements the store, recall, consolidation and strategy adaptation ports."""

    def __init__(
        self,
        config: Settings | None = None,
        repository: InMemoryRecordRepository | None = None,
    ):
        self.settings = config or default_settings
        self._records = repository or InMemoryRecordRepository(stripes=self.settings.lock_stripes)
        self._performance: dict[RecallStrategy, StrategyPerformance] = {}
        self._performance_locks = {strategy: threading.Lock() for strategy in RecallStrategy}

    # ------------------ store -------------------

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def store(self, record: MemoryRecord) -> MemoryRecord:
        """Store a new record. Raises DuplicateKeyError instead of overwriting."""
        _require_record(record, "store")

        if not self._records.insert(record):
            raise DuplicateKeyError.for_record(record.record_id)

        logger.info("Stored memory record", record_id=record.record_id, importance=round(record.importance, 2))
        return record.model_copy(deep=True)

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def get(self, record_id: str) -> MemoryRecord | None:
        _require_record_id(record_id, "get")
        return self._records.get(record_id)

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def update(self, record: MemoryRecord) -> MemoryRecord:
        """Replace an existing record in full.

        ``created_at`` is kept from the stored record and a consolidated
        record stays consolidated.
        """
        _require_record(record, "update")

        def build(current: MemoryRecord) -> MemoryRecord:
            return record.model_copy(
                deep=True,
                update={
                    "created_at": current.created_at,
                    "consolidated": current.consolidated or record.consolidated,
                },
            )

        updated = self._records.replace(record.record_id, build)
        if updated is None:
            raise NotFoundError.for_record(record.record_id, action="update")

        logger.info("Updated memory record", record_id=record.record_id)
        return updated

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def delete(self, record_id: str) -> bool:
        _require_record_id(record_id, "delete")

        removed = self._records.remove(record_id)
        if removed:
            logger.info("Deleted memory record", record_id=record_id)
        return removed

    def statistics(self) -> MemoryStatistics:
        records = self._records.snapshot()
        total = len(records)
        return MemoryStatistics(
            total_records=total,
            consolidated_count=sum(1 for record in records if record.consolidated),
            avg_importance=sum(record.importance for record in records) / total if total else 0.0,
            strategy_performance=self._performance_snapshot(),
        )

    # ------------------ recall ------------------

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def recall(self, query: RecallQuery) -> RecallResult:
        """Score, rank and return records for ``query``.

        Returned records have their access statistics bumped; the copies in
        the result reflect the bump.
        """
        _require_query(query)

        with (
            logfire.span("recall {strategy}", strategy=query.strategy.value),
            log_context(operation="recall", strategy=query.strategy.value),
        ):
            started = time.perf_counter()
            now = utc_now()

            candidates = self._records.snapshot()
            if query.time_window is not None:
                in_window = CreatedAfterSpecification.within(query.time_window, now)
                candidates = [record for record in candidates if in_window(record)]
            total_candidates = len(candidates)

            scores = score_candidates(query.strategy, candidates, query, now)
            ranked = sorted(
                ((record_id, score) for record_id, score in scores.items() if score >= query.min_relevance),
                key=lambda item: item[1],
                reverse=True,
            )[: query.max_results]

            records: list[MemoryRecord] = []
            relevance_scores: dict[str, float] = {}
            for record_id, score in ranked:
                touched = self._touch(record_id)
                if touched is None:
                    # Deleted or pruned after the snapshot
                    continue
                records.append(touched)
                relevance_scores[record_id] = score

            result = RecallResult(
                records=records,
                strategy_used=query.strategy,
                query_duration_ms=(time.perf_counter() - started) * 1000.0,
                total_candidates=total_candidates,
                relevance_scores=relevance_scores,
            )

            logger.info(
                "Recall complete",
                returned=len(records),
                candidates=total_candidates,
                duration_ms=round(result.query_duration_ms, 3),
            )
            return result

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def recall_by_tags(self, tags: list[str], max_results: int = 10) -> list[MemoryRecord]:
        """Records sharing any of ``tags``, most matching tags first, then most important."""
        if not tags or any(not isinstance(tag, str) for tag in tags):
            raise InvalidArgumentError.for_field("tags", tags, "must be a non-empty list of strings", "recall_by_tags")
        _require_positive_int("max_results", max_results, "recall_by_tags")

        spec = TagMatchSpecification.of(tags)
        matches = [(record, spec.match_count(record)) for record in self._records.snapshot()]
        ranked = sorted(
            ((record, count) for record, count in matches if count > 0),
            key=lambda item: (item[1], item[0].importance),
            reverse=True,
        )[:max_results]

        results = [touched for record, _ in ranked if (touched := self._touch(record.record_id)) is not None]
        logger.debug("Recalled records by tags", tags=list(tags), returned=len(results))
        return results

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def recall_recent(self, count: int = 10) -> list[MemoryRecord]:
        """Most recently accessed (then created) records. Does not touch access stats."""
        _require_positive_int("count", count, "recall_recent")

        ordered = sorted(
            self._records.snapshot(copy=True),
            key=lambda record: (record.last_accessed_at, record.created_at),
            reverse=True,
        )
        return ordered[:count]

    def _touch(self, record_id: str) -> MemoryRecord | None:
        def bump(record: MemoryRecord) -> bool:
            record.last_accessed_at = utc_now()
            record.access_count += 1
            return True

        outcome = self._records.mutate(record_id, bump)
        return outcome[0] if outcome else None

    # --------------- consolidation --------------

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def consolidate(
        self,
        access_count_threshold: int | None = None,
        importance_threshold: float | None = None,
        prune_age: timedelta | None = None,
    ) -> ConsolidationResult:
        """Promote frequently used important records; prune old unaccessed ones.

        Each record is evaluated against exactly one rule per sweep, promotion
        first. Decisions are taken on a snapshot and confirmed under the
        record's lock before they are applied.
        """
        if access_count_threshold is None:
            access_count_threshold = self.settings.consolidation_access_threshold
        if importance_threshold is None:
            importance_threshold = self.settings.consolidation_importance_threshold
        if prune_age is None:
            prune_age = self.settings.prune_age

        _require_int_at_least("access_count_threshold", access_count_threshold, 0, "consolidate")
        _require_finite("importance_threshold", importance_threshold, "consolidate")
        if not isinstance(prune_age, timedelta) or prune_age < timedelta(0):
            raise InvalidArgumentError.for_field("prune_age", prune_age, "must be a non-negative timedelta", "consolidate")

        with logfire.span("consolidate"), log_context(operation="consolidate"):
            started = time.perf_counter()
            cutoff: datetime = utc_now() - prune_age
            should_promote = promotion_specification(access_count_threshold, importance_threshold)
            should_prune = prune_specification(cutoff)

            def promote(record: MemoryRecord) -> bool:
                if not should_promote(record):
                    return False
                record.consolidated = True
                return True

            promoted = pruned = retained = 0
            for record in self._records.snapshot():
                if should_promote(record):
                    outcome = self._records.mutate(record.record_id, promote)
                    if outcome is None:
                        continue
                    if outcome[1]:
                        promoted += 1
                        logger.debug("Promoted record to long-term memory", record_id=record.record_id)
                    else:
                        retained += 1
                elif should_prune(record):
                    if self._records.remove_if(record.record_id, should_prune):
                        pruned += 1
                        logger.debug("Pruned old unaccessed record", record_id=record.record_id)
                    else:
                        retained += 1
                else:
                    retained += 1

            result = ConsolidationResult(
                promoted_count=promoted,
                pruned_count=pruned,
                retained_count=retained,
                duration_ms=(time.perf_counter() - started) * 1000.0,
            )

            logger.info(
                "Consolidation complete",
                promoted=promoted,
                pruned=pruned,
                retained=retained,
                duration_ms=round(result.duration_ms, 3),
            )
            return result

    # ------------- strategy adaptation ----------

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    def record_performance(
        self,
        strategy: RecallStrategy,
        relevance_score: float,
        latency_ms: float,
        was_hit: bool,
    ) -> StrategyPerformance:
        """Fold one recall outcome into the strategy's running averages."""
        try:
            strategy = RecallStrategy(strategy)
        except ValueError as e:
            raise InvalidArgumentError.for_field("strategy", strategy, "unknown recall strategy", "record_performance") from e
        _require_finite("relevance_score", relevance_score, "record_performance")
        _require_finite("latency_ms", latency_ms, "record_performance")
        if latency_ms < 0:
            raise InvalidArgumentError.for_field("latency_ms", latency_ms, "must be >= 0", "record_performance")

        relevance = clamp_unit(float(relevance_score))
        hit = 1.0 if was_hit else 0.0

        with self._performance_locks[strategy]:
            perf = self._performance.get(strategy) or StrategyPerformance(strategy=strategy)
            n = perf.sample_count
            updated = StrategyPerformance(
                strategy=strategy,
                sample_count=n + 1,
                avg_relevance_score=(perf.avg_relevance_score * n + relevance) / (n + 1),
                avg_latency_ms=(perf.avg_latency_ms * n + float(latency_ms)) / (n + 1),
                hit_rate=(perf.hit_rate * n + hit) / (n + 1),
            )
            self._performance[strategy] = updated

        logger.debug(
            "Recorded strategy performance",
            strategy=strategy.value,
            avg_relevance=round(updated.avg_relevance_score, 3),
            avg_latency_ms=round(updated.avg_latency_ms, 1),
            hit=was_hit,
            samples=updated.sample_count,
        )
        return updated.model_copy()

    def get_best_strategy(self) -> RecallStrategy:
        """Highest hit rate, then highest relevance, then lowest latency. Hybrid when no data."""
        sampled = [perf for perf in self._performance_snapshot().values() if perf.sample_count > 0]
        if not sampled:
            logger.debug("No strategy performance data available; defaulting to hybrid")
            return RecallStrategy.HYBRID

        best = min(sampled, key=lambda perf: (-perf.hit_rate, -perf.avg_relevance_score, perf.avg_latency_ms))
        logger.info("Best strategy recommended", strategy=best.strategy.value, hit_rate=round(best.hit_rate, 3))
        return best.strategy

    def _performance_snapshot(self) -> dict[RecallStrategy, StrategyPerformance]:
        snapshot: dict[RecallStrategy, StrategyPerformance] = {}
        for strategy in RecallStrategy:
            with self._performance_locks[strategy]:
                perf = self._performance.get(strategy)
            if perf is not None:
                snapshot[strategy] = perf.model_copy()
        return snapshot


# ------------------ validation ------------------


def _require_record_id(record_id: Any, operation: str) -> None:
    if not isinstance(record_id, str) or not record_id.strip():
        raise InvalidArgumentError.for_field("record_id", record_id, "must be a non-blank string", operation)


def _require_record(record: Any, operation: str) -> None:
    if not isinstance(record, MemoryRecord):
        raise InvalidArgumentError.for_field("record", record, "must be a MemoryRecord", operation)
    _require_record_id(record.record_id, operation)
    _require_finite("importance", record.importance, operation)


def _require_int_at_least(name: str, value: Any, minimum: int, operation: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidArgumentError.for_field(name, value, f"must be an integer >= {minimum}", operation)


def _require_positive_int(name: str, value: Any, operation: str) -> None:
    _require_int_at_least(name, value, 1, operation)


def _require_finite(name: str, value: Any, operation: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float) or not math.isfinite(value):
        raise InvalidArgumentError.for_field(name, value, "must be a finite number", operation)


def _require_query(query: Any) -> None:
    if not isinstance(query, RecallQuery):
        raise InvalidArgumentError.for_field("query", query, "must be a RecallQuery", "recall")
    _require_positive_int("max_results", query.max_results, "recall")
    _require_finite("min_relevance", query.min_relevance, "recall")
    if query.time_window is not None and query.time_window < timedelta(0):
        raise InvalidArgumentError.for_field("time_window", query.time_window, "must not be negative", "recall")
    if query.strategy in (RecallStrategy.EXACT_MATCH, RecallStrategy.FUZZY_MATCH) and not query.query_text.strip():
        raise InvalidArgumentError.for_field(
            "query_text", query.query_text, f"required for {query.strategy.value}", "recall"
        )
