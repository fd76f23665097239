"""Reporting models: strategy telemetry, consolidation and store statistics."""

from pydantic import BaseModel, Field

from .recall import RecallStrategy


class StrategyPerformance(BaseModel):
    """Running statistics for one recall strategy."""

    strategy: RecallStrategy
    sample_count: int = 0
    avg_relevance_score: float = 0.0
    avg_latency_ms: float = 0.0
    hit_rate: float = 0.0


class ConsolidationResult(BaseModel):
    """Report of a single consolidation sweep."""

    promoted_count: int = 0
    pruned_count: int = 0
    retained_count: int = 0
    duration_ms: float = 0.0


class MemoryStatistics(BaseModel):
    """Point-in-time summary of the record store."""

    total_records: int = 0
    consolidated_count: int = 0
    avg_importance: float = 0.0
    strategy_performance: dict[RecallStrategy, StrategyPerformance] = Field(default_factory=dict)
