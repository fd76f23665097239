"""Recall query and result models."""

from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, Field

from .memory import MemoryRecord


class RecallStrategy(str, Enum):
    """Closed set of ranking strategies understood by the recall engine."""

    EXACT_MATCH = "exact_match"
    FUZZY_MATCH = "fuzzy_match"
    SEMANTIC_SIMILARITY = "semantic_similarity"
    TEMPORAL_PROXIMITY = "temporal_proximity"
    HYBRID = "hybrid"


class RecallQuery(BaseModel):
    """A recall request.

    ``time_window`` restricts candidates to records created within that span
    before now. Bounds on ``max_results`` and ``min_relevance`` are checked by
    the engine so that violations surface as ``InvalidArgumentError``.
    """

    query_text: str = ""
    query_embedding: list[float] | None = None
    strategy: RecallStrategy = RecallStrategy.HYBRID
    max_results: int = 10
    min_relevance: float = 0.0
    time_window: timedelta | None = None


class RecallResult(BaseModel):
    """Ranked records plus the scores and timing of a single recall."""

    records: list[MemoryRecord] = Field(default_factory=list)
    strategy_used: RecallStrategy
    query_duration_ms: float = 0.0
    total_candidates: int = 0
    relevance_scores: dict[str, float] = Field(default_factory=dict)

    @property
    def record_ids(self) -> list[str]:
        return [record.record_id for record in self.records]

    def __len__(self) -> int:
        return len(self.records)
