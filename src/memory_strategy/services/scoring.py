"""Relevance scoring for the recall strategies.

Each scorer takes the candidate records and returns an insertion-ordered
mapping of record id to a score in [0.0, 1.0]. Records a scorer has no
signal for are left out of its mapping.
"""

from collections.abc import Sequence
from datetime import datetime

from memory_strategy.domain.models import MemoryRecord, RecallQuery, RecallStrategy
from memory_strategy.domain.models.utils import clamp_unit, utc_now
from memory_strategy.domain.similarity import cosine_similarity, fuzzy_similarity

ScoreMap = dict[str, float]

EXACT_CONTENT_SCORE = 1.0
EXACT_TAG_SCORE = 0.9
CONTAINS_SCORE = 0.7

HYBRID_WEIGHTS: dict[RecallStrategy, float] = {
    RecallStrategy.EXACT_MATCH: 0.30,
    RecallStrategy.FUZZY_MATCH: 0.25,
    RecallStrategy.SEMANTIC_SIMILARITY: 0.30,
    RecallStrategy.TEMPORAL_PROXIMITY: 0.15,
}


def score_exact_match(candidates: Sequence[MemoryRecord], query_text: str) -> ScoreMap:
    """1.0 for equal content, 0.9 for an equal tag, 0.7 for containment (case-insensitive)."""
    needle = query_text.lower()
    scores: ScoreMap = {}

    for record in candidates:
        content = record.content.lower()
        if content == needle:
            scores[record.record_id] = EXACT_CONTENT_SCORE
        elif any(tag.lower() == needle for tag in record.tags):
            scores[record.record_id] = EXACT_TAG_SCORE
        elif needle in content:
            scores[record.record_id] = CONTAINS_SCORE

    return scores


def score_fuzzy_match(candidates: Sequence[MemoryRecord], query_text: str) -> ScoreMap:
    scores: ScoreMap = {}
    for record in candidates:
        similarity = fuzzy_similarity(query_text, record.content)
        if similarity > 0:
            scores[record.record_id] = clamp_unit(similarity)
    return scores


def score_semantic_similarity(
    candidates: Sequence[MemoryRecord],
    query_embedding: Sequence[float] | None,
) -> ScoreMap:
    """Cosine similarity rescaled from [-1, 1] to [0, 1].

    Records without an embedding, or a query without one, are excluded.
    """
    scores: ScoreMap = {}
    if not query_embedding:
        return scores

    for record in candidates:
        if not record.has_embedding:
            continue
        normalized = (cosine_similarity(query_embedding, record.embedding) + 1.0) / 2.0
        if normalized > 0:
            scores[record.record_id] = clamp_unit(normalized)

    return scores


def score_temporal_proximity(candidates: Sequence[MemoryRecord], now: datetime | None = None) -> ScoreMap:
    """Linear recency over the candidate set.

    The newest candidate scores 1.0 and the oldest 0.0; when every candidate
    has the same age they all score 1.0.
    """
    if not candidates:
        return {}

    now = now or utc_now()
    ages = {record.record_id: abs((now - record.created_at).total_seconds()) for record in candidates}
    youngest = min(ages.values())
    span = max(ages.values()) - youngest
    if span <= 0:
        span = 1.0

    return {record_id: clamp_unit(1.0 - (age - youngest) / span) for record_id, age in ages.items()}


def score_hybrid(
    candidates: Sequence[MemoryRecord],
    query: RecallQuery,
    now: datetime | None = None,
) -> ScoreMap:
    """Weighted sum of the four atomic strategies.

    A missing component contributes 0 to its term; weights are not
    renormalized. A blank query text is scored like any other text, so it
    contains-matches every non-empty content.
    """
    components: dict[RecallStrategy, ScoreMap] = {
        RecallStrategy.EXACT_MATCH: score_exact_match(candidates, query.query_text),
        RecallStrategy.FUZZY_MATCH: score_fuzzy_match(candidates, query.query_text),
        RecallStrategy.SEMANTIC_SIMILARITY: score_semantic_similarity(candidates, query.query_embedding),
        RecallStrategy.TEMPORAL_PROXIMITY: score_temporal_proximity(candidates, now),
    }

    scores: ScoreMap = {}
    for record in candidates:
        total = sum(
            weight * components[strategy].get(record.record_id, 0.0)
            for strategy, weight in HYBRID_WEIGHTS.items()
        )
        if total > 0:
            scores[record.record_id] = clamp_unit(total)

    return scores


def score_candidates(
    strategy: RecallStrategy,
    candidates: Sequence[MemoryRecord],
    query: RecallQuery,
    now: datetime | None = None,
) -> ScoreMap:
    """Score ``candidates`` under ``strategy``."""
    match strategy:
        case RecallStrategy.EXACT_MATCH:
            return score_exact_match(candidates, query.query_text)
        case RecallStrategy.FUZZY_MATCH:
            return score_fuzzy_match(candidates, query.query_text)
        case RecallStrategy.SEMANTIC_SIMILARITY:
            return score_semantic_similarity(candidates, query.query_embedding)
        case RecallStrategy.TEMPORAL_PROXIMITY:
            return score_temporal_proximity(candidates, now)
        case RecallStrategy.HYBRID:
            return score_hybrid(candidates, query, now)
    raise ValueError(f"Unknown recall strategy: {strategy!r}")
