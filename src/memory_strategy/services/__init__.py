"""Service layer: strategy scoring and the memory strategy engine."""

from .memory_strategy_engine import MemoryStrategyEngine
from .scoring import HYBRID_WEIGHTS, score_candidates

__all__ = ["HYBRID_WEIGHTS", "MemoryStrategyEngine", "score_candidates"]
