"""Domain models for the memory strategy engine."""

from .analysis import ConsolidationResult, MemoryStatistics, StrategyPerformance
from .memory import MemoryRecord
from .recall import RecallQuery, RecallResult, RecallStrategy

__all__ = [
    # Reporting
    "ConsolidationResult",
    # Memory
    "MemoryRecord",
    "MemoryStatistics",
    # Recall
    "RecallQuery",
    "RecallResult",
    "RecallStrategy",
    "StrategyPerformance",
]
