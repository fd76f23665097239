"""Episodic memory store with adaptive recall strategies."""

from memory_strategy.core.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError
from memory_strategy.domain.models import (
    ConsolidationResult,
    MemoryRecord,
    MemoryStatistics,
    RecallQuery,
    RecallResult,
    RecallStrategy,
    StrategyPerformance,
)
from memory_strategy.services import MemoryStrategyEngine

__version__ = "0.1.0"

__all__ = [
    "ConsolidationResult",
    "DuplicateKeyError",
    "InvalidArgumentError",
    "MemoryRecord",
    "MemoryStatistics",
    "MemoryStrategyEngine",
    "NotFoundError",
    "RecallQuery",
    "RecallResult",
    "RecallStrategy",
    "StrategyPerformance",
]
