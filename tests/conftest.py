"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest

from memory_strategy.core.config import Settings
from memory_strategy.domain.models import MemoryRecord
from memory_strategy.domain.models.utils import utc_now
from memory_strategy.services import MemoryStrategyEngine


@pytest.fixture
def settings() -> Settings:
    return Settings(lock_stripes=4)


@pytest.fixture
def engine(settings: Settings) -> MemoryStrategyEngine:
    """Fresh engine per test."""
    return MemoryStrategyEngine(config=settings)


@pytest.fixture
def base_time() -> datetime:
    """Fixed reference point so record ages differ by exact amounts."""
    return utc_now()


@pytest.fixture
def make_record(base_time: datetime) -> Callable[..., MemoryRecord]:
    """Factory for records aged relative to ``base_time``."""

    def _make(
        record_id: str,
        content: str = "",
        *,
        age_days: float = 0.0,
        tags: list[str] | None = None,
        importance: float = 0.5,
        embedding: list[float] | None = None,
        access_count: int = 0,
        consolidated: bool = False,
    ) -> MemoryRecord:
        return MemoryRecord(
            record_id=record_id,
            content=content,
            created_at=base_time - timedelta(days=age_days),
            tags=tags or [],
            importance=importance,
            embedding=embedding,
            access_count=access_count,
            consolidated=consolidated,
        )

    return _make
