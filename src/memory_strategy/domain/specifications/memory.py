"""Memory-record specifications used by recall filtering and consolidation."""

from datetime import datetime, timedelta
from typing import Literal

from pydantic import Field

from memory_strategy.domain.models.memory import MemoryRecord
from memory_strategy.domain.models.utils import ensure_utc, utc_now
from memory_strategy.domain.specifications.composite import BaseSpecification


class CreatedAfterSpecification(BaseSpecification):
    """Records created at or after ``cutoff``."""

    type: Literal["created_after"] = "created_after"
    cutoff: datetime

    @classmethod
    def within(cls, window: timedelta, now: datetime | None = None) -> "CreatedAfterSpecification":
        return cls(cutoff=(now or utc_now()) - window)

    def is_satisfied_by(self, entity: MemoryRecord) -> bool:
        return entity.created_at >= ensure_utc(self.cutoff)


class CreatedBeforeSpecification(BaseSpecification):
    """Records created strictly before ``cutoff``."""

    type: Literal["created_before"] = "created_before"
    cutoff: datetime

    def is_satisfied_by(self, entity: MemoryRecord) -> bool:
        return entity.created_at < ensure_utc(self.cutoff)


class TagMatchSpecification(BaseSpecification):
    """Records sharing at least one tag with ``tags`` (case-insensitive)."""

    type: Literal["tags"] = "tags"
    tags: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def of(cls, tags: list[str]) -> "TagMatchSpecification":
        return cls(tags=frozenset(tag.casefold() for tag in tags))

    def match_count(self, entity: MemoryRecord) -> int:
        return sum(1 for tag in entity.tags if tag.casefold() in self.tags)

    def is_satisfied_by(self, entity: MemoryRecord) -> bool:
        return self.match_count(entity) > 0


class ConsolidatedSpecification(BaseSpecification):
    type: Literal["consolidated"] = "consolidated"

    def is_satisfied_by(self, entity: MemoryRecord) -> bool:
        return entity.consolidated


class AccessCountSpecification(BaseSpecification):
    """Records accessed at least ``min_count`` times (or exactly zero times with ``exact``)."""

    type: Literal["access_count"] = "access_count"
    min_count: int = Field(0, ge=0)
    exact: bool = False

    def is_satisfied_by(self, entity: MemoryRecord) -> bool:
        if self.exact:
            return entity.access_count == self.min_count
        return entity.access_count >= self.min_count


class ImportanceSpecification(BaseSpecification):
    type: Literal["importance"] = "importance"
    min_importance: float = 0.5

    def is_satisfied_by(self, entity: MemoryRecord) -> bool:
        return entity.importance >= self.min_importance


def promotion_specification(access_count_threshold: int, importance_threshold: float) -> BaseSpecification:
    """Not yet consolidated, accessed often enough and important enough."""
    return (
        ConsolidatedSpecification()
        .not_()
        .and_(AccessCountSpecification(min_count=access_count_threshold))
        .and_(ImportanceSpecification(min_importance=importance_threshold))
    )


def prune_specification(cutoff: datetime) -> BaseSpecification:
    """Created before ``cutoff`` and never accessed."""
    return CreatedBeforeSpecification(cutoff=cutoff).and_(AccessCountSpecification(min_count=0, exact=True))
