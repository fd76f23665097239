"""Memory record domain model."""

import math
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from memory_strategy.domain.models.utils import clamp_unit, ensure_utc, utc_now


class MemoryRecord(BaseModel):
    """A single episodic memory unit."""

    record_id: str
    content: str = ""
    embedding: list[float] | None = None
    tags: list[str] = Field(default_factory=list)
    importance: float = 0.5
    created_at: datetime = Field(default_factory=utc_now)
    last_accessed_at: datetime | None = None
    access_count: int = Field(default=0, ge=0)
    consolidated: bool = False

    @field_validator("importance", mode="before")
    @classmethod
    def _clamp_importance(cls, value: float) -> float:
        importance = float(value)
        if not math.isfinite(importance):
            raise ValueError("importance must be a finite number")
        return clamp_unit(importance)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        # Ordered set, case-insensitive; first spelling wins
        seen: set[str] = set()
        tags: list[str] = []
        for tag in value:
            key = tag.casefold()
            if key not in seen:
                seen.add(key)
                tags.append(tag)
        return tags

    @field_validator("created_at", "last_accessed_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _default_last_accessed(self) -> "MemoryRecord":
        if self.last_accessed_at is None:
            self.last_accessed_at = self.created_at
        return self

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)
