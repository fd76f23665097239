"""Composite specification implementations.

Specifications are small predicates over memory records that can be
combined with ``and_`` / ``not_`` and re-evaluated wherever a decision has
to be confirmed (for example under a record lock).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class BaseSpecification(BaseModel):
    """Base class for concrete specifications."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    def is_satisfied_by(self, entity: Any) -> bool:
        """Check if the entity satisfies this specification."""
        raise NotImplementedError("Subclasses must implement is_satisfied_by")

    def __call__(self, entity: Any) -> bool:
        return self.is_satisfied_by(entity)

    def and_(self, other: "BaseSpecification") -> "BaseSpecification":
        """Combine with another specification using AND logic."""
        return AndSpecification(left=self, right=other)

    def not_(self) -> "BaseSpecification":
        """Negate this specification."""
        return NotSpecification(spec=self)


class AndSpecification(BaseSpecification):
    """AND specification implementation."""

    type: Literal["and"] = "and"
    left: BaseSpecification
    right: BaseSpecification

    def is_satisfied_by(self, entity: Any) -> bool:
        return self.left.is_satisfied_by(entity) and self.right.is_satisfied_by(entity)


class NotSpecification(BaseSpecification):
    """NOT specification implementation."""

    type: Literal["not"] = "not"
    spec: BaseSpecification

    def is_satisfied_by(self, entity: Any) -> bool:
        return not self.spec.is_satisfied_by(entity)
