from .composite import AndSpecification, BaseSpecification, NotSpecification
from .memory import (
    AccessCountSpecification,
    ConsolidatedSpecification,
    CreatedAfterSpecification,
    CreatedBeforeSpecification,
    ImportanceSpecification,
    TagMatchSpecification,
    promotion_specification,
    prune_specification,
)

__all__ = [
    "AccessCountSpecification",
    "AndSpecification",
    "BaseSpecification",
    "ConsolidatedSpecification",
    "CreatedAfterSpecification",
    "CreatedBeforeSpecification",
    "ImportanceSpecification",
    "NotSpecification",
    "TagMatchSpecification",
    "promotion_specification",
    "prune_specification",
]
