"""Specific error types for the memory strategy engine."""

from typing import Any

from .base import (
    ApplicationError,
    ErrorCode,
    ErrorLevel,
    ResourceErrorDetails,
    ValidationErrorDetails,
)


class DuplicateKeyError(ApplicationError):
    """A record with the same id is already stored."""

    def __init__(self, message: str, details: ResourceErrorDetails | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.DUPLICATE_KEY,
            level=ErrorLevel.WARNING,
            details=details
            or ResourceErrorDetails(
                source="store",
                operation="store",
                resource_type="memory_record",
                action="store",
            ),
        )

    @classmethod
    def for_record(cls, record_id: str) -> "DuplicateKeyError":
        return cls(
            f"Record with ID '{record_id}' already exists.",
            ResourceErrorDetails(
                source="store",
                operation="store",
                resource_id=record_id,
                resource_type="memory_record",
                action="store",
            ),
        )


class NotFoundError(ApplicationError):
    """The requested record is logically absent."""

    def __init__(self, message: str, details: ResourceErrorDetails | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            level=ErrorLevel.INFO,
            details=details
            or ResourceErrorDetails(
                source="store",
                operation="lookup",
                resource_type="memory_record",
                action="read",
            ),
        )

    @classmethod
    def for_record(cls, record_id: str, action: str = "update") -> "NotFoundError":
        return cls(
            f"Record with ID '{record_id}' not found.",
            ResourceErrorDetails(
                source="store",
                operation=action,
                resource_id=record_id,
                resource_type="memory_record",
                action=action,
            ),
        )


class InvalidArgumentError(ApplicationError):
    """A required argument is missing, blank or out of bounds."""

    def __init__(self, message: str, details: ValidationErrorDetails | dict | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_INPUT,
            level=ErrorLevel.WARNING,
            details=details,
        )

    @classmethod
    def for_field(
        cls,
        field: str,
        value: Any,
        constraint: str,
        operation: str = "validate",
    ) -> "InvalidArgumentError":
        return cls(
            f"Invalid value for '{field}': {constraint}.",
            ValidationErrorDetails(
                source="engine",
                operation=operation,
                field=field,
                actual_value=value,
                constraint=constraint,
            ),
        )
