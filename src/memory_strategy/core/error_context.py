"""Structured error context attached to error log events."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from .base import ApplicationError


def error_context(error: BaseException, **context: Any) -> dict[str, Any]:
    """Flatten ``error`` into a log payload.

    ApplicationError details land under ``details.*`` and caller-supplied
    values under ``context.*`` so neither can shadow the error fields.
    """
    payload: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "trace_id": str(uuid4()),
        "timestamp": datetime.now(UTC).isoformat(),
    }

    if isinstance(error, ApplicationError):
        payload["error_code"] = error.code.value
        payload["error_level"] = error.level.value
        payload.update({f"details.{key}": value for key, value in error.details.model_dump().items()})

    payload.update({f"context.{key}": value for key, value in context.items()})
    return payload
