"""Logging context utilities for structured logging.

Context is stored in structlog's contextvars so that the
``merge_contextvars`` processor installed by ``setup_logging`` attaches it
to every event emitted inside the bound scope, including events from
worker threads that copy the current context.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return dict(structlog.contextvars.get_contextvars())


def set_log_context(context: dict[str, Any]) -> None:
    """Replace the logging context with ``context``."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)


def update_log_context(key: str, value: Any) -> None:
    """Update a single key in the logging context."""
    structlog.contextvars.bind_contextvars(**{key: value})


def clear_log_context() -> None:
    """Clear the current logging context."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Bind ``values`` for the duration of the block, restoring prior values after.

    Example:
        with log_context(operation="recall", strategy="hybrid"):
            logger.info("Scoring candidates", count=12)
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
