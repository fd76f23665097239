"""Error handling decorators"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from .base import ApplicationError, ErrorLevel
from .error_context import error_context
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator for handling errors in engine operations.

    ApplicationErrors are logged at their own level, anything else at
    ``error_level`` with its traceback. Both carry the flattened error context.

    Args:
        error_level: Severity level for unexpected errors
        reraise: Whether to re-raise the error after logging

    Returns:
        Decorated function with error handling
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        original_signature = inspect.signature(func)

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                expected = isinstance(e, ApplicationError)
                level = e.level if expected else error_level  # type: ignore[attr-defined]
                logger.log(
                    level.to_logging_level(),
                    f"Error in {func.__name__}: {e!s}",
                    extra={"function": func.__name__, "error_context": error_context(e)},
                    exc_info=not expected,
                )
                if reraise:
                    raise
                return cast("T", None)

        sync_wrapper.__signature__ = original_signature  # type: ignore[attr-defined]
        return sync_wrapper

    return decorator
