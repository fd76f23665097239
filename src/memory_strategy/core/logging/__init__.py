"""Structured logging module.

Engine modules obtain loggers with ``get_logger(__name__)``; hosts call
``setup_logging()`` once at startup.
"""

from .context import (
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
    update_log_context,
)
from .setup import get_logger, setup_logging

__all__ = [
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "log_context",
    "set_log_context",
    "setup_logging",
    "update_log_context",
]
