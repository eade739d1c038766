"""Public logging API.

This package wraps Python's ``logging`` module with stdout defaults, structured
context propagation and traced-error enrichment.
"""

from .config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from .context import bind_context, clear_context, get_context, log_context

__all__ = [
    "ContextFilter",
    "JsonFormatter",
    "PlainFormatter",
    "bind_context",
    "clear_context",
    "configure_from_settings",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
]
