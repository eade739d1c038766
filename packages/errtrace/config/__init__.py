"""Public API for errtrace configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    HttpSettings,
    LoggingSettings,
    TraceSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "HttpSettings",
    "LoggingSettings",
    "TraceSettings",
    "load_settings",
]
