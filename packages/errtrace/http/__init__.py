"""Public HTTP bridge API."""

from .bridge import CONTENT_TYPE_JSON, HttpBridge
from .client import AsyncHttpClient, HttpClient
from .server import error_response, install_error_handlers
from .writer import BufferedResponseWriter, ResponseWriter

__all__ = [
    "AsyncHttpClient",
    "BufferedResponseWriter",
    "CONTENT_TYPE_JSON",
    "HttpBridge",
    "HttpClient",
    "ResponseWriter",
    "error_response",
    "install_error_handlers",
]
