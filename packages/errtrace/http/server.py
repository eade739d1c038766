"""FastAPI integration rendering traced errors through ``HttpBridge``."""

from __future__ import annotations

from fastapi import FastAPI, Request, Response

from packages.errtrace.errors import AggregateError, TraceErr, TypedError

from .bridge import HttpBridge
from .writer import BufferedResponseWriter


def error_response(bridge: HttpBridge, err: BaseException) -> Response:
    """Render ``err`` into a FastAPI response."""
    writer = BufferedResponseWriter()
    bridge.write_error(writer, err)
    return Response(
        content=bytes(writer.body),
        status_code=writer.status_code,
        headers=writer.headers,
    )


def install_error_handlers(app: FastAPI, bridge: HttpBridge | None = None) -> HttpBridge:
    """Register handlers so traced, typed and aggregate errors become JSON.

    Returns the bridge in use so callers can share it with other adapters.
    """
    active = bridge or HttpBridge()

    async def _handle(_request: Request, exc: Exception) -> Response:
        return error_response(active, exc)

    for error_type in (TraceErr, TypedError, AggregateError):
        app.add_exception_handler(error_type, _handle)
    return active
