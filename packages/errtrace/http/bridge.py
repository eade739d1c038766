"""Translation between traced errors and HTTP status codes plus JSON bodies."""

from __future__ import annotations

import json

from pydantic import ValidationError

from packages.errtrace.config import TraceSettings
from packages.errtrace.errors import (
    MAX_HOPS,
    ErrorKind,
    TraceErr,
    flatten,
    is_access_denied,
    is_aggregate,
    is_already_exists,
    is_bad_parameter,
    is_compare_failed,
    is_connection_problem,
    is_limit_exceeded,
    is_not_found,
    is_not_implemented,
    is_oauth2,
)
from packages.errtrace.errors.trace import append_frame, capture_frame
from packages.errtrace.errors.wire import (
    RawTrace,
    decode_error,
    envelope_json,
    raw_trace_from_error,
    trace_from_raw,
)
from packages.errtrace.logging import get_logger, log_context
from packages.errtrace.logging import fields as log_fields

from .writer import ResponseWriter

_LOGGER = get_logger(__name__)

CONTENT_TYPE_JSON = "application/json"

_STATUS_TO_KIND: dict[int, ErrorKind] = {
    404: ErrorKind.NOT_FOUND,
    400: ErrorKind.BAD_PARAMETER,
    501: ErrorKind.NOT_IMPLEMENTED,
    412: ErrorKind.COMPARE_FAILED,
    403: ErrorKind.ACCESS_DENIED,
    409: ErrorKind.ALREADY_EXISTS,
    429: ErrorKind.LIMIT_EXCEEDED,
    504: ErrorKind.CONNECTION_PROBLEM,
}


class HttpBridge:
    """Map traced errors to HTTP responses and back."""

    def __init__(self, *, max_hops: int = MAX_HOPS, json_indent: int | None = 4) -> None:
        self._max_hops = max_hops
        self._json_indent = json_indent

    @classmethod
    def from_settings(cls, settings: TraceSettings) -> HttpBridge:
        """Build a bridge from resolved settings."""
        return cls(max_hops=settings.max_hops, json_indent=settings.http.json_indent)

    def error_to_code(self, err: BaseException | None) -> int:
        """Return the HTTP status for ``err``; the first matching rule wins."""
        hops = self._max_hops
        if is_aggregate(err, max_hops=hops):
            return 504
        if is_not_found(err, max_hops=hops):
            return 404
        if is_bad_parameter(err, max_hops=hops) or is_oauth2(err, max_hops=hops):
            return 400
        if is_not_implemented(err, max_hops=hops):
            return 501
        if is_compare_failed(err, max_hops=hops):
            return 412
        if is_access_denied(err, max_hops=hops):
            return 403
        if is_already_exists(err, max_hops=hops):
            return 409
        if is_limit_exceeded(err, max_hops=hops):
            return 429
        if is_connection_problem(err, max_hops=hops):
            return 504
        return 500

    def write_error(self, writer: ResponseWriter, err: BaseException) -> None:
        """Write ``err`` as a JSON error response.

        Aggregates are flattened to their first sub-error before
        classification. The body is always valid JSON, even when the error
        cannot be serialized.
        """
        if is_aggregate(err, max_hops=self._max_hops):
            err = flatten(err, max_hops=self._max_hops)
        status_code = self.error_to_code(err)
        writer.set_header("Content-Type", CONTENT_TYPE_JSON)
        writer.write_header(status_code)
        writer.write(self.render_body(err, status_code=status_code))

    def render_body(self, err: BaseException, *, status_code: int = 500) -> bytes:
        """Serialize ``err`` into the ``{"error": {...}}`` envelope."""
        try:
            raw = raw_trace_from_error(err)
            return envelope_json(raw, indent=self._json_indent).encode("utf-8")
        except Exception as exc:
            with log_context(
                {
                    log_fields.TRANSPORT: "http",
                    log_fields.STATUS_CODE: status_code,
                    log_fields.REASON: type(exc).__name__,
                }
            ):
                _LOGGER.error("Error body serialization failed", exc_info=exc)
            fallback = {"error": {"message": f"internal marshal error: {exc}"}}
            return json.dumps(fallback).encode("utf-8")

    def read_error(self, status_code: int, body: bytes | str) -> BaseException | None:
        """Rebuild a typed error from a received status code and body.

        Success and redirect statuses return ``None``. Undecodable bodies never
        raise; they come back as a ``TraceErr`` holding the raw body text.
        """
        if 200 <= status_code < 400:
            return None
        raw_body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        kind = _STATUS_TO_KIND.get(status_code)
        return append_frame(_unmarshal_error(kind, raw_body), capture_frame())


def _unmarshal_error(kind: ErrorKind | None, body: bytes) -> BaseException:
    if not body:
        return decode_error(kind, {})
    try:
        document = json.loads(body)
    except (ValueError, UnicodeDecodeError, RecursionError):
        return _error_on_invalid_json(kind, body)
    if not isinstance(document, dict):
        return _error_on_invalid_json(kind, body)

    envelope = document.get("error")
    try:
        raw = RawTrace.model_validate(envelope if isinstance(envelope, dict) else document)
        if raw.err is not None:
            return trace_from_raw(raw, decode_error(kind, raw.err))
        return decode_error(kind, document)
    except (ValidationError, RecursionError):
        return _error_on_invalid_json(kind, body)


def _error_on_invalid_json(kind: ErrorKind | None, body: bytes) -> TraceErr:
    """Keep the selected error and carry the unexpected body as a message."""
    _LOGGER.debug("Unexpected HTTP error body", extra={log_fields.TRANSPORT: "http"})
    return TraceErr(
        decode_error(kind, {}),
        messages=[body.decode("utf-8", errors="replace")],
    )
