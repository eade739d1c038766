"""Translation between traced errors and gRPC statuses.

Status details only ever carry the sanitized user message. Frames travel in
the ``trace-debug-report`` metadata entry, and only when debug mode is on.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any, Iterable, Union

import grpc
from pydantic import ValidationError

from packages.errtrace.config import TraceSettings
from packages.errtrace.errors import (
    MAX_HOPS,
    ErrorKind,
    TraceErr,
    TypedError,
    new_aggregate,
    user_message,
    walk,
)
from packages.errtrace.errors.trace import append_frame, capture_frame
from packages.errtrace.errors.wire import RawTrace, raw_trace_from_error
from packages.errtrace.logging import get_logger, log_context
from packages.errtrace.logging import fields as log_fields

from .status import RpcStatusError, convert, status_from_error

_LOGGER = get_logger(__name__)

DEBUG_REPORT_METADATA = "trace-debug-report"
BINARY_METADATA_SUFFIX = "-bin"

MetadataValue = Union[str, bytes]
MetadataMap = dict[str, list[MetadataValue]]
MetadataLike = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]

_KIND_TO_CODE: dict[ErrorKind, grpc.StatusCode] = {
    ErrorKind.ACCESS_DENIED: grpc.StatusCode.PERMISSION_DENIED,
    ErrorKind.ALREADY_EXISTS: grpc.StatusCode.ALREADY_EXISTS,
    ErrorKind.BAD_PARAMETER: grpc.StatusCode.INVALID_ARGUMENT,
    ErrorKind.COMPARE_FAILED: grpc.StatusCode.FAILED_PRECONDITION,
    ErrorKind.CONNECTION_PROBLEM: grpc.StatusCode.UNAVAILABLE,
    ErrorKind.LIMIT_EXCEEDED: grpc.StatusCode.RESOURCE_EXHAUSTED,
    ErrorKind.NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    ErrorKind.NOT_IMPLEMENTED: grpc.StatusCode.UNIMPLEMENTED,
    ErrorKind.OAUTH2: grpc.StatusCode.INVALID_ARGUMENT,
    # RETRY and TRUST are not mapped.
}

_CODE_TO_KIND: dict[grpc.StatusCode, ErrorKind] = {
    grpc.StatusCode.NOT_FOUND: ErrorKind.NOT_FOUND,
    grpc.StatusCode.ALREADY_EXISTS: ErrorKind.ALREADY_EXISTS,
    grpc.StatusCode.PERMISSION_DENIED: ErrorKind.ACCESS_DENIED,
    grpc.StatusCode.FAILED_PRECONDITION: ErrorKind.COMPARE_FAILED,
    grpc.StatusCode.INVALID_ARGUMENT: ErrorKind.BAD_PARAMETER,
    grpc.StatusCode.RESOURCE_EXHAUSTED: ErrorKind.LIMIT_EXCEEDED,
    grpc.StatusCode.UNAVAILABLE: ErrorKind.CONNECTION_PROBLEM,
    grpc.StatusCode.UNIMPLEMENTED: ErrorKind.NOT_IMPLEMENTED,
}


class RpcBridge:
    """Map traced errors to gRPC statuses and back."""

    def __init__(self, *, debug: bool = False, max_hops: int = MAX_HOPS) -> None:
        self._debug = debug
        self._max_hops = max_hops

    @classmethod
    def from_settings(cls, settings: TraceSettings) -> RpcBridge:
        """Build a bridge from resolved settings."""
        return cls(debug=settings.is_debug(), max_hops=settings.max_hops)

    def is_debug(self) -> bool:
        """Return whether debug metadata is attached on send."""
        return self._debug

    def to_grpc(self, err: BaseException | None) -> BaseException | None:
        """Convert ``err`` into a gRPC status error.

        Native status errors pass through untouched. ``EOFError`` anywhere in
        the chain returns ``err`` unchanged.
        """
        if err is None:
            return None
        if status_from_error(err) is not None:
            return err

        code = grpc.StatusCode.UNKNOWN
        return_original = False

        def _visit(current: BaseException) -> bool:
            nonlocal code, return_original
            if isinstance(current, EOFError):
                return_original = True
                return True
            status = status_from_error(current)
            if status is not None:
                code = status.code
                return True
            if isinstance(current, FileNotFoundError):
                code = grpc.StatusCode.NOT_FOUND
                return True
            if isinstance(current, TypedError) and current.kind in _KIND_TO_CODE:
                code = _KIND_TO_CODE[current.kind]
                return True
            return False

        walk(err, _visit, max_hops=self._max_hops)
        if return_original:
            return err
        return RpcStatusError(code, user_message(err, max_hops=self._max_hops))

    def send(
        self, context: grpc.ServicerContext, err: BaseException | None
    ) -> BaseException | None:
        """Attach debug metadata to the response header and convert ``err``.

        A failure to send the header is combined with ``err`` rather than
        dropped.
        """
        meta = metadata_map(context.invocation_metadata() or ())
        self.set_debug_info(err, meta)
        if meta:
            try:
                context.send_initial_metadata(metadata_pairs(meta))
            except Exception as send_err:
                with log_context({log_fields.TRANSPORT: "grpc"}):
                    _LOGGER.warning("Sending error metadata failed", exc_info=send_err)
                err = new_aggregate(err, send_err)
        return self.to_grpc(err)

    def abort(self, context: grpc.ServicerContext, err: BaseException) -> None:
        """Terminate the RPC with the status derived from ``err``."""
        converted = self.send(context, err)
        status = status_from_error(converted)
        if status is None:
            raise converted if converted is not None else err
        context.abort(status.code, status.message)

    def from_grpc(
        self, err: BaseException | None, metadata: MetadataLike | None = None
    ) -> BaseException | None:
        """Convert a received gRPC error back into the typed taxonomy.

        When ``metadata`` carries a decodable debug report, the reconstructed
        ``TraceErr`` is returned as is. Otherwise one frame is captured here.
        """
        if err is None:
            return None
        status = convert(err)
        if status.code == grpc.StatusCode.OK:
            return None

        kind = _CODE_TO_KIND.get(status.code)
        error: BaseException = err if kind is None else TypedError(kind, status.message)
        if metadata is not None:
            error = self.decode_debug_info(error, metadata)
            if isinstance(error, TraceErr):
                return error
        return append_frame(error, capture_frame())

    def from_rpc_error(self, err: grpc.RpcError) -> BaseException | None:
        """Client helper reading the initial metadata of a failed call."""
        initial_metadata = getattr(err, "initial_metadata", None)
        metadata = initial_metadata() if callable(initial_metadata) else None
        return self.from_grpc(err, metadata)

    def set_debug_info(self, err: BaseException | None, meta: MetadataMap) -> None:
        """Store the encoded trace of ``err`` in ``meta`` when debugging.

        Only ``TraceErr`` values are encoded; anything else is a no-op.
        """
        if not self._debug or not isinstance(err, TraceErr):
            return
        try:
            encoded = raw_trace_from_error(err).to_json()
        except Exception as exc:
            _LOGGER.debug("Debug report serialization failed: %s", exc)
            return
        meta[DEBUG_REPORT_METADATA] = [
            base64.standard_b64encode(encoded.encode("utf-8")).decode("ascii")
        ]

    def decode_debug_info(
        self, err: BaseException, meta: MetadataLike | None
    ) -> BaseException:
        """Enrich ``err`` with frames from the debug report in ``meta``.

        Every decoding problem returns ``err`` unchanged.
        """
        values = metadata_map(meta or ()).get(DEBUG_REPORT_METADATA)
        if not values or len(values) != 1:
            return err
        try:
            data = base64.b64decode(values[0], validate=True)
            raw = RawTrace.model_validate(json.loads(data))
        except (
            binascii.Error,
            UnicodeError,
            ValueError,
            ValidationError,
            RecursionError,
        ):
            _LOGGER.debug("Ignoring undecodable debug report")
            return err
        if not raw.traces or raw.err is None:
            return err
        return TraceErr(err, traces=raw.traces, message=raw.message)


def metadata_map(meta: MetadataLike) -> MetadataMap:
    """Normalize gRPC metadata into ``{key: [values...]}``.

    Accepts mappings with scalar or list values and sequences of
    ``(key, value)`` pairs such as ``context.invocation_metadata()``. Values
    under binary ``-bin`` keys stay ``bytes``; every other value becomes text.
    """
    output: MetadataMap = {}
    if isinstance(meta, Mapping):
        for key, value in meta.items():
            name = str(key).lower()
            items = value if isinstance(value, (list, tuple)) else (value,)
            output.setdefault(name, []).extend(_value(name, item) for item in items)
        return output
    for key, value in meta:
        name = str(key).lower()
        output.setdefault(name, []).append(_value(name, value))
    return output


def metadata_pairs(meta: MetadataMap) -> tuple[tuple[str, MetadataValue], ...]:
    """Flatten a metadata map into the pair form accepted by grpc."""
    return tuple((key, value) for key, values in meta.items() for value in values)


def _value(key: str, value: Any) -> MetadataValue:
    if key.endswith(BINARY_METADATA_SUFFIX):
        return value if isinstance(value, bytes) else str(value).encode("utf-8")
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
