"""JSON wire models for traced errors.

``RawTrace`` mirrors ``TraceErr`` for transport. Its ``err`` member keeps the
wrapped error's payload undecoded, because the receiver picks the concrete
error type from context (HTTP status, gRPC code) rather than from the body.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .types import ErrorKind, Frame, TraceErr, TypedError, UnclassifiedError

_EMPTY_VALUES: tuple[Any, ...] = (None, "", [], {})


class RawTrace(BaseModel):
    """Wire form of ``TraceErr`` with an undecoded nested error payload."""

    model_config = ConfigDict(populate_by_name=True)

    traces: list[Frame] = Field(default_factory=list)
    err: Any = None
    message: str = ""
    messages: list[str] = Field(default_factory=list)
    field_map: dict[str, Any] = Field(default_factory=dict, alias="fields")

    def to_payload(self) -> dict[str, Any]:
        """Return JSON-ready members with empty ones omitted."""
        payload = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in payload.items() if value not in _EMPTY_VALUES}

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialize the bare trace, as carried in gRPC debug metadata."""
        return json.dumps(self.to_payload(), indent=indent)


class ErrorBody(BaseModel):
    """Decoded payload of one typed or unclassified error."""

    message: str = ""
    field_map: dict[str, Any] = Field(default_factory=dict, alias="fields")


def envelope_json(raw: RawTrace, *, indent: int | None = None) -> str:
    """Serialize the HTTP body envelope ``{"error": <trace>}``."""
    return json.dumps({"error": raw.to_payload()}, indent=indent)


def encode_error(err: BaseException) -> Any:
    """Return the JSON-ready payload of one wrapped error.

    Errors may supply their own ``to_json_dict``; everything else is rendered
    as its type name and message.
    """
    if isinstance(err, TraceErr):
        return raw_trace_from_error(err).to_payload()
    to_json_dict = getattr(err, "to_json_dict", None)
    if callable(to_json_dict):
        return to_json_dict()
    return {"type": type(err).__name__, "message": str(err)}


def raw_trace_from_error(err: BaseException) -> RawTrace:
    """Build the wire form of ``err``, treating non-traced errors as bare."""
    trace = err if isinstance(err, TraceErr) else TraceErr(err)
    return RawTrace(
        traces=trace.traces,
        err=None if trace.err is None else encode_error(trace.err),
        message=trace.message,
        messages=trace.messages,
        fields=trace.fields,
    )


def decode_error(kind: ErrorKind | None, payload: Any) -> TypedError | UnclassifiedError:
    """Decode ``payload`` into the error type selected by the receiver.

    Raises ``pydantic.ValidationError`` when the payload has the wrong shape.
    """
    body = ErrorBody.model_validate(payload)
    if kind is None:
        return UnclassifiedError(body.message, fields=body.field_map)
    return TypedError(kind, body.message, fields=body.field_map)


def trace_from_raw(raw: RawTrace, err: BaseException) -> TraceErr:
    """Rebuild a ``TraceErr`` around ``err`` from its wire form."""
    return TraceErr(
        err,
        traces=raw.traces,
        message=raw.message,
        messages=raw.messages,
        fields=raw.field_map,
    )
