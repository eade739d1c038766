"""Canonical error types shared by the HTTP and gRPC bridges.

This module defines the closed typed-error taxonomy plus the two structural
wrappers (``TraceErr`` and ``AggregateError``) that every bridge understands.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Closed set of failure categories driving transport status mapping."""

    NOT_FOUND = "not_found"
    BAD_PARAMETER = "bad_parameter"
    NOT_IMPLEMENTED = "not_implemented"
    COMPARE_FAILED = "compare_failed"
    ACCESS_DENIED = "access_denied"
    ALREADY_EXISTS = "already_exists"
    LIMIT_EXCEEDED = "limit_exceeded"
    CONNECTION_PROBLEM = "connection_problem"
    OAUTH2 = "oauth2"
    RETRY = "retry"
    TRUST = "trust"


_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "not found",
    ErrorKind.BAD_PARAMETER: "bad parameter",
    ErrorKind.NOT_IMPLEMENTED: "not implemented",
    ErrorKind.COMPARE_FAILED: "compare failed",
    ErrorKind.ACCESS_DENIED: "access denied",
    ErrorKind.ALREADY_EXISTS: "already exists",
    ErrorKind.LIMIT_EXCEEDED: "limit exceeded",
    ErrorKind.CONNECTION_PROBLEM: "connection problem",
    ErrorKind.OAUTH2: "oauth2 error",
    ErrorKind.RETRY: "retry",
    ErrorKind.TRUST: "trust error",
}

# Default hop budget for every bounded walk over wrapped errors.
MAX_HOPS = 50


class Frame(BaseModel):
    """One captured call site: function, file path and line number."""

    model_config = ConfigDict(frozen=True)

    func: str = ""
    path: str = ""
    line: int = 0

    def __str__(self) -> str:
        """Return ``path:line func`` form used in debug reports."""
        return f"{self.path}:{self.line} {self.func}"


class TypedError(Exception):
    """Classified failure with a fixed kind, message and structured fields."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        fields: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self._kind = ErrorKind(kind)
        self.message = message
        self.fields: dict[str, Any] = dict(fields or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def kind(self) -> ErrorKind:
        """Return the kind chosen at construction."""
        return self._kind

    def __str__(self) -> str:
        """Return the message, or the kind's default text when empty."""
        return self.message or _DEFAULT_MESSAGES[self._kind]

    def __repr__(self) -> str:
        return f"TypedError(kind={self._kind.value!r}, message={self.message!r})"

    def to_json_dict(self) -> dict[str, Any]:
        """Return the wire payload for this error."""
        payload: dict[str, Any] = {"kind": self._kind.value, "message": self.message}
        if self.fields:
            payload["fields"] = dict(self.fields)
        return payload


class UnclassifiedError(Exception):
    """Placeholder for received failures with no typed counterpart."""

    def __init__(
        self, message: str = "", *, fields: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.fields: dict[str, Any] = dict(fields or {})

    def __str__(self) -> str:
        return self.message or "unclassified error"

    def to_json_dict(self) -> dict[str, Any]:
        """Return the wire payload for this error."""
        payload: dict[str, Any] = {"message": self.message}
        if self.fields:
            payload["fields"] = dict(self.fields)
        return payload


class TraceErr(Exception):
    """Wrapper carrying an underlying error plus captured call-site frames.

    Frames are appended closest-call-first and never reordered. ``message`` is
    an optional user-facing override for the wrapped error's own message;
    ``messages`` holds auxiliary notes added while the error propagates.
    """

    def __init__(
        self,
        err: BaseException | None = None,
        *,
        traces: Iterable[Frame] = (),
        message: str = "",
        messages: Iterable[str] = (),
        fields: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.err = err
        self.traces: list[Frame] = list(traces)
        self.message = message
        self.messages: list[str] = list(messages)
        self.fields: dict[str, Any] = dict(fields or {})

    def __str__(self) -> str:
        """Return the override message, else the wrapped error text.

        Nested ``TraceErr`` layers are followed for at most ``MAX_HOPS`` links;
        a chain that never leaves ``TraceErr`` falls back to its auxiliary
        messages or the type name.
        """
        current = self
        for _ in range(MAX_HOPS):
            if current.message:
                return current.message
            inner = current.err
            if inner is None:
                return ", ".join(current.messages)
            if not isinstance(inner, TraceErr):
                return str(inner)
            current = inner
        return ", ".join(self.messages) or type(self).__name__

    def __repr__(self) -> str:
        return f"TraceErr(err={type(self.err).__name__}, frames={len(self.traces)})"

    def add_field(self, key: str, value: Any) -> TraceErr:
        """Attach one structured context field."""
        self.fields[key] = value
        return self

    def add_fields(self, fields: Mapping[str, Any]) -> TraceErr:
        """Attach several structured context fields."""
        self.fields.update(fields)
        return self

    def add_user_message(self, message: str, *args: object) -> TraceErr:
        """Append one auxiliary message, formatting ``args`` when given."""
        self.messages.append(message % args if args else message)
        return self


class AggregateError(Exception):
    """Ordered, non-empty collection of underlying errors."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self._errors = tuple(errors)
        super().__init__(str(self))

    @property
    def errors(self) -> tuple[BaseException, ...]:
        """Return the sub-errors in construction order."""
        return self._errors

    def __str__(self) -> str:
        """Join sub-error messages with commas."""
        return ", ".join(str(error) for error in self._errors)

    def __repr__(self) -> str:
        return f"AggregateError({list(self._errors)!r})"

    def to_json_dict(self) -> dict[str, Any]:
        """Return the wire payload listing each sub-error message."""
        return {
            "message": str(self),
            "errors": [str(error) for error in self._errors],
        }
