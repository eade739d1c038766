"""Factory helpers creating traced typed errors at the caller's frame."""

from __future__ import annotations

from typing import Any

from .trace import append_frame, capture_frame
from .types import ErrorKind, TraceErr, TypedError


def not_found(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced not-found error."""
    return _traced(ErrorKind.NOT_FOUND, message, args, fields)


def bad_parameter(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced bad-parameter error."""
    return _traced(ErrorKind.BAD_PARAMETER, message, args, fields)


def not_implemented(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced not-implemented error."""
    return _traced(ErrorKind.NOT_IMPLEMENTED, message, args, fields)


def compare_failed(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced compare-failed error."""
    return _traced(ErrorKind.COMPARE_FAILED, message, args, fields)


def access_denied(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced access-denied error."""
    return _traced(ErrorKind.ACCESS_DENIED, message, args, fields)


def already_exists(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced already-exists error."""
    return _traced(ErrorKind.ALREADY_EXISTS, message, args, fields)


def limit_exceeded(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced limit-exceeded error."""
    return _traced(ErrorKind.LIMIT_EXCEEDED, message, args, fields)


def oauth2(message: str, *args: object, **fields: Any) -> TraceErr:
    """Create a traced OAuth2 protocol error."""
    return _traced(ErrorKind.OAUTH2, message, args, fields)


def connection_problem(
    cause: BaseException | None, message: str, *args: object, **fields: Any
) -> TraceErr:
    """Create a traced connection-problem error around ``cause``."""
    return _traced(ErrorKind.CONNECTION_PROBLEM, message, args, fields, cause=cause)


def retry(
    cause: BaseException | None, message: str, *args: object, **fields: Any
) -> TraceErr:
    """Create a traced retry error around ``cause``."""
    return _traced(ErrorKind.RETRY, message, args, fields, cause=cause)


def trust(
    cause: BaseException | None, message: str, *args: object, **fields: Any
) -> TraceErr:
    """Create a traced trust error around ``cause``."""
    return _traced(ErrorKind.TRUST, message, args, fields, cause=cause)


def _traced(
    kind: ErrorKind,
    message: str,
    args: tuple[object, ...],
    fields: dict[str, Any],
    *,
    cause: BaseException | None = None,
) -> TraceErr:
    """Build one typed error and record the public factory's caller."""
    error = TypedError(
        kind,
        message % args if args else message,
        fields=fields,
        cause=cause,
    )
    return append_frame(error, capture_frame(skip=1))
