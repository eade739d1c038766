"""Public error API: typed taxonomy, tracing wrapper and aggregates."""

from .aggregate import flatten, is_aggregate, new_aggregate
from .factories import (
    access_denied,
    already_exists,
    bad_parameter,
    compare_failed,
    connection_problem,
    limit_exceeded,
    not_found,
    not_implemented,
    oauth2,
    retry,
    trust,
)
from .normalize import convert_system_error
from .predicates import (
    is_access_denied,
    is_already_exists,
    is_bad_parameter,
    is_compare_failed,
    is_connection_problem,
    is_kind,
    is_limit_exceeded,
    is_not_found,
    is_not_implemented,
    is_oauth2,
    is_retry,
    is_trust,
)
from .trace import (
    capture_frame,
    debug_report,
    errorf,
    user_message,
    wrap,
    wrap_with_message,
)
from .traverse import MAX_HOPS, sub_errors, unwrap, walk
from .types import (
    AggregateError,
    ErrorKind,
    Frame,
    TraceErr,
    TypedError,
    UnclassifiedError,
)
from .wire import RawTrace

__all__ = [
    "AggregateError",
    "ErrorKind",
    "Frame",
    "MAX_HOPS",
    "RawTrace",
    "TraceErr",
    "TypedError",
    "UnclassifiedError",
    "access_denied",
    "already_exists",
    "bad_parameter",
    "capture_frame",
    "compare_failed",
    "connection_problem",
    "convert_system_error",
    "debug_report",
    "errorf",
    "flatten",
    "is_access_denied",
    "is_aggregate",
    "is_already_exists",
    "is_bad_parameter",
    "is_compare_failed",
    "is_connection_problem",
    "is_kind",
    "is_limit_exceeded",
    "is_not_found",
    "is_not_implemented",
    "is_oauth2",
    "is_retry",
    "is_trust",
    "limit_exceeded",
    "new_aggregate",
    "not_found",
    "not_implemented",
    "oauth2",
    "retry",
    "sub_errors",
    "trust",
    "unwrap",
    "user_message",
    "walk",
    "wrap",
    "wrap_with_message",
]
