"""Classification predicates over wrapped errors."""

from __future__ import annotations

from .traverse import MAX_HOPS, walk
from .types import ErrorKind, TypedError


def is_kind(
    err: BaseException | None, kind: ErrorKind, *, max_hops: int = MAX_HOPS
) -> bool:
    """Return whether any error reachable within the hop budget has ``kind``."""
    return walk(
        err,
        lambda current: isinstance(current, TypedError) and current.kind == kind,
        max_hops=max_hops,
    )


def is_not_found(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Not-found errors, including ``FileNotFoundError`` from the OS."""
    return walk(
        err,
        lambda current: isinstance(current, FileNotFoundError)
        or (isinstance(current, TypedError) and current.kind == ErrorKind.NOT_FOUND),
        max_hops=max_hops,
    )


def is_bad_parameter(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether a bad-parameter error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.BAD_PARAMETER, max_hops=max_hops)


def is_not_implemented(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether a not-implemented error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.NOT_IMPLEMENTED, max_hops=max_hops)


def is_compare_failed(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether a compare-failed error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.COMPARE_FAILED, max_hops=max_hops)


def is_access_denied(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether an access-denied error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.ACCESS_DENIED, max_hops=max_hops)


def is_already_exists(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether an already-exists error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.ALREADY_EXISTS, max_hops=max_hops)


def is_limit_exceeded(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether a limit-exceeded error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.LIMIT_EXCEEDED, max_hops=max_hops)


def is_connection_problem(
    err: BaseException | None, *, max_hops: int = MAX_HOPS
) -> bool:
    """Return whether a connection-problem error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.CONNECTION_PROBLEM, max_hops=max_hops)


def is_oauth2(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether an OAuth2 error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.OAUTH2, max_hops=max_hops)


def is_retry(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether a retry error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.RETRY, max_hops=max_hops)


def is_trust(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether a trust error is reachable within the hop budget."""
    return is_kind(err, ErrorKind.TRUST, max_hops=max_hops)
