"""Unit tests for bounded classification predicates."""

from __future__ import annotations

import pytest

from packages.errtrace.errors import (
    AggregateError,
    ErrorKind,
    TraceErr,
    TypedError,
    convert_system_error,
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
    walk,
    wrap,
)

_PREDICATES = {
    ErrorKind.NOT_FOUND: is_not_found,
    ErrorKind.BAD_PARAMETER: is_bad_parameter,
    ErrorKind.NOT_IMPLEMENTED: is_not_implemented,
    ErrorKind.COMPARE_FAILED: is_compare_failed,
    ErrorKind.ACCESS_DENIED: is_access_denied,
    ErrorKind.ALREADY_EXISTS: is_already_exists,
    ErrorKind.LIMIT_EXCEEDED: is_limit_exceeded,
    ErrorKind.CONNECTION_PROBLEM: is_connection_problem,
    ErrorKind.OAUTH2: is_oauth2,
    ErrorKind.RETRY: is_retry,
    ErrorKind.TRUST: is_trust,
}


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_each_predicate_matches_only_its_kind(kind: ErrorKind) -> None:
    """Classification should be a discriminant comparison on ``kind``."""
    error = wrap(TypedError(kind, "failure"))

    for candidate, predicate in _PREDICATES.items():
        assert predicate(error) is (candidate == kind)
    assert is_kind(error, kind)


def test_predicates_follow_explicit_cause_chain() -> None:
    """Errors raised ``from`` a typed error should classify as that error."""
    try:
        try:
            raise TypedError(ErrorKind.LIMIT_EXCEEDED, "quota")
        except TypedError as inner:
            raise RuntimeError("request failed") from inner
    except RuntimeError as outer:
        assert is_limit_exceeded(outer)


def test_predicates_look_inside_aggregates() -> None:
    """Any aggregate member within the hop budget should be reachable."""
    error = AggregateError([ValueError("x"), TypedError(ErrorKind.TRUST, "bad cert")])

    assert is_trust(error)
    assert not is_not_found(error)


def test_is_not_found_matches_os_errors() -> None:
    """``FileNotFoundError`` should count as not-found."""
    assert is_not_found(wrap(FileNotFoundError("/missing")))
    assert not is_not_found(wrap(PermissionError("/secret")))


def test_predicates_terminate_on_cycles() -> None:
    """Self-referential wrapping should not hang classification."""
    error = TraceErr()
    error.err = error

    assert is_not_found(error) is False


def test_predicates_respect_hop_budget() -> None:
    """A kind buried deeper than the budget should not be found."""
    error: BaseException = TypedError(ErrorKind.NOT_FOUND, "deep")
    for _ in range(10):
        outer = RuntimeError("layer")
        outer.__cause__ = error
        error = outer

    assert is_not_found(error, max_hops=5) is False
    assert is_not_found(error, max_hops=11) is True


def test_walk_visits_at_most_budget() -> None:
    """Traversal should stop after ``max_hops`` visits whatever the shape."""
    error = AggregateError([ValueError(str(index)) for index in range(20)])
    visited: list[BaseException] = []

    walk(error, lambda current: visited.append(current) is not None, max_hops=7)

    assert len(visited) == 7
    assert visited[0] is error
    assert str(visited[1]) == "0"


def test_convert_system_error_maps_os_exceptions() -> None:
    """OS-level exceptions should map onto typed kinds."""
    assert is_not_found(convert_system_error(FileNotFoundError("f")))
    assert is_already_exists(convert_system_error(FileExistsError("f")))
    assert is_access_denied(convert_system_error(PermissionError("f")))
    assert is_connection_problem(convert_system_error(ConnectionResetError()))
    assert is_connection_problem(convert_system_error(TimeoutError()))

    untouched = KeyError("k")
    assert convert_system_error(untouched) is untouched
    assert convert_system_error(None) is None
