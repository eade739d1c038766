"""Unit tests for aggregate construction and bounded flattening."""

from __future__ import annotations

from packages.errtrace.errors import (
    MAX_HOPS,
    AggregateError,
    ErrorKind,
    TypedError,
    flatten,
    is_aggregate,
    is_not_found,
    new_aggregate,
    not_found,
    sub_errors,
    wrap,
)


class _SelfAggregate(AggregateError):
    """Aggregate whose only member is itself."""

    @property
    def errors(self) -> tuple[BaseException, ...]:
        return (self,)


def test_new_aggregate_drops_none_and_unwraps_single() -> None:
    """Only multiple errors should produce an ``AggregateError``."""
    only = ValueError("one")

    assert new_aggregate() is None
    assert new_aggregate(None, None) is None
    assert new_aggregate(None, only) is only

    combined = new_aggregate(only, None, KeyError("two"))
    assert isinstance(combined, AggregateError)
    assert combined.errors[0] is only
    assert str(combined) == "one, 'two'"


def test_is_aggregate_sees_through_trace_wrappers() -> None:
    """Wrapped aggregates and exception groups both expose the capability."""
    assert is_aggregate(wrap(AggregateError([ValueError("a"), ValueError("b")])))
    assert is_aggregate(ExceptionGroup("group", [ValueError("a")]))
    assert not is_aggregate(wrap(ValueError("a")))
    assert sub_errors(ValueError("a")) is None


def test_flatten_returns_first_sub_error() -> None:
    """Only the first member survives flattening."""
    first = not_found("missing")
    error = wrap(AggregateError([first, TypedError(ErrorKind.ACCESS_DENIED, "no")]))

    result = flatten(error)

    assert result is first
    assert is_not_found(result)


def test_flatten_descends_nested_aggregates() -> None:
    """Nested aggregates should be flattened until a leaf is reached."""
    leaf = ValueError("leaf")
    error = AggregateError([AggregateError([leaf, KeyError("x")]), KeyError("y")])

    assert flatten(error) is leaf


def test_flatten_leaves_empty_aggregate_alone() -> None:
    """An empty aggregate has no representative and is returned itself."""
    empty = AggregateError([])

    assert flatten(empty) is empty


def test_flatten_terminates_within_hop_budget_on_deep_chain() -> None:
    """A chain deeper than the budget should stop after ``MAX_HOPS`` hops."""
    chain: list[BaseException] = [TypedError(ErrorKind.NOT_FOUND, "leaf")]
    for _ in range(MAX_HOPS + 5):
        chain.append(AggregateError([chain[-1]]))

    result = flatten(chain[-1], max_hops=MAX_HOPS)

    assert result is chain[len(chain) - MAX_HOPS]
    assert isinstance(result, AggregateError)


def test_flatten_terminates_on_self_reference() -> None:
    """Self-referential aggregates should not hang flattening."""
    error = _SelfAggregate([])

    assert flatten(error) is error
