"""Bounded traversal over wrapped error graphs.

Errors can be wrapped by third-party code in ways that are not guaranteed to be
acyclic, so every unwrap loop in this package goes through ``walk`` with an
explicit hop budget instead of following links unconditionally.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from .types import MAX_HOPS, AggregateError, TraceErr

Visitor = Callable[[BaseException], bool]
Children = Callable[[BaseException], Sequence[BaseException]]


def sub_errors(err: BaseException | None) -> tuple[BaseException, ...] | None:
    """Return sub-errors when ``err`` exposes the aggregate capability."""
    if isinstance(err, AggregateError):
        return tuple(err.errors)
    if isinstance(err, BaseExceptionGroup):
        return tuple(err.exceptions)
    return None


def unwrap_children(err: BaseException) -> Sequence[BaseException]:
    """Return every error directly wrapped by ``err``, in order."""
    if isinstance(err, TraceErr):
        return () if err.err is None else (err.err,)
    nested = sub_errors(err)
    if nested is not None:
        return nested
    if err.__cause__ is not None:
        return (err.__cause__,)
    return ()


def trace_children(err: BaseException) -> Sequence[BaseException]:
    """Follow only ``TraceErr`` wrapping links."""
    if isinstance(err, TraceErr) and err.err is not None:
        return (err.err,)
    return ()


def walk(
    err: BaseException | None,
    visit: Visitor,
    *,
    max_hops: int = MAX_HOPS,
    children: Children = unwrap_children,
) -> bool:
    """Visit ``err`` and its wrapped errors depth-first within a hop budget.

    At most ``max_hops`` errors are visited in total, whatever the shape of the
    graph. Returns True as soon as ``visit`` returns True for one of them.
    """
    if err is None:
        return False
    pending: list[BaseException] = [err]
    hops = 0
    while pending and hops < max_hops:
        current = pending.pop()
        hops += 1
        if visit(current):
            return True
        pending.extend(reversed(_as_tuple(children(current))))
    return False


def last_hop(
    err: BaseException,
    *,
    max_hops: int = MAX_HOPS,
    children: Children,
) -> BaseException:
    """Return the last error reached by following the first child each hop."""
    last = err

    def _record(current: BaseException) -> bool:
        nonlocal last
        last = current
        return False

    walk(err, _record, max_hops=max_hops, children=lambda e: children(e)[:1])
    return last


def unwrap(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> BaseException | None:
    """Strip ``TraceErr`` layers and return the innermost wrapped error."""
    if err is None:
        return None
    return last_hop(err, max_hops=max_hops, children=trace_children)


def _as_tuple(values: Iterable[BaseException]) -> tuple[BaseException, ...]:
    return tuple(value for value in values if value is not None)
