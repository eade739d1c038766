"""Aggregate construction and bounded flattening."""

from __future__ import annotations

from .traverse import MAX_HOPS, last_hop, sub_errors, unwrap
from .types import AggregateError


def new_aggregate(*errs: BaseException | None) -> BaseException | None:
    """Combine non-``None`` errors.

    Returns ``None`` when nothing remains and the single error unchanged when
    only one remains, so callers must not assume an ``AggregateError`` back.
    """
    present = [err for err in errs if err is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return AggregateError(present)


def is_aggregate(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> bool:
    """Return whether the unwrapped error exposes the aggregate capability."""
    return sub_errors(unwrap(err, max_hops=max_hops)) is not None


def flatten(err: BaseException, *, max_hops: int = MAX_HOPS) -> BaseException:
    """Reduce an aggregate to one representative error within the hop budget.

    Each hop replaces the current error with the first sub-error of the
    aggregate it unwraps to. Later sub-errors never influence the result.
    """
    return last_hop(
        err,
        max_hops=max_hops,
        children=lambda current: _first_sub_error(current, max_hops),
    )


def _first_sub_error(err: BaseException, max_hops: int) -> tuple[BaseException, ...]:
    nested = sub_errors(unwrap(err, max_hops=max_hops))
    if not nested:
        return ()
    return nested[:1]
