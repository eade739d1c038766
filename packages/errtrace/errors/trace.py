"""Frame-capturing wrap helpers and user-facing message extraction."""

from __future__ import annotations

import inspect

from .traverse import MAX_HOPS, unwrap, walk
from .types import Frame, TraceErr, TypedError


def capture_frame(skip: int = 0) -> Frame:
    """Capture the caller of the function invoking this helper.

    ``skip`` walks that many additional frames outward, for helpers that wrap
    on behalf of their own caller.
    """
    frame = inspect.currentframe()
    try:
        target = frame.f_back.f_back if frame is not None and frame.f_back else None
        for _ in range(skip):
            if target is None or target.f_back is None:
                break
            target = target.f_back
        if target is None:
            return Frame()
        code = target.f_code
        return Frame(func=code.co_qualname, path=code.co_filename, line=target.f_lineno)
    finally:
        del frame


def append_frame(err: BaseException, frame: Frame) -> TraceErr:
    """Attach ``frame`` to ``err``, reusing an existing ``TraceErr``."""
    trace = err if isinstance(err, TraceErr) else TraceErr(err)
    if not trace.traces or trace.traces[-1] != frame:
        trace.traces.append(frame)
    return trace


def wrap(err: BaseException | None, *messages: str) -> TraceErr | None:
    """Record the caller's frame on ``err``; ``None`` passes through.

    Wrapping an already wrapped error accumulates frames on the same
    ``TraceErr`` instead of nesting. Extra ``messages`` become auxiliary
    messages.
    """
    if err is None:
        return None
    trace = append_frame(err, capture_frame())
    trace.messages.extend(messages)
    return trace


def wrap_with_message(
    err: BaseException | None, message: str, *args: object
) -> TraceErr | None:
    """Wrap ``err`` and set its user-facing override message."""
    if err is None:
        return None
    trace = append_frame(err, capture_frame())
    trace.message = message % args if args else message
    return trace


def errorf(message: str, *args: object) -> TraceErr:
    """Create a new traced error from a formatted message."""
    text = message % args if args else message
    return append_frame(Exception(text), capture_frame())


def user_message(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> str:
    """Return the most specific human-readable message, without frames."""
    if err is None:
        return ""
    found: str | None = None

    def _visit(current: BaseException) -> bool:
        nonlocal found
        if isinstance(current, TraceErr) and current.message:
            found = current.message
            return True
        if isinstance(current, TypedError):
            found = str(current)
            return True
        return False

    walk(err, _visit, max_hops=max_hops)
    if found is not None:
        return found
    return str(unwrap(err, max_hops=max_hops))


def debug_report(err: BaseException | None, *, max_hops: int = MAX_HOPS) -> str:
    """Render a multi-line report with frames and fields for logs."""
    if err is None:
        return ""
    original = unwrap(err, max_hops=max_hops)
    lines = [
        "ERROR REPORT:",
        f"Original Error: {type(original).__name__} {original}",
    ]
    if isinstance(err, TraceErr):
        if err.fields:
            lines.append("Fields:")
            lines.extend(f"  {key}: {value}" for key, value in sorted(err.fields.items()))
        if err.traces:
            lines.append("Stack Trace:")
            lines.extend(f"\t{frame}" for frame in err.traces)
        if err.messages:
            lines.append(f"Messages: {', '.join(err.messages)}")
    lines.append(f"User Message: {user_message(err, max_hops=max_hops)}")
    return "\n".join(lines)
