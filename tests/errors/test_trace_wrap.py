"""Unit tests for frame-capturing wrap helpers and user messages."""

from __future__ import annotations

from packages.errtrace.errors import (
    ErrorKind,
    TraceErr,
    TypedError,
    access_denied,
    connection_problem,
    debug_report,
    errorf,
    not_found,
    user_message,
    wrap,
    wrap_with_message,
)


def _wrap_here(err: BaseException) -> TraceErr | None:
    return wrap(err)


def test_wrap_passes_none_through() -> None:
    """Wrapping ``None`` should stay ``None``."""
    assert wrap(None) is None
    assert wrap_with_message(None, "ignored") is None


def test_wrap_captures_caller_frame() -> None:
    """The first frame should point at the wrapping call site."""
    error = wrap(ValueError("boom"))

    assert isinstance(error, TraceErr)
    assert len(error.traces) == 1
    frame = error.traces[0]
    assert frame.func.endswith("test_wrap_captures_caller_frame")
    assert frame.path.endswith("test_trace_wrap.py")
    assert frame.line > 0


def test_wrap_accumulates_frames_on_same_object() -> None:
    """Re-wrapping should extend the existing frame list instead of nesting."""
    first = wrap(ValueError("boom"))
    second = _wrap_here(first)

    assert second is first
    assert isinstance(second.err, ValueError)
    assert len(second.traces) == 2
    assert second.traces[1].func.endswith("_wrap_here")


def test_wrap_skips_duplicate_of_previous_frame() -> None:
    """Wrapping twice from one call site should not repeat the frame."""
    error = _wrap_here(ValueError("boom"))
    _wrap_here(error)

    assert len(error.traces) == 1


def test_wrap_appends_aux_messages() -> None:
    """Extra wrap arguments should land in the auxiliary message list."""
    error = wrap(ValueError("boom"), "while loading config")

    assert error.messages == ["while loading config"]


def test_user_message_prefers_override_then_typed_then_raw() -> None:
    """User message resolution should never include frame details."""
    typed = not_found("user %s missing", "alice")
    assert user_message(typed) == "user alice missing"

    overridden = wrap_with_message(typed, "no such account")
    assert user_message(overridden) == "no such account"

    raw = wrap(ValueError("plain failure"))
    assert user_message(raw) == "plain failure"
    assert user_message(None) == ""


def test_user_message_uses_kind_default_for_empty_typed_error() -> None:
    """An empty typed message should fall back to the kind's default text."""
    assert user_message(TypedError(ErrorKind.ACCESS_DENIED)) == "access denied"


def test_user_message_terminates_on_self_wrapping_trace() -> None:
    """A cyclic wrapper should fall back to its notes or type name."""
    error = TraceErr()
    error.err = error
    assert user_message(error) == "TraceErr"
    assert str(error) == "TraceErr"

    error.add_user_message("while syncing")
    assert user_message(error) == "while syncing"
    assert "User Message: while syncing" in debug_report(error)


def test_errorf_creates_traced_plain_error() -> None:
    """``errorf`` should format its message and capture one frame."""
    error = errorf("failed after %d attempts", 3)

    assert str(error) == "failed after 3 attempts"
    assert error.traces[0].func.endswith("test_errorf_creates_traced_plain_error")


def test_factories_record_caller_frame_and_fields() -> None:
    """Factories should capture the frame of the code calling them."""
    error = access_denied("role %s cannot write", "viewer", resource="doc-1")

    assert isinstance(error.err, TypedError)
    assert error.err.kind == ErrorKind.ACCESS_DENIED
    assert error.err.fields == {"resource": "doc-1"}
    assert error.traces[0].func.endswith("test_factories_record_caller_frame_and_fields")


def test_connection_problem_keeps_cause() -> None:
    """Cause-carrying factories should chain the original exception."""
    cause = OSError("reset by peer")
    error = connection_problem(cause, "upstream unavailable")

    assert error.err.cause is cause
    assert error.err.__cause__ is cause


def test_trace_enrichment_helpers_return_same_error() -> None:
    """Field and message helpers should mutate and return the same wrapper."""
    error = wrap(ValueError("boom"))

    result = error.add_field("attempt", 2).add_fields({"host": "db"}).add_user_message(
        "retrying %s", "later"
    )

    assert result is error
    assert error.fields == {"attempt": 2, "host": "db"}
    assert error.messages == ["retrying later"]


def test_debug_report_lists_frames_and_fields() -> None:
    """Debug reports should include the original error and each frame."""
    error = not_found("missing", key="abc")
    error.add_field("request", "r-1")

    report = debug_report(error)

    assert "Original Error: TypedError missing" in report
    assert "Stack Trace:" in report
    assert "test_trace_wrap.py" in report
    assert "request: r-1" in report
    assert report.endswith("User Message: missing")
