"""Exception normalization from OS-level failures into typed errors."""

from __future__ import annotations

from .types import ErrorKind, TypedError


def convert_system_error(err: BaseException | None) -> BaseException | None:
    """Map well-known OS exceptions onto the typed taxonomy.

    The original exception is kept as ``cause``. Anything not recognized is
    returned unchanged.
    """
    if err is None or isinstance(err, TypedError):
        return err

    message = str(err)

    if isinstance(err, FileNotFoundError):
        return TypedError(ErrorKind.NOT_FOUND, message, cause=err)

    if isinstance(err, FileExistsError):
        return TypedError(ErrorKind.ALREADY_EXISTS, message, cause=err)

    if isinstance(err, PermissionError):
        return TypedError(ErrorKind.ACCESS_DENIED, message, cause=err)

    if isinstance(err, (ConnectionError, TimeoutError)):
        return TypedError(
            ErrorKind.CONNECTION_PROBLEM,
            message or "connection problem",
            cause=err,
        )

    return err
