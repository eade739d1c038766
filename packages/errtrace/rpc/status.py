"""Native gRPC status errors and status extraction helpers."""

from __future__ import annotations

from dataclasses import dataclass

import grpc


class RpcStatusError(grpc.RpcError):
    """gRPC error carrying one status code and its details text."""

    def __init__(self, code: grpc.StatusCode, details: str = "") -> None:
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self) -> grpc.StatusCode:
        """Return the status code."""
        return self._code

    def details(self) -> str:
        """Return the status details text."""
        return self._details

    def __str__(self) -> str:
        return f"rpc error: code = {self._code.name} desc = {self._details}"


@dataclass(frozen=True, slots=True)
class RpcStatus:
    """Status code and message extracted from an error."""

    code: grpc.StatusCode
    message: str


def status_from_error(err: BaseException | None) -> RpcStatus | None:
    """Return the status of a native gRPC error, else ``None``."""
    if not isinstance(err, grpc.RpcError):
        return None
    code_fn = getattr(err, "code", None)
    if not callable(code_fn):
        return None
    code = code_fn()
    if not isinstance(code, grpc.StatusCode):
        return None
    details_fn = getattr(err, "details", None)
    details = details_fn() if callable(details_fn) else str(err)
    return RpcStatus(code=code, message=details or "")


def convert(err: BaseException) -> RpcStatus:
    """Return the status of ``err``, treating non-gRPC errors as UNKNOWN."""
    status = status_from_error(err)
    if status is not None:
        return status
    return RpcStatus(code=grpc.StatusCode.UNKNOWN, message=str(err))
