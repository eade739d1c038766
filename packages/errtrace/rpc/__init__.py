"""Public gRPC bridge API."""

from .bridge import DEBUG_REPORT_METADATA, RpcBridge, metadata_map, metadata_pairs
from .status import RpcStatus, RpcStatusError, convert, status_from_error

__all__ = [
    "DEBUG_REPORT_METADATA",
    "RpcBridge",
    "RpcStatus",
    "RpcStatusError",
    "convert",
    "metadata_map",
    "metadata_pairs",
    "status_from_error",
]
