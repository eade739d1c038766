"""Response-writer primitive consumed by the HTTP bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class ResponseWriter(Protocol):
    """Minimal header/status/body writer contract."""

    def set_header(self, name: str, value: str) -> None:
        """Set one response header before the status is written."""

    def write_header(self, status_code: int) -> None:
        """Write the response status code."""

    def write(self, data: bytes) -> None:
        """Append bytes to the response body."""


@dataclass
class BufferedResponseWriter:
    """In-memory writer collecting one response for later delivery."""

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytearray = field(default_factory=bytearray)

    def set_header(self, name: str, value: str) -> None:
        """Set one response header."""
        self.headers[name] = value

    def write_header(self, status_code: int) -> None:
        """Record the response status code."""
        self.status_code = status_code

    def write(self, data: bytes) -> None:
        """Append bytes to the buffered body."""
        self.body.extend(data)
