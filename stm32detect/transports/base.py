"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol


class Connection(Protocol):
    def write(self, data: bytes) -> None:
        """Write all of ``data`` or raise TransportSendError."""

    def read(self, *, timeout_s: float) -> bytes | None:
        """Return the next chunk, None on timeout, or b"" once the peer has closed."""

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""


class Transport(Protocol):
    def connect(self, host: str, port: int, *, timeout_s: float = 3.0) -> Connection:
        """Open a stream connection or raise TransportConnectError/TransportTimeoutError."""
