"""TCP transport implementation using Python sockets."""

from __future__ import annotations

import socket

from stm32detect.core.errors import (
    TransportConnectError,
    TransportReceiveError,
    TransportSendError,
    TransportTimeoutError,
)

_RECV_SIZE = 512


class TCPConnection:
    def __init__(self, sock: socket.socket) -> None:
        self._sock: socket.socket | None = sock

    @property
    def closed(self) -> bool:
        return self._sock is None

    def _socket(self, error_cls: type[TransportSendError | TransportReceiveError]) -> socket.socket:
        if self._sock is None:
            raise error_cls("Connection is closed")
        return self._sock

    def write(self, data: bytes) -> None:
        try:
            self._socket(TransportSendError).sendall(data)
        except OSError as exc:
            raise TransportSendError(f"TCP send failed: {exc}") from exc

    def read(self, *, timeout_s: float) -> bytes | None:
        sock = self._socket(TransportReceiveError)
        sock.settimeout(timeout_s)
        try:
            return sock.recv(_RECV_SIZE)
        except TimeoutError:
            return None
        except OSError as exc:
            raise TransportReceiveError(f"TCP receive failed: {exc}") from exc

    def close(self) -> None:
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        sock.close()


class TCPTransport:
    def connect(self, host: str, port: int, *, timeout_s: float = 3.0) -> TCPConnection:
        try:
            sock = socket.create_connection((host, port), timeout=timeout_s)
        except TimeoutError as exc:
            raise TransportTimeoutError(f"TCP connect to {host}:{port} timed out") from exc
        except OSError as exc:
            raise TransportConnectError(f"{exc.strerror or exc}") from exc
        return TCPConnection(sock)
