"""Socket transport carrying the MPD line protocol."""

from __future__ import annotations

import socket
from typing import BinaryIO, Callable, Protocol

from .messages import ENCODING


class TransportError(Exception):
    """Read or write failure not caused by the peer closing the connection."""


class ConnectionClosed(TransportError):
    """The peer closed the connection (EOF, broken pipe, reset)."""


class ConnectError(Exception):
    """Opening a connection to the server failed."""


class Transport(Protocol):
    """Bidirectional line stream used by a Session."""

    def write(self, data: bytes) -> None: ...

    def read_line(self) -> str: ...

    def close(self) -> None: ...


TransportFactory = Callable[[str, int, "float | None"], Transport]

_CLOSED_ERRORS = (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)


class SocketTransport:
    """Transport over a TCP or unix-domain stream socket."""

    def __init__(self, sock: socket.socket):
        self._sock = sock
        self._file: BinaryIO = sock.makefile("rb")

    @classmethod
    def open(cls, host: str, port: int, timeout: float | None = None) -> SocketTransport:
        """Connect to host:port, or to the unix socket at host if it is a path.

        Raises OSError if the connection cannot be made.
        """
        if host.startswith("/"):
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            sock.settimeout(timeout)
            try:
                sock.connect(host)
            except OSError:
                sock.close()
                raise
        else:
            sock = socket.create_connection((host, port), timeout=timeout)
        return cls(sock)

    def write(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except _CLOSED_ERRORS as e:
            raise ConnectionClosed(str(e) or "closed") from e
        except OSError as e:
            raise TransportError(str(e) or type(e).__name__) from e

    def read_line(self) -> str:
        """Read one line, without its line terminator."""
        try:
            raw = self._file.readline()
        except _CLOSED_ERRORS as e:
            raise ConnectionClosed(str(e) or "closed") from e
        except OSError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        if not raw:
            raise ConnectionClosed("closed")
        line = raw.decode(ENCODING, errors="replace")
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def close(self) -> None:
        try:
            self._file.close()
        finally:
            self._sock.close()
