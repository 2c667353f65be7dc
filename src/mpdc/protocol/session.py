"""Connection state for one MPD server."""

from __future__ import annotations

import logging

from .messages import GREETING_PREFIX
from .transport import (
    ConnectError,
    SocketTransport,
    Transport,
    TransportError,
    TransportFactory,
)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600

_logger = logging.getLogger("mpdc.session")


class Session:
    """Owns the transport handle and the parameters needed to reopen it.

    A Session holds at most one live transport. It performs no locking and
    never reconnects on its own; the transaction engine decides when
    reconnect() is warranted.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        reconnect: bool = True,
        timeout: float | None = None,
        password: str | None = None,
        transport_factory: TransportFactory = SocketTransport.open,
    ):
        self.host = host
        self.port = port
        self.auto_reconnect = reconnect
        self.timeout = timeout
        self.password = password
        self.server_version: str | None = None
        self.transport: Transport | None = None
        self._transport_factory = transport_factory

    @classmethod
    def connect(
        cls,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        reconnect: bool = True,
        timeout: float | None = None,
        password: str | None = None,
        transport_factory: TransportFactory = SocketTransport.open,
    ) -> Session:
        """Open a session. Raises ConnectError; does not retry."""
        session = cls(
            host=host,
            port=port,
            reconnect=reconnect,
            timeout=timeout,
            password=password,
            transport_factory=transport_factory,
        )
        session.transport = session._open()
        return session

    @property
    def address(self) -> str:
        if self.host.startswith("/"):
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def connected(self) -> bool:
        return self.transport is not None

    def _open(self) -> Transport:
        """Open a transport and consume the server greeting."""
        try:
            transport = self._transport_factory(self.host, self.port, self.timeout)
        except OSError as e:
            raise ConnectError(f"Cannot connect to {self.address}: {e}") from e

        try:
            greeting = transport.read_line()
        except TransportError as e:
            transport.close()
            raise ConnectError(f"No greeting from {self.address}: {e}") from e

        if not greeting.startswith(GREETING_PREFIX):
            transport.close()
            raise ConnectError(f"Unexpected greeting from {self.address}: {greeting!r}")

        self.server_version = greeting[len(GREETING_PREFIX):].strip()
        _logger.debug(f"Connected to {self.address} (MPD {self.server_version})")
        return transport

    def reconnect(self) -> None:
        """Replace the transport with a fresh one.

        The old handle is closed first. Raises ConnectError and leaves the
        session disconnected if the new connection cannot be opened.
        """
        self.disconnect()
        _logger.info(f"Reconnecting to {self.address}")
        self.transport = self._open()

    def disconnect(self) -> None:
        """Close and drop the transport, if any."""
        transport, self.transport = self.transport, None
        if transport is None:
            return
        try:
            transport.close()
        except OSError as e:
            _logger.debug(f"Error closing transport: {e}")
