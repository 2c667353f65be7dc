"""Command send / reply receive cycle with one transparent reconnect."""

from __future__ import annotations

import logging
from typing import Any

from .messages import (
    ERROR_PREFIX,
    TERMINATOR,
    Command,
    ErrorCode,
    ErrorInfo,
    Reply,
    ResponseShape,
    encode_command,
    quote,
)
from .parser import parse_reply, unsupported_shape
from .session import Session
from .transport import ConnectError, ConnectionClosed, Transport, TransportError

# A closed connection is retried at most this many times per call.
MAX_RECONNECTS = 1

_logger = logging.getLogger("mpdc.transaction")
_wire = logging.getLogger("mpdc.wire")


class _ServerRejected(Exception):
    def __init__(self, line: str):
        self.line = line
        super().__init__(line)


def _transport_of(session: Session) -> Transport:
    if session.transport is None:
        raise ConnectionClosed("not connected")
    return session.transport


def _send(transport: Transport, payload: bytes) -> None:
    _wire.debug(f"SEND: {payload.decode(errors='replace').rstrip()}")
    transport.write(payload)


def _receive(transport: Transport) -> list[str]:
    """Read lines up to the terminator; the terminator is not included."""
    lines: list[str] = []
    while True:
        line = transport.read_line()
        _wire.debug(f"GOT: {line}")
        if line == TERMINATOR:
            return lines
        if line.startswith(ERROR_PREFIX):
            raise _ServerRejected(line)
        lines.append(line)


def _exchange(session: Session, payload: bytes) -> list[str]:
    transport = _transport_of(session)
    _send(transport, payload)
    return _receive(transport)


def _authenticate(session: Session) -> None:
    """Send the session password on a freshly opened connection."""
    if not session.password:
        return
    try:
        _exchange(session, encode_command(["password", quote(session.password)]))
    except _ServerRejected as e:
        session.disconnect()
        raise ConnectError(f"Password rejected: {e.line}") from e
    except TransportError as e:
        session.disconnect()
        raise ConnectError(f"Authentication failed: {e}") from e


def _transport_failure(code: ErrorCode, message: str) -> Reply[Any]:
    return Reply.failure(ErrorInfo(code=code, category="transport", message=message))


def transact(
    session: Session,
    command: Command,
    shape: ResponseShape | str = ResponseShape.LINE,
) -> Reply[Any]:
    """Send a command and decode its reply.

    A closed connection triggers one reconnect and a fresh attempt of the
    whole exchange, if the session allows reconnecting. Every failure is
    returned as a failed Reply; nothing is raised for transport or server
    errors.
    """
    try:
        shape = ResponseShape.coerce(shape)
    except (ValueError, TypeError):
        return Reply.failure(unsupported_shape(shape))

    try:
        payload = encode_command(command)
    except ValueError as e:
        return Reply.failure(
            ErrorInfo(code=ErrorCode.INVALID_ARGS, category="protocol", message=str(e))
        )

    if session.transport is None and not session.auto_reconnect:
        return _transport_failure(ErrorCode.NOT_CONNECTED, f"Not connected to {session.address}")

    reconnects = 0
    while True:
        try:
            lines = _exchange(session, payload)
        except _ServerRejected as e:
            return Reply.failure(ErrorInfo.server(e.line))
        except ConnectionClosed as e:
            if not session.auto_reconnect or reconnects >= MAX_RECONNECTS:
                _logger.warning(f"Connection to {session.address} closed: {e}")
                session.disconnect()
                return _transport_failure(ErrorCode.CONNECTION_CLOSED, str(e))
            reconnects += 1
            try:
                session.reconnect()
                _authenticate(session)
            except ConnectError as ce:
                _logger.warning(str(ce))
                return _transport_failure(ErrorCode.RECONNECT_FAILED, str(ce))
            continue
        except TransportError as e:
            # The rest of the reply is still unread; start over on the next call.
            _logger.warning(f"Transport error on {session.address}: {e}")
            session.disconnect()
            return _transport_failure(ErrorCode.TRANSPORT_ERROR, str(e))

        return parse_reply(lines, shape)


def send_only(session: Session, command: Command) -> Reply[Any]:
    """Write a command that has no reply of its own.

    Never reconnects and never touches the session's transport handle, so
    it is safe to call while another thread is blocked in transact().
    """
    try:
        payload = encode_command(command)
    except ValueError as e:
        return Reply.failure(
            ErrorInfo(code=ErrorCode.INVALID_ARGS, category="protocol", message=str(e))
        )
    if session.transport is None:
        return _transport_failure(ErrorCode.NOT_CONNECTED, f"Not connected to {session.address}")
    try:
        _send(session.transport, payload)
    except ConnectionClosed as e:
        return _transport_failure(ErrorCode.CONNECTION_CLOSED, str(e))
    except TransportError as e:
        return _transport_failure(ErrorCode.TRANSPORT_ERROR, str(e))
    return Reply.success(ResponseShape.LINE, "")
