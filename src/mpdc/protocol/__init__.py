"""MPD protocol - line-oriented request/response over a socket."""

from .messages import (
    AckError,
    AckInfo,
    Command,
    ErrorCode,
    ErrorInfo,
    ProtocolError,
    Reply,
    ResponseShape,
    encode_command,
    format_bool,
    format_int,
    parse_ack,
    quote,
)
from .parser import parse_pair, parse_reply
from .session import DEFAULT_HOST, DEFAULT_PORT, Session
from .transaction import MAX_RECONNECTS, send_only, transact
from .transport import (
    ConnectError,
    ConnectionClosed,
    SocketTransport,
    Transport,
    TransportError,
)

__all__ = [
    "AckError",
    "AckInfo",
    "Command",
    "ErrorCode",
    "ErrorInfo",
    "ProtocolError",
    "Reply",
    "ResponseShape",
    "encode_command",
    "format_bool",
    "format_int",
    "parse_ack",
    "quote",
    "parse_pair",
    "parse_reply",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "Session",
    "MAX_RECONNECTS",
    "send_only",
    "transact",
    "ConnectError",
    "ConnectionClosed",
    "SocketTransport",
    "Transport",
    "TransportError",
]
