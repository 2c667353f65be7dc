"""mpdc - client for the Music Player Daemon protocol."""

from .client import MPDClient
from .config import Config, load_config
from .protocol import (
    ConnectError,
    ErrorCode,
    ErrorInfo,
    ProtocolError,
    Reply,
    ResponseShape,
    Session,
    transact,
)

__version__ = "0.1.0"

__all__ = [
    "MPDClient",
    "Config",
    "load_config",
    "ConnectError",
    "ErrorCode",
    "ErrorInfo",
    "ProtocolError",
    "Reply",
    "ResponseShape",
    "Session",
    "transact",
]
