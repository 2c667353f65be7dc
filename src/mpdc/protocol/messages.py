"""Protocol message definitions for the MPD wire protocol."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Generic, Sequence, TypeVar, Union

ENCODING = "utf-8"
TERMINATOR = "OK"
ERROR_PREFIX = "ACK"
GREETING_PREFIX = "OK MPD "

T = TypeVar("T")


class ResponseShape(str, Enum):
    """How the body of a successful reply is decoded."""

    LINE = "line"
    MAP = "map"
    LIST = "list"
    RECORD_LIST = "record-list"

    @classmethod
    def coerce(cls, tag: ResponseShape | str) -> ResponseShape:
        """Turn a shape or tag string into a ResponseShape.

        Raises ValueError for unrecognized tags.
        """
        if isinstance(tag, ResponseShape):
            return tag
        tag = _LEGACY_TAGS.get(tag, tag)
        return cls(tag)


_LEGACY_TAGS = {
    "table": ResponseShape.MAP.value,
    "table-list": ResponseShape.RECORD_LIST.value,
}


class ErrorCode(str, Enum):
    """Error codes for failed replies."""

    # Transport errors
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    CONNECTION_CLOSED = "CONNECTION_CLOSED"
    RECONNECT_FAILED = "RECONNECT_FAILED"
    NOT_CONNECTED = "NOT_CONNECTED"

    # Server errors
    SERVER_ERROR = "SERVER_ERROR"

    # Protocol errors
    UNSUPPORTED_SHAPE = "UNSUPPORTED_SHAPE"
    INVALID_ARGS = "INVALID_ARGS"


class AckError(IntEnum):
    """Numeric error codes carried in MPD's ACK lines."""

    NOT_LIST = 1
    ARG = 2
    PASSWORD = 3
    PERMISSION = 4
    UNKNOWN = 5
    NO_EXIST = 50
    PLAYLIST_MAX = 51
    SYSTEM = 52
    PLAYLIST_LOAD = 53
    UPDATE_ALREADY = 54
    PLAYER_SYNC = 55
    EXIST = 56


_ACK_RE = re.compile(r"^ACK \[(\d+)@(\d+)\] \{([^}]*)\}\s?(.*)$")


@dataclass
class AckInfo:
    """Fields of an ``ACK [code@index] {command} message`` line."""

    code: int
    index: int
    command: str
    message: str

    @property
    def error(self) -> AckError | None:
        try:
            return AckError(self.code)
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "index": self.index,
            "command": self.command,
            "message": self.message,
        }


def parse_ack(line: str) -> AckInfo | None:
    """Split an ACK line into its fields, or None if it has another form."""
    match = _ACK_RE.match(line)
    if not match:
        return None
    code, index, command, message = match.groups()
    return AckInfo(code=int(code), index=int(index), command=command, message=message)


@dataclass
class ErrorInfo:
    """Error information in a failed reply."""

    code: ErrorCode
    category: str
    message: str
    ack: AckInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
        }
        if self.ack:
            result["ack"] = self.ack.to_dict()
        return result

    @classmethod
    def server(cls, line: str) -> ErrorInfo:
        """Error for an ACK line; the message is the line verbatim."""
        return cls(
            code=ErrorCode.SERVER_ERROR,
            category="server",
            message=line,
            ack=parse_ack(line),
        )


class ProtocolError(Exception):
    """Raised by Reply.unwrap() for a failed reply."""

    def __init__(self, error: ErrorInfo):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code


@dataclass
class Reply(Generic[T]):
    """Decoded result of one transaction."""

    ok: bool
    shape: ResponseShape | None = None
    value: T | None = None
    error: ErrorInfo | None = None

    @classmethod
    def success(cls, shape: ResponseShape, value: T) -> Reply[T]:
        return cls(ok=True, shape=shape, value=value)

    @classmethod
    def failure(cls, error: ErrorInfo) -> Reply[Any]:
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        """Return the decoded value, raising ProtocolError on failure."""
        if not self.ok:
            raise ProtocolError(
                self.error
                or ErrorInfo(code=ErrorCode.TRANSPORT_ERROR, category="protocol", message="Unknown error")
            )
        return self.value  # type: ignore[return-value]

    def _expect(self, shape: ResponseShape) -> Any:
        value = self.unwrap()
        if self.shape is not shape:
            raise TypeError(f"Reply has shape {self.shape.value}, not {shape.value}")
        return value

    @property
    def text(self) -> str:
        return self._expect(ResponseShape.LINE)

    @property
    def mapping(self) -> dict[str, str]:
        return self._expect(ResponseShape.MAP)

    @property
    def items(self) -> list[str]:
        return self._expect(ResponseShape.LIST)

    @property
    def records(self) -> list[dict[str, str]]:
        return self._expect(ResponseShape.RECORD_LIST)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"ok": self.ok}
        if self.ok:
            result["shape"] = self.shape.value if self.shape else None
            result["data"] = self.value
        else:
            result["error"] = self.error.to_dict() if self.error else {}
        return result


Command = Union[str, Sequence[str]]


def encode_command(command: Command) -> bytes:
    """Serialize a command to its wire form.

    Tokens are joined by single spaces and terminated by CRLF. A bare
    string is the sole token.
    """
    tokens = [command] if isinstance(command, str) else list(command)
    for token in tokens:
        if "\r" in token or "\n" in token:
            raise ValueError(f"Line break in command token: {token!r}")
    return (" ".join(tokens) + "\r\n").encode(ENCODING)


_NEEDS_QUOTING = re.compile(r'[\s"\\]')


def quote(arg: str) -> str:
    """Quote an argument for MPD if it would not survive as a bare token."""
    if arg and not _NEEDS_QUOTING.search(arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_int(value: int) -> str:
    """Decimal integer argument with no separators."""
    return str(int(value))


def format_bool(flag: bool) -> str:
    return "1" if flag else "0"
