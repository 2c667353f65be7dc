"""Decoding of MPD reply bodies."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from .messages import ErrorCode, ErrorInfo, Reply, ResponseShape


def parse_pair(line: str) -> tuple[str, str] | None:
    """Split a ``KEY: VALUE`` line at the first ``": "``."""
    key, sep, value = line.partition(": ")
    if not sep:
        return None
    return key, value


def _pairs(lines: Iterable[str]) -> Iterable[tuple[str, str]]:
    for line in lines:
        pair = parse_pair(line)
        if pair is not None:
            yield pair


def parse_reply(lines: Sequence[str], shape: ResponseShape | str) -> Reply[Any]:
    """Decode the lines of a successful reply into the requested shape.

    Lines that are not ``KEY: VALUE`` pairs are skipped for every shape
    except LINE, which keeps every line verbatim.
    """
    try:
        shape = ResponseShape.coerce(shape)
    except (ValueError, TypeError):
        return Reply.failure(unsupported_shape(shape))

    if shape is ResponseShape.LINE:
        return Reply.success(shape, "\n".join(lines))

    if shape is ResponseShape.LIST:
        return Reply.success(shape, [value for _, value in _pairs(lines)])

    if shape is ResponseShape.MAP:
        table: dict[str, str] = {}
        for key, value in _pairs(lines):
            table[key] = value
        return Reply.success(shape, table)

    if shape is ResponseShape.RECORD_LIST:
        records: list[dict[str, str]] = []
        current: dict[str, str] = {}
        for key, value in _pairs(lines):
            if key in current:
                records.append(current)
                current = {}
            current[key] = value
        # The last record is kept even when empty.
        records.append(current)
        return Reply.success(shape, records)

    return Reply.failure(unsupported_shape(shape))


def unsupported_shape(tag: Any) -> ErrorInfo:
    name = tag.value if isinstance(tag, ResponseShape) else tag
    return ErrorInfo(
        code=ErrorCode.UNSUPPORTED_SHAPE,
        category="protocol",
        message=f"Unsupported response shape: {name!r}",
    )
