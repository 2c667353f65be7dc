"""CLI command implementations."""

from __future__ import annotations

import sys

import click

from ..client import MPDClient
from ..config import Config
from ..protocol.messages import ErrorCode, ErrorInfo, Reply
from ..protocol.transport import ConnectError, SocketTransport

TOGGLE_OPTIONS = ("repeat", "random", "single", "consume")


def get_client(ctx: click.Context) -> MPDClient:
    """Connect on first use and reuse the client for the rest of the command."""
    obj = ctx.find_root().obj
    if obj.get("client") is None:
        config: Config = obj["config"]
        factory = obj.get("transport_factory") or SocketTransport.open
        try:
            client = MPDClient.from_config(config, transport_factory=factory)
        except ConnectError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        obj["client"] = client
        ctx.find_root().call_on_close(client.disconnect)
    return obj["client"]


def parse_time(position: str) -> int:
    """Parse seconds given as 90, 1:30 or 1:01:30."""
    parts = position.split(":")
    try:
        if len(parts) == 1:
            return int(float(parts[0]))
        if len(parts) == 2:
            return int(parts[0]) * 60 + int(float(parts[1]))
        if len(parts) == 3:
            return int(parts[0]) * 3600 + int(parts[1]) * 60 + int(float(parts[2]))
    except ValueError:
        pass
    raise ValueError(f"Invalid time format: {position}")


def _invalid(message: str) -> Reply:
    return Reply.failure(
        ErrorInfo(code=ErrorCode.INVALID_ARGS, category="protocol", message=message)
    )


def cmd_status(client: MPDClient) -> tuple[Reply, Reply]:
    """Status and current song."""
    status = client.status()
    if not status.ok:
        return status, status
    return status, client.currentsong()


def cmd_toggle(client: MPDClient, option: str, enabled: bool | None) -> Reply:
    """Set a playback option, or flip it when no state is given."""
    if option not in TOGGLE_OPTIONS:
        return _invalid(f"Unknown option: {option}")

    if enabled is None:
        status = client.status()
        if not status.ok:
            return status
        enabled = status.value.get(option, "0") == "0"

    return getattr(client, option)(enabled)


def cmd_volume(client: MPDClient, level: str) -> Reply:
    """Set volume (0-100), or change it relative to now with +N / -N."""
    try:
        amount = int(level)
    except ValueError:
        return _invalid(f"Invalid volume: {level}")

    if level.startswith(("+", "-")):
        status = client.status()
        if not status.ok:
            return status
        current = int(status.value.get("volume", "-1"))
        if current < 0:
            return _invalid("Volume not available")
        amount = current + amount

    return client.setvol(max(0, min(100, amount)))


def cmd_seek(client: MPDClient, position: str, songpos: int | None) -> Reply:
    """Seek in the given song, or in the current one."""
    try:
        seconds = parse_time(position)
    except ValueError as e:
        return _invalid(str(e))

    if songpos is None:
        status = client.status()
        if not status.ok:
            return status
        if "song" not in status.value:
            return _invalid("No current song")
        songpos = int(status.value["song"])

    return client.seek(songpos, seconds)


def cmd_queue(client: MPDClient) -> tuple[Reply, int | None]:
    """Queue contents and the position of the current song."""
    queue = client.playlistinfo()
    if not queue.ok:
        return queue, None
    status = client.status()
    current = None
    if status.ok and "song" in status.value:
        current = int(status.value["song"])
    return queue, current


def cmd_raw(client: MPDClient, tokens: tuple[str, ...], shape: str) -> Reply:
    """Send tokens as one command line."""
    if not tokens:
        return _invalid("No command given")
    return client.command(list(tokens), shape)
