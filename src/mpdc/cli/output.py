"""Output formatting for CLI."""

from __future__ import annotations

import json
import sys
from typing import Any, Callable

from ..protocol.messages import Reply

STATE_ICONS = {"play": "▶", "pause": "⏸", "stop": "⏹"}


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS or HH:MM:SS."""
    if seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _float(value: str | None, default: float = 0.0) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def song_duration(song: dict) -> float:
    """Song length in seconds from ``duration`` or the older ``Time``."""
    if "duration" in song:
        return _float(song["duration"])
    return _float(song.get("Time"))


def format_track(song: dict | None, include_duration: bool = True) -> str:
    """Format a song record for display."""
    if not song:
        return "(no track)"

    parts = []

    if song.get("Artist"):
        parts.append(song["Artist"])

    if song.get("Title"):
        parts.append(song["Title"])
    elif song.get("Name"):
        parts.append(song["Name"])
    elif song.get("file"):
        parts.append(song["file"].split("/")[-1])

    text = " - ".join(parts) if parts else song.get("file", "(unknown)")

    duration = song_duration(song)
    if include_duration and duration > 0:
        text += f" [{format_time(duration)}]"

    return text


def format_status(status: dict, song: dict | None = None) -> str:
    """Format ``status`` (and ``currentsong``) for display."""
    lines = []

    state = status.get("state", "stop")
    state_icon = STATE_ICONS.get(state, "?")
    lines.append(f"{state_icon} {format_track(song, include_duration=False)}")

    # Progress bar
    if song and state != "stop":
        position = _float(status.get("elapsed"))
        duration = _float(status.get("duration")) or song_duration(song)

        if duration > 0:
            progress = min(position / duration, 1.0)
            bar_width = 40
            filled = int(bar_width * progress)
            bar = "▓" * filled + "░" * (bar_width - filled)
            lines.append(f"  {bar} {format_time(position)} / {format_time(duration)}")

    # Options
    volume = status.get("volume", "-1")
    volume_str = "n/a" if volume == "-1" else f"{volume}%"
    flags = [
        f"{name}: {'on' if status.get(name, '0') != '0' else 'off'}"
        for name in ("repeat", "random", "single", "consume")
    ]
    lines.append(f"  Volume: {volume_str}  {'  '.join(flags)}")

    # Queue info
    queue_len = int(status.get("playlistlength", "0") or 0)
    if queue_len > 0 and "song" in status:
        lines.append(f"  Queue: {int(status['song']) + 1}/{queue_len}")

    if status.get("error"):
        lines.append(f"  Error: {status['error']}")

    return "\n".join(lines)


def format_queue(songs: list[dict], current: int | None = None) -> str:
    """Format ``playlistinfo`` records for display."""
    songs = [s for s in songs if s]

    if not songs:
        return "(empty queue)"

    lines = []
    for i, song in enumerate(songs):
        pos = int(song.get("Pos", i))
        prefix = "▶ " if pos == current else "  "
        lines.append(f"{prefix}{pos + 1}. {format_track(song)}")

    return "\n".join(lines)


def format_songs(songs: list[dict]) -> str:
    """Format database results (find, search, lsinfo)."""
    lines = []
    for entry in songs:
        if not entry:
            continue
        if "directory" in entry:
            lines.append(f"{entry['directory']}/")
        elif "playlist" in entry and "file" not in entry:
            lines.append(f"{entry['playlist']} (playlist)")
        else:
            lines.append(format_track(entry))

    return "\n".join(lines) if lines else "(no results)"


def format_playlists(playlists: list[dict]) -> str:
    """Format ``listplaylists`` records for display."""
    playlists = [p for p in playlists if p]

    if not playlists:
        return "(no saved playlists)"

    lines = []
    for pl in playlists:
        name = pl.get("playlist", "?")
        modified = pl.get("Last-Modified")
        lines.append(f"  {name}  ({modified})" if modified else f"  {name}")

    return "\n".join(lines)


def format_outputs(outputs: list[dict]) -> str:
    """Format ``outputs`` records for display."""
    outputs = [o for o in outputs if o]

    if not outputs:
        return "(no audio outputs)"

    lines = []
    for output in outputs:
        enabled = output.get("outputenabled") == "1"
        marker = "*" if enabled else " "
        lines.append(f"{marker} {output.get('outputid', '?')}: {output.get('outputname', '?')}")

    return "\n".join(lines)


def format_values(values: list[str]) -> str:
    return "\n".join(values) if values else "(none)"


def format_value(value: Any) -> str:
    """Default formatting for any decoded reply value."""
    if isinstance(value, dict):
        return "\n".join(f"{k}: {v}" for k, v in value.items())
    if isinstance(value, list):
        blocks = [format_value(item) for item in value]
        separator = "\n\n" if value and isinstance(value[0], dict) else "\n"
        return separator.join(blocks)
    return str(value)


def print_reply(
    reply: Reply,
    json_output: bool = False,
    formatter: Callable[[Any], str] | None = None,
) -> None:
    """Print a reply to stdout, or its error to stderr and exit 1."""
    if json_output:
        print(json.dumps(reply.to_dict(), indent=2))
        if not reply.ok:
            sys.exit(1)
        return

    if not reply.ok:
        error = reply.error
        if error:
            print(f"Error [{error.code.value}]: {error.message}", file=sys.stderr)
        else:
            print("Unknown error", file=sys.stderr)
        sys.exit(1)

    value = reply.value

    if formatter:
        print(formatter(value))
    elif value:
        print(format_value(value))
    else:
        print("OK")
