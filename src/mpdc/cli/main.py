"""mpdc CLI main entry point."""

from __future__ import annotations

import logging
import sys

import click

from ..client import SUBSYSTEMS
from ..config import load_config
from ..protocol.messages import ResponseShape
from . import commands
from .commands import get_client
from .output import (
    format_outputs,
    format_playlists,
    format_queue,
    format_songs,
    format_status,
    format_values,
    print_reply,
)

ON_OFF = click.Choice(["on", "off"])


_console_handler: logging.StreamHandler | None = None


def _setup_logging(level_name: str) -> None:
    """Send mpdc logs to stderr."""
    global _console_handler
    level = getattr(logging, level_name.upper(), logging.WARNING)

    root_logger = logging.getLogger("mpdc")
    root_logger.setLevel(level)

    if _console_handler is None:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(formatter)
        root_logger.addHandler(_console_handler)
    else:
        # stderr may have been replaced since the handler was made
        _console_handler.setStream(sys.stderr)


def _on_off(state: str | None) -> bool | None:
    if state is None:
        return None
    return state == "on"


@click.group(invoke_without_command=True)
@click.option("--host", "-h", help="Server host or unix socket path")
@click.option("--port", "-p", type=int, help="Server port")
@click.option("--no-reconnect", is_flag=True, help="Fail instead of reconnecting")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON")
@click.option("--verbose", "-v", is_flag=True, help="Trace protocol lines")
@click.pass_context
def cli(ctx, host: str | None, port: int | None, no_reconnect: bool, json_output: bool, verbose: bool):
    """mpdc - Music Player Daemon client

    Talks to MPD over its line protocol. Host and port default to
    MPD_HOST / MPD_PORT, then ~/.config/mpdc/config.toml.
    """
    ctx.ensure_object(dict)
    config = load_config()

    if host:
        config.connection.host = host
    if port:
        config.connection.port = port
    if no_reconnect:
        config.connection.reconnect = False

    _setup_logging("debug" if verbose else config.client.log_level)

    ctx.obj["config"] = config
    ctx.obj["json"] = json_output

    if ctx.invoked_subcommand is None:
        ctx.invoke(status)


# Status commands


@cli.command("status")
@click.pass_context
def status(ctx):
    """Show current playback status."""
    status_reply, song_reply = commands.cmd_status(get_client(ctx))
    song = song_reply.value if song_reply.ok else None
    print_reply(status_reply, ctx.obj["json"], lambda data: format_status(data, song))


@cli.command("current")
@click.pass_context
def current(ctx):
    """Show the current song."""
    print_reply(get_client(ctx).currentsong(), ctx.obj["json"])


@cli.command("stats")
@click.pass_context
def stats(ctx):
    """Show database and uptime statistics."""
    print_reply(get_client(ctx).stats(), ctx.obj["json"])


@cli.command("idle")
@click.argument("subsystems", nargs=-1, type=click.Choice(SUBSYSTEMS))
@click.pass_context
def idle(ctx, subsystems: tuple[str, ...]):
    """Wait until a subsystem changes and print its name."""
    print_reply(get_client(ctx).idle(*subsystems), ctx.obj["json"], format_values)


# Playback commands


@cli.command("play")
@click.argument("position", type=click.IntRange(min=1), required=False)
@click.pass_context
def play(ctx, position: int | None):
    """Play the queue (1-based position) or resume playback."""
    songpos = position - 1 if position is not None else None
    print_reply(get_client(ctx).play(songpos), ctx.obj["json"])


@cli.command("pause")
@click.pass_context
def pause(ctx):
    """Pause playback."""
    print_reply(get_client(ctx).pause(), ctx.obj["json"])


@cli.command("stop")
@click.pass_context
def stop(ctx):
    """Stop playback."""
    print_reply(get_client(ctx).stop(), ctx.obj["json"])


@cli.command("next")
@click.pass_context
def next_track(ctx):
    """Skip to next song."""
    print_reply(get_client(ctx).next(), ctx.obj["json"])


@cli.command("prev")
@click.pass_context
def prev_track(ctx):
    """Go to previous song."""
    print_reply(get_client(ctx).previous(), ctx.obj["json"])


@cli.command("seek")
@click.argument("position")
@click.option("--song", type=click.IntRange(min=1), help="Queue position (1-based), default current")
@click.pass_context
def seek(ctx, position: str, song: int | None):
    """Seek to position (90, 1:30)."""
    songpos = song - 1 if song is not None else None
    print_reply(commands.cmd_seek(get_client(ctx), position, songpos), ctx.obj["json"])


@cli.command("volume")
@click.argument("level")
@click.pass_context
def volume(ctx, level: str):
    """Set volume (0-100, +N, -N)."""
    print_reply(commands.cmd_volume(get_client(ctx), level), ctx.obj["json"])


def _make_toggle(option: str) -> click.Command:
    @click.command(option, help=f"Toggle or set {option} mode.")
    @click.argument("state", type=ON_OFF, required=False)
    @click.pass_context
    def toggle(ctx, state: str | None):
        reply = commands.cmd_toggle(get_client(ctx), option, _on_off(state))
        print_reply(reply, ctx.obj["json"])

    return toggle


for _option in commands.TOGGLE_OPTIONS:
    cli.add_command(_make_toggle(_option))


# Queue commands


@cli.command("add")
@click.argument("uri")
@click.pass_context
def add(ctx, uri: str):
    """Add a file, directory or URL to the queue."""
    print_reply(get_client(ctx).add(uri), ctx.obj["json"])


@cli.command("clear")
@click.pass_context
def clear(ctx):
    """Clear the queue."""
    print_reply(get_client(ctx).clear(), ctx.obj["json"])


@cli.command("queue")
@click.pass_context
def queue(ctx):
    """Show queue contents."""
    reply, current_pos = commands.cmd_queue(get_client(ctx))
    print_reply(reply, ctx.obj["json"], lambda songs: format_queue(songs, current_pos))


# Database commands


@cli.command("find")
@click.argument("tag")
@click.argument("what")
@click.pass_context
def find(ctx, tag: str, what: str):
    """Find songs whose TAG is exactly WHAT."""
    print_reply(get_client(ctx).find(tag, what), ctx.obj["json"], format_songs)


@cli.command("search")
@click.argument("tag")
@click.argument("what")
@click.pass_context
def search(ctx, tag: str, what: str):
    """Find songs whose TAG contains WHAT."""
    print_reply(get_client(ctx).search(tag, what), ctx.obj["json"], format_songs)


@cli.command("list")
@click.argument("tag")
@click.argument("artist", required=False)
@click.pass_context
def list_tag(ctx, tag: str, artist: str | None):
    """List all values of TAG (albums optionally by ARTIST)."""
    print_reply(get_client(ctx).list(tag, artist), ctx.obj["json"], format_values)


@cli.command("ls")
@click.argument("uri", required=False)
@click.pass_context
def ls(ctx, uri: str | None):
    """List a database directory."""
    print_reply(get_client(ctx).lsinfo(uri), ctx.obj["json"], format_songs)


@cli.command("update")
@click.argument("uri", required=False)
@click.pass_context
def update(ctx, uri: str | None):
    """Rescan the music directory for changes."""
    print_reply(get_client(ctx).update(uri), ctx.obj["json"])


# Playlists and outputs


@cli.command("playlists")
@click.pass_context
def playlists(ctx):
    """List stored playlists."""
    print_reply(get_client(ctx).listplaylists(), ctx.obj["json"], format_playlists)


@cli.command("outputs")
@click.pass_context
def outputs(ctx):
    """List audio outputs."""
    print_reply(get_client(ctx).outputs(), ctx.obj["json"], format_outputs)


@cli.command("enable")
@click.argument("output_id", type=int)
@click.pass_context
def enable(ctx, output_id: int):
    """Enable an audio output."""
    print_reply(get_client(ctx).enableoutput(output_id), ctx.obj["json"])


@cli.command("disable")
@click.argument("output_id", type=int)
@click.pass_context
def disable(ctx, output_id: int):
    """Disable an audio output."""
    print_reply(get_client(ctx).disableoutput(output_id), ctx.obj["json"])


# Reflection


@cli.command("commands")
@click.pass_context
def list_commands(ctx):
    """List commands the server allows."""
    print_reply(get_client(ctx).commands(), ctx.obj["json"], format_values)


@cli.command("tagtypes")
@click.pass_context
def tagtypes(ctx):
    """List available tag types."""
    print_reply(get_client(ctx).tagtypes(), ctx.obj["json"], format_values)


@cli.command("raw")
@click.argument("tokens", nargs=-1, required=True)
@click.option(
    "--shape",
    "-s",
    type=click.Choice([s.value for s in ResponseShape]),
    default=ResponseShape.LINE.value,
    help="How to decode the reply",
)
@click.pass_context
def raw(ctx, tokens: tuple[str, ...], shape: str):
    """Send an arbitrary command."""
    print_reply(commands.cmd_raw(get_client(ctx), tokens, shape), ctx.obj["json"])


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
