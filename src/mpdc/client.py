"""MPD command catalog.

Every method maps its arguments to one command line and a fixed reply
shape, and returns the Reply produced by the transaction engine.
"""

from __future__ import annotations

from typing import Any

from .config import Config
from .protocol.messages import (
    Command,
    Reply,
    ResponseShape,
    format_bool,
    format_int,
    quote,
)
from .protocol.session import DEFAULT_HOST, DEFAULT_PORT, Session
from .protocol.transaction import send_only, transact
from .protocol.transport import ConnectError, SocketTransport, TransportFactory

Table = dict[str, str]
Values = list[str]
Records = list[dict[str, str]]

REPLAY_GAIN_MODES = ("off", "track", "album", "auto")

SUBSYSTEMS = (
    "database",
    "update",
    "stored_playlist",
    "playlist",
    "player",
    "mixer",
    "output",
    "options",
    "sticker",
    "subscription",
    "message",
)


def _arg(value: int | str) -> str:
    """Format a positional argument: integers as decimal, strings quoted."""
    if isinstance(value, int):
        return format_int(value)
    return quote(value)


class MPDClient:
    """Typed command surface over one Session.

    Not thread-safe: callers sharing a client across threads must serialize
    calls. The only exception is noidle(), which may be called while
    another thread is blocked in idle().
    """

    def __init__(self, session: Session):
        self.session = session

    @classmethod
    def connect(
        cls,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        reconnect: bool = True,
        timeout: float | None = None,
        password: str | None = None,
        transport_factory: TransportFactory = SocketTransport.open,
    ) -> MPDClient:
        """Connect, and authenticate if a password is given.

        Raises ConnectError if the server cannot be reached or rejects the
        password.
        """
        session = Session.connect(
            host=host,
            port=port,
            reconnect=reconnect,
            timeout=timeout,
            password=password,
            transport_factory=transport_factory,
        )
        client = cls(session)
        if password:
            reply = client.password(password)
            if not reply.ok:
                session.disconnect()
                raise ConnectError(f"Password rejected: {reply.error.message}")
        return client

    @classmethod
    def from_config(
        cls,
        config: Config,
        transport_factory: TransportFactory = SocketTransport.open,
    ) -> MPDClient:
        conn = config.connection
        return cls.connect(
            host=conn.host,
            port=conn.port,
            reconnect=conn.reconnect,
            timeout=conn.timeout_or_none,
            password=conn.password or None,
            transport_factory=transport_factory,
        )

    def __enter__(self) -> MPDClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.disconnect()

    def disconnect(self) -> None:
        """Drop the connection without telling the server."""
        self.session.disconnect()

    @property
    def server_version(self) -> str | None:
        return self.session.server_version

    # Raw access

    def command(
        self, command: Command, shape: ResponseShape | str = ResponseShape.LINE
    ) -> Reply[Any]:
        """Send an arbitrary command."""
        return transact(self.session, command, shape)

    def _line(self, *tokens: str) -> Reply[str]:
        return transact(self.session, tokens, ResponseShape.LINE)

    def _map(self, *tokens: str) -> Reply[Table]:
        return transact(self.session, tokens, ResponseShape.MAP)

    def _list(self, *tokens: str) -> Reply[Values]:
        return transact(self.session, tokens, ResponseShape.LIST)

    def _records(self, *tokens: str) -> Reply[Records]:
        return transact(self.session, tokens, ResponseShape.RECORD_LIST)

    # Status

    def clearerror(self) -> Reply[str]:
        """Clear the current error message in status."""
        return self._line("clearerror")

    def currentsong(self) -> Reply[Table]:
        return self._map("currentsong")

    def idle(self, *subsystems: str) -> Reply[Values]:
        """Block until one of the subsystems changes.

        Returns the names of the changed subsystems. With no arguments,
        waits on all of them.
        """
        return self._list("idle", *subsystems)

    def noidle(self) -> Reply[str]:
        """Cancel a pending idle() on this connection.

        This command has no reply of its own: the pending idle() returns
        instead. Sent without reading, so it may be called from another
        thread while idle() is blocked.
        """
        return send_only(self.session, "noidle")

    def status(self) -> Reply[Table]:
        return self._map("status")

    def stats(self) -> Reply[Table]:
        return self._map("stats")

    # Playback options

    def consume(self, state: bool) -> Reply[str]:
        """Remove each song from the queue after it is played."""
        return self._line("consume", format_bool(state))

    def crossfade(self, seconds: int = 0) -> Reply[str]:
        return self._line("crossfade", format_int(seconds))

    def random(self, state: bool) -> Reply[str]:
        return self._line("random", format_bool(state))

    def repeat(self, state: bool) -> Reply[str]:
        return self._line("repeat", format_bool(state))

    def setvol(self, volume: int) -> Reply[str]:
        """Set volume, 0-100."""
        return self._line("setvol", format_int(volume))

    def single(self, state: bool) -> Reply[str]:
        """Stop after the current song, or repeat it if repeat is on."""
        return self._line("single", format_bool(state))

    def replay_gain_mode(self, mode: str) -> Reply[str]:
        if mode not in REPLAY_GAIN_MODES:
            raise ValueError(f"Bad replay gain mode: {mode}")
        return self._line("replay_gain_mode", mode)

    def replay_gain_status(self) -> Reply[Table]:
        return self._map("replay_gain_status")

    # Playback control

    def next(self) -> Reply[str]:
        return self._line("next")

    def pause(self, flag: bool = True) -> Reply[str]:
        return self._line("pause", format_bool(flag))

    def unpause(self) -> Reply[str]:
        return self.pause(False)

    def play(self, songpos: int | None = None) -> Reply[str]:
        """Play the queue at SONGPOS, or resume if no position is given."""
        if songpos is None:
            return self._line("play")
        return self._line("play", format_int(songpos))

    def playid(self, songid: int | None = None) -> Reply[str]:
        if songid is None:
            return self._line("playid")
        return self._line("playid", format_int(songid))

    def previous(self) -> Reply[str]:
        return self._line("previous")

    def seek(self, songpos: int, time: int) -> Reply[str]:
        """Seek to TIME seconds into the song at SONGPOS."""
        return self._line("seek", format_int(songpos), format_int(time))

    def seekid(self, songid: int, time: int) -> Reply[str]:
        return self._line("seekid", format_int(songid), format_int(time))

    def stop(self) -> Reply[str]:
        return self._line("stop")

    # The queue

    def add(self, uri: str) -> Reply[str]:
        """Add a file or directory (recursively) to the queue."""
        return self._line("add", quote(uri))

    def addid(self, uri: str, position: int | None = None) -> Reply[Table]:
        """Add a single file and return its song id as ``{"Id": ...}``."""
        if position is None:
            return self._map("addid", quote(uri))
        return self._map("addid", quote(uri), format_int(position))

    def clear(self) -> Reply[str]:
        return self._line("clear")

    def delete(self, spec: int | str) -> Reply[str]:
        """Delete the song at a position, or a ``START:END`` range."""
        return self._line("delete", _arg(spec))

    def deleteid(self, songid: int) -> Reply[str]:
        return self._line("deleteid", format_int(songid))

    def move(self, spec: int | str, to: int) -> Reply[str]:
        """Move the song at a position, or a ``START:END`` range, to TO."""
        return self._line("move", _arg(spec), format_int(to))

    def moveid(self, songid: int, to: int) -> Reply[str]:
        """Move a song by id. A negative TO is relative to the current song."""
        return self._line("moveid", format_int(songid), format_int(to))

    def playlistfind(self, tag: str, value: str) -> Reply[Records]:
        """Exact-match search of the queue."""
        return self._records("playlistfind", quote(tag), quote(value))

    def playlistid(self, songid: int | None = None) -> Reply[Records]:
        if songid is None:
            return self._records("playlistid")
        return self._records("playlistid", format_int(songid))

    def playlistinfo(self, spec: int | str | None = None) -> Reply[Records]:
        """Songs in the queue, or one position, or a ``START:END`` range."""
        if spec is None:
            return self._records("playlistinfo")
        return self._records("playlistinfo", _arg(spec))

    def playlistsearch(self, tag: str, value: str) -> Reply[Records]:
        """Case-insensitive partial-match search of the queue."""
        return self._records("playlistsearch", quote(tag), quote(value))

    def plchanges(self, version: int) -> Reply[Records]:
        """Songs changed in the queue since VERSION."""
        return self._records("plchanges", format_int(version))

    def plchangesposid(self, version: int) -> Reply[Records]:
        """Like plchanges, but only ``cpos`` and ``Id`` of each song."""
        return self._records("plchangesposid", format_int(version))

    def shuffle(self, spec: str | None = None) -> Reply[str]:
        if spec is None:
            return self._line("shuffle")
        return self._line("shuffle", quote(spec))

    def swap(self, song1: int, song2: int) -> Reply[str]:
        return self._line("swap", format_int(song1), format_int(song2))

    def swapid(self, song1: int, song2: int) -> Reply[str]:
        return self._line("swapid", format_int(song1), format_int(song2))

    # Stored playlists

    def listplaylist(self, name: str) -> Reply[Values]:
        return self._list("listplaylist", quote(name))

    def listplaylistinfo(self, name: str) -> Reply[Records]:
        return self._records("listplaylistinfo", quote(name))

    def listplaylists(self) -> Reply[Records]:
        """Stored playlists with their ``Last-Modified`` times."""
        return self._records("listplaylists")

    def load(self, name: str) -> Reply[str]:
        return self._line("load", quote(name))

    def playlistadd(self, name: str, uri: str) -> Reply[str]:
        """Add URI to a stored playlist, creating it if needed."""
        return self._line("playlistadd", quote(name), quote(uri))

    def playlistclear(self, name: str) -> Reply[str]:
        return self._line("playlistclear", quote(name))

    def playlistdelete(self, name: str, songpos: int) -> Reply[str]:
        return self._line("playlistdelete", quote(name), format_int(songpos))

    def playlistmove(self, name: str, songid: int, songpos: int) -> Reply[str]:
        return self._line(
            "playlistmove", quote(name), format_int(songid), format_int(songpos)
        )

    def rename(self, name: str, new_name: str) -> Reply[str]:
        return self._line("rename", quote(name), quote(new_name))

    def rm(self, name: str) -> Reply[str]:
        return self._line("rm", quote(name))

    def save(self, name: str) -> Reply[str]:
        return self._line("save", quote(name))

    # The music database

    def count(self, tag: str, value: str) -> Reply[Table]:
        """Number of songs and total playtime matching TAG exactly."""
        return self._map("count", quote(tag), quote(value))

    def find(self, type: str, what: str) -> Reply[Records]:
        return self._records("find", quote(type), quote(what))

    def findadd(self, type: str, what: str) -> Reply[str]:
        return self._line("findadd", quote(type), quote(what))

    def list(self, type: str, artist: str | None = None) -> Reply[Values]:
        """All values of a tag. For albums, optionally only one artist's."""
        if type == "album" and artist:
            return self._list("list", quote(type), quote(artist))
        return self._list("list", quote(type))

    def listall(self, uri: str | None = None) -> Reply[Values]:
        if uri is None:
            return self._list("listall")
        return self._list("listall", quote(uri))

    def listallinfo(self, uri: str | None = None) -> Reply[Records]:
        if uri is None:
            return self._records("listallinfo")
        return self._records("listallinfo", quote(uri))

    def lsinfo(self, uri: str | None = None) -> Reply[Records]:
        """Contents of a directory."""
        if uri is None:
            return self._records("lsinfo")
        return self._records("lsinfo", quote(uri))

    def search(self, type: str, what: str) -> Reply[Records]:
        """Case-insensitive partial-match search of the database."""
        return self._records("search", quote(type), quote(what))

    def update(self, uri: str | None = None) -> Reply[Table]:
        """Start a database update; the reply holds ``updating_db``."""
        if uri is None:
            return self._map("update")
        return self._map("update", quote(uri))

    def rescan(self, uri: str | None = None) -> Reply[Table]:
        if uri is None:
            return self._map("rescan")
        return self._map("rescan", quote(uri))

    # Stickers

    def sticker_get(self, type: str, uri: str, name: str) -> Reply[Values]:
        """Read a sticker; values come back as ``name=value``."""
        return self._list("sticker", "get", quote(type), quote(uri), quote(name))

    def sticker_set(self, type: str, uri: str, name: str, value: str) -> Reply[str]:
        return self._line(
            "sticker", "set", quote(type), quote(uri), quote(name), quote(value)
        )

    def sticker_delete(self, type: str, uri: str, name: str | None = None) -> Reply[str]:
        """Delete one sticker, or all stickers of the object."""
        if name is None:
            return self._line("sticker", "delete", quote(type), quote(uri))
        return self._line("sticker", "delete", quote(type), quote(uri), quote(name))

    def sticker_list(self, type: str, uri: str) -> Reply[Values]:
        return self._list("sticker", "list", quote(type), quote(uri))

    def sticker_find(self, type: str, uri: str, name: str) -> Reply[Records]:
        return self._records("sticker", "find", quote(type), quote(uri), quote(name))

    # Connection

    def close(self) -> Reply[str]:
        """Ask the server to close the connection, then drop it locally."""
        reply = send_only(self.session, "close")
        self.session.disconnect()
        return reply

    def kill(self) -> Reply[str]:
        """Stop the server. It does not reply."""
        reply = send_only(self.session, "kill")
        self.session.disconnect()
        return reply

    def password(self, password: str) -> Reply[str]:
        """Authenticate; the password is resent after each reconnect."""
        reply = self._line("password", quote(password))
        if reply.ok:
            self.session.password = password
        return reply

    def ping(self) -> Reply[str]:
        return self._line("ping")

    # Audio outputs

    def disableoutput(self, outputid: int) -> Reply[str]:
        return self._line("disableoutput", format_int(outputid))

    def enableoutput(self, outputid: int) -> Reply[str]:
        return self._line("enableoutput", format_int(outputid))

    def outputs(self) -> Reply[Records]:
        return self._records("outputs")

    # Reflection

    def commands(self) -> Reply[Values]:
        return self._list("commands")

    def notcommands(self) -> Reply[Values]:
        return self._list("notcommands")

    def tagtypes(self) -> Reply[Values]:
        return self._list("tagtypes")

    def urlhandlers(self) -> Reply[Values]:
        return self._list("urlhandlers")
