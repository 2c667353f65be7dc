"""Tests for mpdc CLI (formatters, commands, time parser)."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from mpdc.cli import cli
from mpdc.cli.commands import cmd_seek, cmd_toggle, cmd_volume, parse_time
from mpdc.cli.output import (
    format_outputs,
    format_playlists,
    format_queue,
    format_songs,
    format_status,
    format_time,
    format_track,
    format_value,
)
from mpdc.client import MPDClient
from mpdc.protocol.messages import ErrorCode

from .fakes import FakeConnector, FakeTransport

STATUS = [
    "volume: 80",
    "repeat: 1",
    "random: 0",
    "single: 0",
    "consume: 0",
    "playlistlength: 3",
    "state: play",
    "song: 1",
    "elapsed: 30.0",
    "duration: 120.0",
    "OK",
]


class TestFormatters:
    def test_time_seconds(self):
        assert format_time(30) == "0:30"
        assert format_time(90) == "1:30"
        assert format_time(0) == "0:00"

    def test_time_hours(self):
        assert format_time(3600) == "1:00:00"
        assert format_time(3661) == "1:01:01"

    def test_time_negative(self):
        assert format_time(-5) == "0:00"

    def test_track_basic(self):
        assert format_track({"file": "Albums/x/song.mp3"}) == "song.mp3"

    def test_track_with_metadata(self):
        song = {"file": "a.mp3", "Artist": "Nina Simone", "Title": "Sinnerman", "duration": "622.1"}
        assert format_track(song) == "Nina Simone - Sinnerman [10:22]"

    def test_track_old_time_tag(self):
        assert format_track({"file": "a.mp3", "Title": "A", "Time": "90"}) == "A [1:30]"

    def test_track_stream_name(self):
        assert format_track({"file": "http://radio/stream", "Name": "Jazz FM"}) == "Jazz FM"

    def test_track_empty(self):
        assert format_track(None) == "(no track)"
        assert format_track({}) == "(no track)"

    def test_status(self):
        status = {"state": "play", "volume": "80", "repeat": "1", "elapsed": "30", "duration": "120",
                  "playlistlength": "3", "song": "1"}
        output = format_status(status, {"Title": "Sinnerman", "file": "a.mp3"})

        assert "▶ Sinnerman" in output
        assert "0:30 / 2:00" in output
        assert "Volume: 80%" in output
        assert "repeat: on" in output
        assert "random: off" in output
        assert "Queue: 2/3" in output

    def test_status_stopped_no_mixer(self):
        output = format_status({"state": "stop", "volume": "-1"})

        assert output.startswith("⏹ (no track)")
        assert "Volume: n/a" in output

    def test_status_error(self):
        assert "Error: problems decoding" in format_status({"state": "stop", "error": "problems decoding"})

    def test_queue(self):
        songs = [{"file": "a.mp3", "Pos": "0"}, {"file": "b.mp3", "Pos": "1"}]
        output = format_queue(songs, current=1)

        assert "  1. a.mp3" in output
        assert "▶ 2. b.mp3" in output

    def test_queue_empty_record(self):
        """Test that the empty record of an empty reply shows as an empty queue."""
        assert format_queue([{}]) == "(empty queue)"

    def test_songs_mixed_entries(self):
        entries = [{"directory": "Albums"}, {"playlist": "jazz"}, {"file": "Albums/a.mp3"}]

        assert format_songs(entries) == "Albums/\njazz (playlist)\na.mp3"

    def test_songs_empty(self):
        assert format_songs([{}]) == "(no results)"

    def test_playlists(self):
        output = format_playlists([{"playlist": "jazz", "Last-Modified": "2024-01-01T00:00:00Z"}])
        assert "jazz  (2024-01-01T00:00:00Z)" in output

    def test_outputs(self):
        outputs = [
            {"outputid": "0", "outputname": "ALSA", "outputenabled": "1"},
            {"outputid": "1", "outputname": "HTTP", "outputenabled": "0"},
        ]
        assert format_outputs(outputs) == "* 0: ALSA\n  1: HTTP"

    def test_value_records(self):
        assert format_value([{"a": "1"}, {"a": "2"}]) == "a: 1\n\na: 2"


class TestParseTime:
    @pytest.mark.parametrize(
        "text,seconds",
        [("90", 90), ("1:30", 90), ("1:01:30", 3690), ("12.7", 12)],
    )
    def test_formats(self, text, seconds):
        assert parse_time(text) == seconds

    @pytest.mark.parametrize("text", ["abc", "1:2:3:4", "1:xx"])
    def test_invalid(self, text):
        with pytest.raises(ValueError, match="Invalid time"):
            parse_time(text)


class TestCommandHelpers:
    def test_toggle_flips_current_state(self):
        transport = FakeTransport({"status": ["repeat: 1", "OK"]})
        client = MPDClient.connect(transport_factory=FakeConnector(transport))

        assert cmd_toggle(client, "repeat", None).ok
        assert transport.sent == ["status", "repeat 0"]

    def test_toggle_explicit(self, client, transport):
        cmd_toggle(client, "consume", True)
        assert transport.sent == ["consume 1"]

    def test_toggle_unknown_option(self, client, transport):
        assert cmd_toggle(client, "shuffle", True).error.code == ErrorCode.INVALID_ARGS
        assert transport.sent == []

    @pytest.mark.parametrize(
        "level,volume,line",
        [("50", "80", "setvol 50"), ("+10", "80", "setvol 90"), ("-20", "80", "setvol 60"),
         ("+30", "80", "setvol 100"), ("-90", "80", "setvol 0")],
    )
    def test_volume(self, client, transport, level, volume, line):
        transport.replies["status"] = [f"volume: {volume}", "OK"]

        assert cmd_volume(client, level).ok
        assert transport.sent[-1] == line

    def test_volume_invalid(self, client):
        assert cmd_volume(client, "loud").error.code == ErrorCode.INVALID_ARGS

    @pytest.mark.parametrize("status", [["volume: -1", "OK"], ["state: stop", "OK"]])
    def test_relative_volume_without_mixer(self, client, transport, status):
        transport.replies["status"] = status

        reply = cmd_volume(client, "+5")

        assert reply.error.code == ErrorCode.INVALID_ARGS
        assert reply.error.message == "Volume not available"
        assert transport.sent == ["status"]

    def test_seek_current_song(self, client, transport):
        transport.replies["status"] = ["song: 4", "OK"]

        assert cmd_seek(client, "1:30", None).ok
        assert transport.sent == ["status", "seek 4 90"]

    def test_seek_no_current_song(self, client, transport):
        transport.replies["status"] = ["state: stop", "OK"]

        assert cmd_seek(client, "10", None).error.code == ErrorCode.INVALID_ARGS


class TestCLI:
    """End-to-end CLI runs against a scripted server."""

    def _invoke(self, transport, args):
        runner = CliRunner()
        return runner.invoke(cli, args, obj={"transport_factory": FakeConnector(transport)})

    def test_help(self, temp_config_dir):
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Music Player Daemon" in result.output

    def test_default_is_status(self, temp_config_dir):
        transport = FakeTransport({"status": STATUS, "currentsong": ["file: a.mp3", "Title: Sinnerman", "OK"]})

        result = self._invoke(transport, [])

        assert result.exit_code == 0
        assert "Sinnerman" in result.output
        assert "Volume: 80%" in result.output
        assert transport.closed

    def test_status_json(self, temp_config_dir):
        transport = FakeTransport({"status": STATUS})

        result = self._invoke(transport, ["--json", "status"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["shape"] == "map"
        assert data["data"]["volume"] == "80"

    def test_play_is_one_based(self, temp_config_dir):
        transport = FakeTransport()

        result = self._invoke(transport, ["play", "3"])

        assert result.exit_code == 0
        assert transport.sent == ["play 2"]

    @pytest.mark.parametrize("args", [["play", "0"], ["seek", "10", "--song", "0"]])
    def test_positions_start_at_one(self, temp_config_dir, args):
        transport = FakeTransport()

        result = self._invoke(transport, args)

        assert result.exit_code == 2
        assert transport.sent == []

    def test_server_error_exit_code(self, temp_config_dir):
        transport = FakeTransport({"play 98": ["ACK [2@0] {play} Bad song index"]})

        result = self._invoke(transport, ["play", "99"])

        assert result.exit_code == 1
        assert "Error [SERVER_ERROR]: ACK [2@0] {play} Bad song index" in result.output

    def test_connect_error(self, temp_config_dir):
        result = CliRunner().invoke(cli, ["status"], obj={"transport_factory": FakeConnector()})

        assert result.exit_code == 1
        assert "Cannot connect" in result.output

    def test_host_and_port_options(self, temp_config_dir):
        connector = FakeConnector(FakeTransport())

        CliRunner().invoke(cli, ["-h", "music.local", "-p", "6601", "stop"], obj={"transport_factory": connector})

        assert connector.calls == [("music.local", 6601, None)]

    def test_environment(self, temp_config_dir, monkeypatch):
        monkeypatch.setenv("MPD_HOST", "secret@music.local")
        transport = FakeTransport()
        connector = FakeConnector(transport)

        CliRunner().invoke(cli, ["stop"], obj={"transport_factory": connector})

        assert connector.calls[0][0] == "music.local"
        assert transport.sent == ["password secret", "stop"]

    def test_toggle_command(self, temp_config_dir):
        transport = FakeTransport()

        result = self._invoke(transport, ["random", "on"])

        assert result.exit_code == 0
        assert transport.sent == ["random 1"]

    def test_queue(self, temp_config_dir):
        transport = FakeTransport(
            {
                "playlistinfo": ["file: a.mp3", "Pos: 0", "file: b.mp3", "Pos: 1", "OK"],
                "status": ["song: 0", "OK"],
            }
        )

        result = self._invoke(transport, ["queue"])

        assert "▶ 1. a.mp3" in result.output
        assert "  2. b.mp3" in result.output

    def test_outputs(self, temp_config_dir):
        transport = FakeTransport({"outputs": ["outputid: 0", "outputname: ALSA", "outputenabled: 1", "OK"]})

        result = self._invoke(transport, ["outputs"])

        assert "* 0: ALSA" in result.output

    def test_raw_with_shape(self, temp_config_dir):
        transport = FakeTransport({"decoders": ["plugin: mad", "plugin: flac", "OK"]})

        result = self._invoke(transport, ["--json", "raw", "--shape", "list", "decoders"])

        assert json.loads(result.output)["data"] == ["mad", "flac"]

    def test_idle(self, temp_config_dir):
        transport = FakeTransport({"idle player": ["changed: player", "OK"]})

        result = self._invoke(transport, ["idle", "player"])

        assert result.output.strip() == "player"
