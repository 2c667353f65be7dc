"""Pytest configuration and fixtures for mpdc tests."""

from __future__ import annotations

import os
import socketserver
import threading
from pathlib import Path
from typing import Generator

import pytest

from mpdc.client import MPDClient
from mpdc.protocol.session import Session

from .fakes import FakeConnector, FakeMPDHandler, FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def connector(transport: FakeTransport) -> FakeConnector:
    return FakeConnector(transport)


@pytest.fixture
def session(connector: FakeConnector) -> Session:
    return Session.connect(transport_factory=connector)


@pytest.fixture
def client(connector: FakeConnector) -> MPDClient:
    return MPDClient.connect(transport_factory=connector)


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Point XDG_CONFIG_HOME at a temporary directory and hide MPD_* vars."""
    config_dir = tmp_path / "mpdc"
    config_dir.mkdir(parents=True)

    saved = {name: os.environ.get(name) for name in ("XDG_CONFIG_HOME", "MPD_HOST", "MPD_PORT")}
    os.environ["XDG_CONFIG_HOME"] = str(tmp_path)
    os.environ.pop("MPD_HOST", None)
    os.environ.pop("MPD_PORT", None)

    yield config_dir

    # Restore environment
    for name, value in saved.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


@pytest.fixture
def mpd_server() -> Generator[socketserver.ThreadingTCPServer, None, None]:
    """A loopback TCP server answering from ``server.replies``."""
    server = socketserver.ThreadingTCPServer(("127.0.0.1", 0), FakeMPDHandler)
    server.daemon_threads = True
    server.lock = threading.Lock()
    server.connections = 0
    server.received = []
    server.replies = {}
    server.hang_up_on = set()

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    server.shutdown()
    server.server_close()
