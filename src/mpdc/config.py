"""Configuration management for mpdc."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .protocol.session import DEFAULT_HOST, DEFAULT_PORT


@dataclass
class ConnectionConfig:
    """Where and how to reach the server."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    reconnect: bool = True
    timeout: float = 0.0
    password: str = ""

    @property
    def timeout_or_none(self) -> float | None:
        return self.timeout if self.timeout > 0 else None


@dataclass
class ClientConfig:
    """Client-side settings."""

    log_level: str = "warning"


@dataclass
class Config:
    """Full mpdc configuration."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    client: ClientConfig = field(default_factory=ClientConfig)


def get_config_dir() -> Path:
    """Get the mpdc config directory."""
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "mpdc"
    return Path.home() / ".config" / "mpdc"


def get_config_file() -> Path:
    return get_config_dir() / "config.toml"


def apply_environment(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    """Apply MPD_HOST and MPD_PORT overrides.

    MPD_HOST may carry a password as ``password@host``.
    """
    environ = os.environ if environ is None else environ

    if host := environ.get("MPD_HOST"):
        if "@" in host:
            password, host = host.split("@", 1)
            config.connection.password = password
        config.connection.host = host

    if port := environ.get("MPD_PORT"):
        try:
            config.connection.port = int(port)
        except ValueError:
            raise ValueError(f"Invalid MPD_PORT: {port}") from None

    return config


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration from file, then apply environment overrides."""
    config_file = path or get_config_file()

    if config_file.exists():
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
        config = Config(
            connection=ConnectionConfig(**data.get("connection", {})),
            client=ClientConfig(**data.get("client", {})),
        )
    else:
        config = Config()

    return apply_environment(config, environ)
