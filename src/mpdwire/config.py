"""Configuration management for mpdwire."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .protocol.session import DEFAULT_PORT


@dataclass
class ConnectionConfig:
    """Where and how to reach the daemon."""

    host: str = "localhost"
    port: int = DEFAULT_PORT
    timeout: float = 10.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "warning"


@dataclass
class Config:
    """Full mpdwire configuration."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def address(self) -> str:
        """Address string for Session.connect()."""
        host = self.connection.host
        if host.startswith("/"):
            return host
        if ":" in host:
            return f"[{host}]:{self.connection.port}"
        return f"{host}:{self.connection.port}"


def get_config_dir() -> Path:
    """Get the mpdwire config directory."""
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "mpdwire"
    return Path.home() / ".config" / "mpdwire"


def get_config_file() -> Path:
    if env_file := os.environ.get("MPDWIRE_CONFIG"):
        return Path(env_file)
    return get_config_dir() / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file, then apply environment overrides."""
    config_file = path or get_config_file()

    if config_file.exists():
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
        config = Config(
            connection=ConnectionConfig(**data.get("connection", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )
    else:
        config = Config()

    apply_env_overrides(config)
    return config


def apply_env_overrides(config: Config) -> None:
    """Apply MPD_HOST and MPD_PORT, the variables other MPD clients honour."""
    if host := os.environ.get("MPD_HOST"):
        config.connection.host = host
    if port := os.environ.get("MPD_PORT"):
        try:
            config.connection.port = int(port)
        except ValueError:
            raise ValueError(f"MPD_PORT is not a number: '{port}'") from None
