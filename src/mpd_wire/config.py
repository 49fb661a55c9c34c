"""Centralized client configuration."""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

from mpd_wire.connection import DEFAULT_MAX_LINE_LENGTH

DEFAULT_DATA_DIR = Path.home() / ".local" / "mpd-wire"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600


class Config(BaseModel):
    """Connection settings and local paths."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for config and log files")
    host: str = Field(default=DEFAULT_HOST, min_length=1, description="MPD host name, or absolute path of a Unix socket")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="MPD TCP port")
    password: str | None = Field(default=None, description="Password sent after connecting")
    timeout: float = Field(default=30.0, gt=0, description="Socket read/write deadline in seconds")
    max_line_length: int = Field(default=DEFAULT_MAX_LINE_LENGTH, ge=1024, description="Longest accepted response line in bytes")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "mpd-wire.log"

    @classmethod
    def build(
        cls,
        data_dir: Path | None = None,
        *,
        host: str | None = None,
        port: int | None = None,
        env: Mapping[str, str] | None = None,
    ) -> Self:
        """Build a Config from defaults, config.toml, MPD_* environment variables, and explicit overrides.

        Later sources win. ``MPD_HOST`` accepts the ``password@host`` form.
        """
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        environ = os.environ if env is None else env
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key in ("host", "password"):
                if isinstance(toml_data.get(key), str):
                    kwargs[key] = toml_data[key]
            for key in ("port", "max_line_length"):
                if isinstance(toml_data.get(key), int):
                    kwargs[key] = toml_data[key]
            if isinstance(toml_data.get("timeout"), int | float):
                kwargs["timeout"] = toml_data["timeout"]

        if env_host := environ.get("MPD_HOST"):
            password, sep, bare_host = env_host.partition("@")
            # "@name" is an abstract socket, not an empty password
            if sep and password:
                kwargs["password"] = password
                kwargs["host"] = bare_host
            else:
                kwargs["host"] = env_host
        if env_port := environ.get("MPD_PORT"):
            kwargs["port"] = env_port
        if env_timeout := environ.get("MPD_TIMEOUT"):
            kwargs["timeout"] = env_timeout

        if host is not None:
            kwargs["host"] = host
        if port is not None:
            kwargs["port"] = port

        return cls(**kwargs)
