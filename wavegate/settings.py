"""Configuration models and loader.

The gateway reads a single file named ``config`` with one of the supported
extensions from the working directory, unless a path is given explicitly or
through ``WAVEGATE_CONFIG``.  Two sections are expected::

    [wavelog]
    url = "https://log.example.org/index.php"
    key = "wl1234567890"
    station = "1"

    [server]
    host = "0.0.0.0"
    port = 2333

The ``server`` section and both of its keys are optional.  Settings are
frozen after loading and shared by every forward operation.
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wavegate.errors import ConfigError
from wavegate.middleware.logging import log_info

CONFIG_ENV = "WAVEGATE_CONFIG"
CONFIG_CANDIDATES = ("config.toml", "config.yaml", "config.yml", "config.json")


class WavelogSettings(BaseModel):
    """Remote Wavelog instance and the credentials used to post to it."""

    model_config = ConfigDict(frozen=True)

    url: str
    key: str
    station: str

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("key", "station", mode="before")
    @classmethod
    def _number_as_text(cls, v: Any) -> Any:
        # TOML/YAML hand back bare numbers as ints.
        return str(v) if isinstance(v, int) else v


class ServerSettings(BaseModel):
    """Local UDP endpoint the logging software sends ADIF to."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=2333, ge=1, le=65535)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    wavelog: WavelogSettings
    server: ServerSettings = ServerSettings()


def _read_mapping(path: Path) -> Dict[str, Any]:
    """Read a TOML, YAML or JSON mapping from ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Missing configuration file: {path.resolve()}")
    except OSError as ex:
        raise ConfigError(f"Failed to read {path}: {type(ex).__name__}: {ex}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            data = tomllib.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigError(
                f"Unsupported configuration format {suffix or '(none)'} for {path}; "
                f"use .toml, .yaml, .yml or .json"
            )
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as ex:
        raise ConfigError(f"Failed to parse {path}: {type(ex).__name__}: {ex}")

    if not isinstance(data, dict):
        raise ConfigError(f"Root of {path} must be a mapping, not {type(data).__name__}")
    return data


def find_config(directory: Optional[Path] = None) -> Path:
    """Return the configuration file to use.

    ``$WAVEGATE_CONFIG`` wins; otherwise the first existing ``config.*``
    candidate in ``directory`` (default: the working directory).
    """
    env_path = os.getenv(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    base = directory or Path.cwd()
    for name in CONFIG_CANDIDATES:
        candidate = base / name
        if candidate.exists():
            return candidate
    raise ConfigError(
        f"No configuration file found in {base.resolve()}; "
        f"expected one of {', '.join(CONFIG_CANDIDATES)} or ${CONFIG_ENV}"
    )


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Load and validate settings, raising :class:`ConfigError` on any problem."""
    cfg_path = Path(path) if path else find_config()
    data = _read_mapping(cfg_path)
    try:
        settings = Settings.model_validate(data)
    except ValidationError as ex:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in ex.errors()
        )
        raise ConfigError(f"Invalid configuration in {cfg_path}: {problems}") from ex

    log_info(
        "settings_loaded",
        path=str(cfg_path),
        url=settings.wavelog.url,
        host=settings.server.host,
        port=settings.server.port,
    )
    return settings
