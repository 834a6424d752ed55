"""Configuration loading (TOML, env vars, .env)."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, find_dotenv

from xpipe.errors import ConfigError
from xpipe.types.config import DEFAULT_BUFFER_SIZE, XpipeConfig

logger = logging.getLogger(__name__)

ENV_MAP = {
    "buffer_size": "XPIPE_BUFFER_SIZE",
    "timeout": "XPIPE_TIMEOUT",
}


def _parse_uint(value: Any, name: str, source: str) -> int:
    """Parse a non-negative integer, naming where a bad value came from."""
    if isinstance(value, bool):
        raise ConfigError(f"{name} from {source} must be an integer, got {value!r}")
    try:
        number = int(str(value).strip(), 10)
    except ValueError:
        raise ConfigError(f"{name} from {source} must be an integer, got {value!r}") from None
    if number < 0:
        raise ConfigError(f"{name} from {source} must not be negative, got {number}")
    return number


def load_dotenv_values(cwd: str | None = None) -> dict[str, str | None]:
    """Read .env from the working directory (or its parents) without exporting it.

    The values are only consulted for XPIPE_* settings; nothing is copied
    into os.environ, so spawned commands never see them.
    """
    if cwd:
        path = Path(cwd) / ".env"
        return dotenv_values(path) if path.exists() else {}
    found = find_dotenv(usecwd=True)
    return dotenv_values(found) if found else {}


def load_env_config(cwd: str | None = None) -> dict[str, Any]:
    """Load configuration from environment variables, then .env."""
    config: dict[str, Any] = {}
    dotenv = load_dotenv_values(cwd)

    for key, env_var in ENV_MAP.items():
        if value := os.environ.get(env_var):
            config[key] = _parse_uint(value, env_var, "environment")
        elif value := dotenv.get(env_var):
            config[key] = _parse_uint(value, env_var, ".env")

    return config


def config_paths(cwd: str | None = None) -> list[Path]:
    """Return candidate config.toml locations, highest priority first."""
    base = Path(cwd) if cwd else Path.cwd()
    return [
        base / ".xpipe" / "config.toml",
        Path.home() / ".xpipe" / "config.toml",
    ]


def load_toml_config(cwd: str | None = None) -> dict[str, Any]:
    """Load configuration from the first .xpipe/config.toml found."""
    for toml_path in config_paths(cwd):
        if not toml_path.exists():
            continue
        try:
            with open(toml_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Cannot read {toml_path}: {exc}") from exc

        logger.debug("Loaded config from %s", toml_path)
        config: dict[str, Any] = {}
        for key in ENV_MAP:
            if key in data:
                config[key] = _parse_uint(data[key], key, str(toml_path))
        return config
    return {}


def resolve_config(
    command: Sequence[str],
    *,
    buffer_size: int | None = None,
    timeout: int | None = None,
    cwd: str | None = None,
) -> XpipeConfig:
    """Build a validated XpipeConfig.

    Explicit values win, then environment variables, then .env, then config.toml,
    then the built-in defaults.
    """
    merged: dict[str, Any] = {"buffer_size": DEFAULT_BUFFER_SIZE, "timeout": None}
    merged.update(load_toml_config(cwd))
    merged.update(load_env_config(cwd))
    if buffer_size is not None:
        merged["buffer_size"] = buffer_size
    if timeout is not None:
        merged["timeout"] = timeout

    return XpipeConfig(
        command=tuple(command),
        buffer_size=merged["buffer_size"],
        timeout=merged["timeout"] or None,
    ).validate()
