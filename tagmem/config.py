"""
Configuration for the memory server.

Resolves the two storage area roots. For each root, the first of these wins:
explicit argument (CLI option), environment variable, ``tagmem.toml`` in
TAGMEM_HOME, built-in default.

Example ``~/.tagmem/tagmem.toml``::

    [storage]
    global = "~/.config/goose/memory"
    local = ".goose/memory"
    persistence = true
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError, tagmem_home

CONFIG_FILENAME = "tagmem.toml"
CONFIG_VERSION = 1

GLOBAL_STORAGE_ENV = "TAGMEM_GLOBAL_STORAGE"
LOCAL_STORAGE_ENV = "TAGMEM_LOCAL_STORAGE"
PERSISTENCE_ENV = "TAGMEM_PERSISTENCE"


@dataclass
class MemoryConfig:
    """Resolved storage configuration."""
    global_storage: Path
    local_storage: Path
    enable_persistence: bool = True
    config_file: Optional[Path] = None


def default_global_storage() -> Path:
    return Path.home() / ".config" / "goose" / "memory"


def default_local_storage() -> Path:
    return Path.cwd() / ".goose" / "memory"


def _absolute(value: str | Path) -> Path:
    return Path(value).expanduser().absolute()


def read_config_file(config_path: Path) -> dict[str, Any]:
    """
    Read the ``[storage]`` table from a TOML config file.

    Returns an empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file is not valid TOML, is from a newer version,
            or has values of the wrong type
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    version = data.get("version", CONFIG_VERSION)
    if not isinstance(version, int) or version > CONFIG_VERSION:
        raise ConfigError(
            f"Config version {version} is newer than supported ({CONFIG_VERSION})"
        )

    storage = data.get("storage", {})
    if not isinstance(storage, dict):
        raise ConfigError(f"[storage] must be a table in {config_path}")

    for key in ("global", "local"):
        if key in storage and not isinstance(storage[key], str):
            raise ConfigError(f"storage.{key} must be a string in {config_path}")
    if "persistence" in storage and not isinstance(storage["persistence"], bool):
        raise ConfigError(f"storage.persistence must be a boolean in {config_path}")

    return storage


def _env_flag(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return value.strip().lower() not in ("0", "false", "no", "off")


def load_memory_config(
    global_storage: Optional[Path] = None,
    local_storage: Optional[Path] = None,
    enable_persistence: Optional[bool] = None,
    config_path: Optional[Path] = None,
) -> MemoryConfig:
    """
    Build the effective configuration.

    Args:
        global_storage: Explicit global root (highest precedence)
        local_storage: Explicit local root (highest precedence)
        enable_persistence: Explicit persistence flag
        config_path: Config file to read (default: TAGMEM_HOME/tagmem.toml)
    """
    if config_path is None:
        config_path = tagmem_home() / CONFIG_FILENAME
    storage = read_config_file(config_path)

    def pick(explicit: Optional[Path], env_name: str, key: str, default) -> Path:
        if explicit is not None:
            return _absolute(explicit)
        env_value = os.environ.get(env_name)
        if env_value:
            return _absolute(env_value)
        if key in storage:
            return _absolute(storage[key])
        return default()

    if enable_persistence is None:
        enable_persistence = _env_flag(PERSISTENCE_ENV)
    if enable_persistence is None:
        enable_persistence = storage.get("persistence", True)

    return MemoryConfig(
        global_storage=pick(global_storage, GLOBAL_STORAGE_ENV, "global", default_global_storage),
        local_storage=pick(local_storage, LOCAL_STORAGE_ENV, "local", default_local_storage),
        enable_persistence=enable_persistence,
        config_file=config_path if config_path.exists() else None,
    )


def initialize_storage(config: MemoryConfig) -> None:
    """Create both area roots up front unless persistence is disabled."""
    if config.enable_persistence:
        config.global_storage.mkdir(parents=True, exist_ok=True)
        config.local_storage.mkdir(parents=True, exist_ok=True)


def is_under_home(dir_path: str | Path) -> bool:
    """Whether a path resolves to the home directory or somewhere inside it."""
    home = Path.home().resolve()
    target = Path(dir_path).expanduser().resolve()
    return target == home or home in target.parents
