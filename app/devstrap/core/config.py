"""Configuration file I/O operations.

This module provides functions for loading and saving the devstrap
configuration in TOML format with validation using Pydantic models.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from devstrap.core.errors import ConfigError, ConfigParseError, ConfigValidationError
from devstrap.core.paths import get_config_path
from devstrap.models.config import DevstrapConfig


def load_config(path: Path | None = None) -> DevstrapConfig:
    """Load and validate the configuration from a TOML file.

    A missing file is not an error: the built-in defaults are returned.

    Args:
        path: Path to the configuration file. If None, uses the default path.

    Returns:
        Validated DevstrapConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file exists but cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return DevstrapConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return DevstrapConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}: {e}") from e


def config_to_dict(config: DevstrapConfig) -> dict[str, Any]:
    """Convert a DevstrapConfig into a TOML-serializable dictionary."""
    return config.model_dump(mode="json")


def dump_config(config: DevstrapConfig) -> str:
    """Render a configuration as TOML text."""
    return tomli_w.dumps(config_to_dict(config))


def save_config(config: DevstrapConfig, path: Path | None = None) -> Path:
    """Save a configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.
    The temporary file is cleaned up on failure.

    Args:
        config: The DevstrapConfig object to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config {config_path}: {e}") from e

    return config_path
