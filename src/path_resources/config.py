"""Settings for path resources."""

from __future__ import annotations

import codecs
import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# Default settings location, relative to the home directory
CONFIG_DIR_NAME = ".path-resources"
CONFIG_FILE_NAME = "config.yaml"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ResourceSettings(BaseModel):
    """Tunable behaviour of resources, factories and monitors."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    temp_dir: Path | None = Field(default=None, alias="tempDir")
    temp_prefix: str = Field(default="pathres", alias="tempPrefix")
    temp_suffix: str = Field(default="", alias="tempSuffix")
    encoding: str = "utf-8"
    monitor_recursive: bool = Field(default=True, alias="monitorRecursive")
    log_level: str = Field(default="WARNING", alias="logLevel")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {value}") from e
        return value

    @classmethod
    def from_file(cls, path: Path) -> ResourceSettings:
        """Load settings from a JSON or YAML file.

        Args:
            path: Path to a .json, .yaml or .yml file.

        Returns:
            Parsed ResourceSettings.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the content is invalid.
        """
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        text = path.read_text()
        if path.suffix in {".yaml", ".yml"}:
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        else:
            data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a mapping: {path}")
        return cls.model_validate(data)


def default_config_path() -> Path:
    """Return the default settings file location."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_settings(path: Path | None = None) -> ResourceSettings:
    """Load settings from an explicit path or the default location.

    An explicit path must exist. The default location is optional; when it
    is absent the built-in defaults apply.

    Args:
        path: Settings file to load.

    Returns:
        Loaded or default settings.
    """
    if path is not None:
        return ResourceSettings.from_file(path)

    default_path = default_config_path()
    if not default_path.exists():
        return ResourceSettings()
    logger.debug("Loading settings from %s", default_path)
    return ResourceSettings.from_file(default_path)
