"""User-configurable settings loaded from a YAML file."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import ClassVar, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from sitesettings.constants import CONFIG_ENV_VAR

# Load environment variables from .env file(s)
load_dotenv()


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """Settings for the command-line tool.

    Every field has a default, so an empty file is a valid configuration.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("sitesettings.yaml"),
        Path("~/.config/sitesettings/config.yaml").expanduser(),
        Path("/etc/sitesettings/config.yaml"),
    ]

    store_file: Path = Field(
        Path("site_settings.yaml"), description="Store document (YAML, or JSON by suffix)"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Logging level when --debug is not given"
    )
    sort_patterns: bool = Field(
        True, description="Write patterns least to most specific instead of in write order"
    )

    # ---- validators ----
    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("store_file")
    @classmethod
    def expand_store_file(cls, v: Path) -> Path:
        return v.expanduser()

    # ---- convenience methods ----
    @property
    def logging_level(self) -> int:
        """Configured level as a ``logging`` constant."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object

        Raises:
            FileNotFoundError: If no config file is found
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        # Try to find config file
        if path is None:
            # Check environment variable first
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from {CONFIG_ENV_VAR} not found: {path}")
            else:
                # Try default paths
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    raise FileNotFoundError(
                        f"No configuration file found. Create sitesettings.yaml or set {CONFIG_ENV_VAR}."
                    )

        # Load and parse config
        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data or {})
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> UserSettings:
        """Like ``load`` but falls back to defaults when no file exists."""
        try:
            return cls.load(path)
        except FileNotFoundError:
            if path is not None:
                raise
            return cls()
