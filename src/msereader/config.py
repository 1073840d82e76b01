from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, Field, field_validator

from .line_parser import SPACES_PER_TAB
from .scanner import DEFAULT_CHUNK_SIZE
from .version import Version

logger = logging.getLogger(__name__)

APP_NAME = "msereader"
SETTINGS_FILENAME = "settings.yaml"
DEFAULT_APP_VERSION = "2.0.0"

# Environment variable overrides (useful for tests and scripts)
ENV_IGNORE_INVALID = "MSEREADER_IGNORE_INVALID"
ENV_APP_VERSION = "MSEREADER_APP_VERSION"

_TRUTHY = {"1", "true", "yes", "on"}


class ReaderSettings(BaseModel):
    """Options shared by every reader created from these settings."""

    ignore_invalid: bool = Field(False, description="Skip invalid content without warnings")
    app_version: str = Field(DEFAULT_APP_VERSION, description="Format version of the running application")
    version_key: str = Field("mse_version", description="Reserved top-level key holding the document version")
    spaces_per_tab: int = Field(SPACES_PER_TAB, ge=1, description="Spaces treated as one TAB when repairing indentation")
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, ge=16, description="Bytes read from the stream at a time")

    @field_validator("app_version")
    @classmethod
    def check_version(cls, v: str) -> str:
        Version.from_string(v)
        return v

    @property
    def version(self) -> Version:
        return Version.from_string(self.app_version)

    @staticmethod
    def default_path() -> Path:
        return Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILENAME

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return data

    @staticmethod
    def _env_overrides() -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        ignore = os.getenv(ENV_IGNORE_INVALID)
        if ignore is not None:
            data["ignore_invalid"] = ignore.strip().lower() in _TRUTHY
        app_version = os.getenv(ENV_APP_VERSION)
        if app_version:
            data["app_version"] = app_version
        return data

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ReaderSettings":
        """Load settings from defaults, an optional YAML file and the environment.

        Without an explicit ``path`` the platform user config directory is
        checked; a missing default file is not an error.
        """
        data: Dict[str, Any] = {}
        if path is not None:
            if path.exists():
                data = cls._load_yaml(path)
                logger.info("Loaded reader settings from %s", path)
            else:
                logger.warning("Settings file not found: %s", path)
        else:
            default = cls.default_path()
            if default.exists():
                data = cls._load_yaml(default)
                logger.info("Loaded reader settings from %s", default)
        data.update(cls._env_overrides())
        settings = cls(**data)
        logger.debug("Reader settings: %s", settings)
        return settings
