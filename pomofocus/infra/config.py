"""
Configuration management using Pydantic Settings.

Architecture Decision: Why pydantic-settings?
Process-level settings (paths, database URL, log level) come from defaults,
a .env file and POMOFOCUS_* environment variables. User preferences live in
a YAML file that the tray menu rewrites when a toggle changes.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pomofocus.domain.models import AppPreferences

logger = logging.getLogger(__name__)

APP_DIR_NAME = "pomofocus"
PREFERENCES_FILE = "settings.yaml"
DATABASE_FILE = "pomofocus.db"

# A checkout's config/settings.yaml wins over the per-user file
WORKSPACE_PREFERENCES = Path("config") / PREFERENCES_FILE


def _user_dir(kind: str) -> Path:
    """Per-user directory for 'config' or 'data' files"""
    if os.name == 'nt':  # Windows keeps both under APPDATA
        return Path(os.getenv('APPDATA')) / APP_DIR_NAME
    if kind == "config":
        return Path.home() / '.config' / APP_DIR_NAME
    return Path.home() / '.local' / 'share' / APP_DIR_NAME


class Settings(BaseSettings):
    """
    Where PomoFocus keeps its files and how it behaves.

    Preferences that fail validation (an unknown timezone, a negative delay)
    are logged and replaced by their defaults so the app still starts.
    """
    model_config = SettingsConfigDict(
        env_prefix='POMOFOCUS_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None
    log_level: str = "INFO"

    preferences: AppPreferences = AppPreferences()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.config_dir = self.config_dir or _user_dir("config")
        self.data_dir = self.data_dir or _user_dir("data")
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.preferences = self._read_preferences()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @property
    def preferences_file(self) -> Path:
        """YAML file the preferences are read from and written to"""
        if WORKSPACE_PREFERENCES.exists():
            return WORKSPACE_PREFERENCES
        return self.config_dir / PREFERENCES_FILE

    def _read_preferences(self) -> AppPreferences:
        path = self.preferences_file
        if not path.exists():
            return self.preferences

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", path, e)
            return self.preferences
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: expected a mapping", path)
            return self.preferences

        try:
            return AppPreferences(**data)
        except ValidationError as e:
            invalid = {error["loc"][0] for error in e.errors() if error["loc"]}
            logger.warning("Invalid preferences in %s, using defaults for %s",
                           path, ", ".join(sorted(map(str, invalid))))
            return AppPreferences(**{k: v for k, v in data.items() if k not in invalid})

    def update_preferences(self, **changes: Any) -> AppPreferences:
        """
        Validate and apply preference changes, then write them to disk.

        Raises:
            pydantic.ValidationError: for invalid values (nothing changes)
        """
        values: Dict[str, Any] = self.preferences.model_dump()
        values.update(changes)
        self.preferences = AppPreferences(**values)
        self.save_preferences()
        return self.preferences

    def save_preferences(self):
        """Write the current preferences to the preferences file"""
        path = self.preferences_file
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.preferences.model_dump(), f, default_flow_style=False)
        logger.debug("Preferences saved to %s", path)

    def get_db_url(self) -> str:
        """Configured database URL, or the SQLite file in data_dir"""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.data_dir / DATABASE_FILE}"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
