"""Configuration: CLI defaults plus the plugin settings file."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from taskview.settings import Settings

logger = logging.getLogger("taskview.config")

# Module-level cache for singleton pattern
_config_cache: Config | None = None


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing or config reload."""
    global _config_cache
    _config_cache = None


def get_default_config_dir() -> Path:
    """Get default config directory, respecting TASKVIEW_CONFIG_DIR env var.

    This is the single source of truth for config directory resolution.
    """
    config_dir = os.environ.get("TASKVIEW_CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".config" / "taskview"


def _read_json(path: Path) -> Any:
    """Read a JSON file; missing, empty or corrupted files read as None."""
    if not path.exists():
        return None
    try:
        content = path.read_text()
    except OSError:
        logger.warning("Cannot read %s, using defaults", path)
        return None
    if not content.strip():
        return None
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        logger.warning("Corrupted JSON in %s, using defaults", path)
        return None


class Config:
    """Runtime configuration with env override support.

    Also acts as a settings provider: ``config.settings`` holds the parsed
    plugin settings.
    """

    DEFAULTS: dict[str, Any] = {
        "default_view": "inbox",
        "default_group_by": "none",
        "default_format": "table",
        "settings_file": "",
    }

    def __init__(self, config_dir: Path | None = None):
        self._config_dir = config_dir or get_default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._data: dict[str, Any] = {}
        self._settings: Settings | None = None

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @classmethod
    def load(cls, config_dir: Path | None = None) -> Config:
        """Factory method - explicit loading with caching."""
        global _config_cache

        # Return cached instance if available and no custom dir specified
        if _config_cache is not None and config_dir is None:
            return _config_cache

        config = cls(config_dir)
        config._load_from_file()
        config._apply_env_overrides()

        # Cache if using default directory
        if config_dir is None:
            _config_cache = config

        return config

    def __getattr__(self, name: str) -> Any:
        """Access config values as attributes."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        if name in self.DEFAULTS:
            return self.DEFAULTS[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    @property
    def settings_path(self) -> Path:
        configured = self._data.get("settings_file") or self.DEFAULTS["settings_file"]
        if configured:
            return Path(configured).expanduser()
        return self._config_dir / "settings.json"

    @property
    def settings(self) -> Settings:
        """Plugin settings, parsed once per Config instance."""
        if self._settings is None:
            self._settings = Settings.from_dict(_read_json(self.settings_path))
        return self._settings

    def _load_from_file(self) -> None:
        data = _read_json(self._config_file)
        # Corrupted or non-object config - use defaults
        self._data = data if isinstance(data, dict) else {}

    def _apply_env_overrides(self) -> None:
        """Apply TASKVIEW_* env vars (highest priority)."""
        for key in self.DEFAULTS:
            env_key = f"TASKVIEW_{key.upper()}"
            if env_key in os.environ:
                self._data[key] = os.environ[env_key]
