"""
SettingsLoader - runtime settings for outline loading and storage.

Settings come from three layers, later layers winning:
- defaults in config/limits.py
- a YAML file named by the OUTLINES_CONFIG environment variable
- individual OUTLINES_* environment variables
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pdf_outlines.config import limits
from pdf_outlines.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class OutlineSettings:
    """Resolved settings used by the loader and store adapters."""

    max_load_depth: int = limits.MAX_LOAD_DEPTH
    max_load_items: int = limits.MAX_LOAD_ITEMS
    redis_prefix: str = limits.DEFAULT_REDIS_PREFIX


_ENV_OVERRIDES = {
    "OUTLINES_MAX_LOAD_DEPTH": ("max_load_depth", int),
    "OUTLINES_MAX_LOAD_ITEMS": ("max_load_items", int),
    "OUTLINES_REDIS_PREFIX": ("redis_prefix", str),
}


class SettingsLoader:
    """Load OutlineSettings from YAML and the environment."""

    _instance: Optional["SettingsLoader"] = None

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize loader.

        Args:
            config_path: Path to a YAML settings file.
                         Defaults to $OUTLINES_CONFIG when set.
        """
        if config_path is None:
            env_path = os.environ.get(limits.SETTINGS_ENV_VAR)
            config_path = Path(env_path) if env_path else None
        self._config_path = config_path
        self._settings: Optional[OutlineSettings] = None

    @classmethod
    def get_instance(cls) -> "SettingsLoader":
        """Get singleton instance for shared access."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton (for testing)."""
        cls._instance = None

    def _load_yaml(self) -> Dict[str, Any]:
        """Load the settings file, or nothing when it is absent."""
        if self._config_path is None:
            return {}
        if not self._config_path.exists():
            logger.warning(f"Settings file not found: {self._config_path}")
            return {}
        with open(self._config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValidationError(f"Settings file {self._config_path} must contain a mapping")
        # Allow the settings to live under an "outlines:" section
        return data.get("outlines", data)

    def get_settings(self) -> OutlineSettings:
        """Resolve settings once and cache them."""
        if self._settings is not None:
            return self._settings

        values: Dict[str, Any] = {}
        known = OutlineSettings.__dataclass_fields__
        for key, value in self._load_yaml().items():
            if key not in known:
                logger.warning(f"Ignoring unknown setting: {key}")
                continue
            values[key] = value

        for env_name, (key, cast) in _ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None:
                continue
            try:
                values[key] = cast(raw)
            except ValueError as e:
                raise ValidationError(f"Invalid value for {env_name}: {raw!r}") from e

        settings = OutlineSettings(**values)
        if settings.max_load_depth < 1 or settings.max_load_items < 1:
            raise ValidationError("Load limits must be positive")
        self._settings = settings
        return settings


def get_settings() -> OutlineSettings:
    """Convenience accessor for the shared settings."""
    return SettingsLoader.get_instance().get_settings()
