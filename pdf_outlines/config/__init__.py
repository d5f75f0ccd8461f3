"""Configuration: limits and settings loading."""
from pdf_outlines.config.settings import OutlineSettings, SettingsLoader, get_settings

__all__ = [
    "OutlineSettings",
    "SettingsLoader",
    "get_settings",
]
