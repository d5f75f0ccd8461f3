"""Tests for settings loading."""
import pytest

from pdf_outlines.config import limits
from pdf_outlines.config.settings import OutlineSettings, SettingsLoader, get_settings
from pdf_outlines.core.exceptions import ValidationError


class TestSettingsLoader:
    def test_defaults_come_from_limits(self):
        settings = SettingsLoader().get_settings()
        assert settings == OutlineSettings()
        assert settings.max_load_depth == limits.MAX_LOAD_DEPTH
        assert settings.max_load_items == limits.MAX_LOAD_ITEMS
        assert settings.redis_prefix == limits.DEFAULT_REDIS_PREFIX

    def test_yaml_file_overrides_defaults(self, tmp_path):
        config = tmp_path / "outlines.yaml"
        config.write_text("outlines:\n  max_load_depth: 12\n  redis_prefix: 'pdf:'\n")

        settings = SettingsLoader(config).get_settings()

        assert settings.max_load_depth == 12
        assert settings.redis_prefix == "pdf:"
        assert settings.max_load_items == limits.MAX_LOAD_ITEMS

    def test_flat_yaml_is_accepted(self, tmp_path):
        config = tmp_path / "outlines.yaml"
        config.write_text("max_load_items: 50\n")
        assert SettingsLoader(config).get_settings().max_load_items == 50

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        config = tmp_path / "outlines.yaml"
        config.write_text("max_load_depth: 3\n")
        monkeypatch.setenv("OUTLINES_CONFIG", str(config))
        assert get_settings().max_load_depth == 3

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        config = tmp_path / "outlines.yaml"
        config.write_text("max_load_depth: 3\n")
        monkeypatch.setenv("OUTLINES_MAX_LOAD_DEPTH", "9")
        assert SettingsLoader(config).get_settings().max_load_depth == 9

    def test_missing_file_falls_back_to_defaults(self, tmp_path, caplog):
        settings = SettingsLoader(tmp_path / "absent.yaml").get_settings()
        assert settings == OutlineSettings()
        assert "Settings file not found" in caplog.text

    def test_unknown_keys_ignored(self, tmp_path):
        config = tmp_path / "outlines.yaml"
        config.write_text("colour_scheme: dark\n")
        assert SettingsLoader(config).get_settings() == OutlineSettings()

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("OUTLINES_MAX_LOAD_ITEMS", "lots")
        with pytest.raises(ValidationError):
            SettingsLoader().get_settings()

    def test_non_positive_limits_rejected(self, monkeypatch):
        monkeypatch.setenv("OUTLINES_MAX_LOAD_DEPTH", "0")
        with pytest.raises(ValidationError):
            SettingsLoader().get_settings()

    def test_singleton_reset(self):
        first = SettingsLoader.get_instance()
        assert SettingsLoader.get_instance() is first
        SettingsLoader.reset_instance()
        assert SettingsLoader.get_instance() is not first
