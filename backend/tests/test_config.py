"""
Tests for configuration.

Requires Python 3.11+.
"""

import pytest
from pydantic import ValidationError

from utils.config import BuildSettings, LoggingSettings, Settings, WatcherSettings, get_settings


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        for name in ("WATCHER_EXTENSION", "WATCHER_HIDDEN_PREFIX", "WATCHER_SEED_ON_START"):
            monkeypatch.delenv(name, raising=False)

        settings = WatcherSettings()

        assert settings.extension == ".go"
        assert settings.hidden_prefix == "."
        assert settings.seed_on_start is False

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("WATCHER_EXTENSION", "ts")
        monkeypatch.setenv("WATCHER_SEED_ON_START", "true")

        settings = get_settings()

        assert settings.watcher.extension == ".ts"
        assert settings.watcher.seed_on_start is True

    def test_empty_extension_rejected(self):
        with pytest.raises(ValidationError):
            WatcherSettings(extension="")

    def test_build_command_split(self):
        settings = BuildSettings(command='gopherjs build -o "out dir/app.js"')

        assert settings.argv == ["gopherjs", "build", "-o", "out dir/app.js"]

    def test_settings_cached(self):
        assert get_settings() is get_settings()


class TestLoggingSettings:
    """Test cases for LoggingSettings validation."""

    def test_level_normalized(self):
        assert LoggingSettings(level=" info ").level == "INFO"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")

    def test_format_normalized(self):
        assert LoggingSettings(format="JSON").format == "json"

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError):
            LoggingSettings(format="xml")

    def test_invalid_env_value_raises(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("WATCHER_SEED_ON_START", "maybe")

        with pytest.raises(ValidationError):
            get_settings()

    def test_no_environment_field(self):
        assert "environment" not in Settings.model_fields
