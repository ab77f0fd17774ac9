"""Tests for giftwrap.core.config - CoreSettings and global config management.

Tests cover:
- Settings loading with defaults
- Environment variable overrides
- Singleton behavior (get_config / clear_config_cache)
- Invalid values surfacing as ConfigException
"""

from __future__ import annotations

import pytest

from giftwrap.core.config import (
    RANGE_RANDOM_TIMESTAMP_TWEAK,
    CoreSettings,
    clear_config_cache,
    get_config,
)
from giftwrap.core.exceptions import ConfigException

# ============================================================================
# CoreSettings - Default Values
# ============================================================================


class TestCoreSettingsDefaults:
    """Test that CoreSettings loads with correct default values."""

    def test_protocol_defaults(self, clean_env):
        settings = CoreSettings()
        assert settings.timestamp_tweak_seconds == RANGE_RANDOM_TIMESTAMP_TWEAK == 172800

    def test_logging_defaults(self, clean_env):
        settings = CoreSettings()
        assert settings.log_level == "INFO"
        assert settings.log_format == ""
        assert settings.log_file is None


# ============================================================================
# Environment overrides
# ============================================================================


class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    def test_timestamp_tweak(self, clean_env, monkeypatch):
        monkeypatch.setenv("GIFTWRAP_TIMESTAMP_TWEAK", "3600")
        assert CoreSettings().timestamp_tweak_seconds == 3600

    def test_logging(self, clean_env, monkeypatch):
        monkeypatch.setenv("GIFTWRAP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("GIFTWRAP_LOG_FORMAT", "json")
        monkeypatch.setenv("GIFTWRAP_LOG_FILE", "/tmp/giftwrap.log")
        settings = CoreSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.log_file == "/tmp/giftwrap.log"

    def test_unrelated_vars_ignored(self, clean_env, monkeypatch):
        monkeypatch.setenv("GIFTWRAP_SOMETHING_ELSE", "x")
        CoreSettings()


# ============================================================================
# Global config
# ============================================================================


class TestGetConfig:
    """Test the singleton accessor."""

    def test_singleton(self, clean_env):
        assert get_config() is get_config()

    def test_clear_cache(self, clean_env, monkeypatch):
        first = get_config()
        monkeypatch.setenv("GIFTWRAP_TIMESTAMP_TWEAK", "10")
        assert get_config() is first
        clear_config_cache()
        assert get_config().timestamp_tweak_seconds == 10

    @pytest.mark.parametrize("value", ["0", "-5", "soon"])
    def test_invalid_window(self, clean_env, monkeypatch, value):
        monkeypatch.setenv("GIFTWRAP_TIMESTAMP_TWEAK", value)
        with pytest.raises(ConfigException) as exc_info:
            get_config()
        assert exc_info.value.setting == "GIFTWRAP_TIMESTAMP_TWEAK"
