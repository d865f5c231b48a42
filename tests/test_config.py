"""
Tests for settings loading.
"""

import os
from pathlib import Path

import pytest

from vmcompat.config import (
    DEFAULT_HOST_COMPAT_URL,
    DEFAULT_HOST_RELEASE_URL,
    DEFAULT_PLUGIN_COMPAT_URL,
    Settings,
    load_env,
)


class TestSettingsFromEnv:
    """Test Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.plugin_compat_url == DEFAULT_PLUGIN_COMPAT_URL
        assert settings.host_compat_url == DEFAULT_HOST_COMPAT_URL
        assert settings.host_release_url == DEFAULT_HOST_RELEASE_URL
        assert settings.http_timeout == 15.0
        assert settings.log_level == "INFO"
        assert settings.log_dir is None

    def test_overrides(self):
        settings = Settings.from_env({
            "VMCOMPAT_PLUGIN_COMPAT_URL": "https://mirror/plugin.json",
            "VMCOMPAT_HOST_COMPAT_URL": "https://mirror/host.json",
            "VMCOMPAT_HTTP_TIMEOUT": "2.5",
            "VMCOMPAT_LOG_LEVEL": "debug",
            "VMCOMPAT_LOG_DIR": "/tmp/vmcompat-logs",
        })
        assert settings.plugin_compat_url == "https://mirror/plugin.json"
        assert settings.host_compat_url == "https://mirror/host.json"
        assert settings.http_timeout == 2.5
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == Path("/tmp/vmcompat-logs")

    def test_empty_release_url_disables_check(self):
        settings = Settings.from_env({"VMCOMPAT_HOST_RELEASE_URL": ""})
        assert settings.host_release_url is None

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_invalid_timeout(self, value):
        with pytest.raises(ValueError, match="VMCOMPAT_HTTP_TIMEOUT"):
            Settings.from_env({"VMCOMPAT_HTTP_TIMEOUT": value})

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="VMCOMPAT_LOG_LEVEL"):
            Settings.from_env({"VMCOMPAT_LOG_LEVEL": "LOUD"})


class TestLoadEnv:
    """Test .env loading."""

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_loads_without_overriding(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "VMCOMPAT_LOG_LEVEL=DEBUG\n"
            "VMCOMPAT_HTTP_TIMEOUT=4\n"
        )
        monkeypatch.setenv("VMCOMPAT_HTTP_TIMEOUT", "9")
        # set first so teardown removes it again
        monkeypatch.setenv("VMCOMPAT_LOG_LEVEL", "INFO")
        monkeypatch.delenv("VMCOMPAT_LOG_LEVEL")

        assert load_env(env_file) is True
        assert os.environ["VMCOMPAT_LOG_LEVEL"] == "DEBUG"
        assert os.environ["VMCOMPAT_HTTP_TIMEOUT"] == "9"
