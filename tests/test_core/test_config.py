"""
Tests for Configuration Module

Tests for storia/core/config.py
"""

import pytest
import json

from storia.core.config import (
    StoriaConfig,
    PollingConfig,
    ApiConfig,
    load_config,
    save_config,
    get_config,
    set_config,
)
from storia.core.constants import DEFAULT_API_URL, DEFAULT_POLL_INTERVAL_SECONDS
from storia.core.exceptions import ConfigurationError, InvalidConfigError


class TestStoriaConfig:
    """Tests for StoriaConfig class."""

    def test_default_config(self):
        """Test default configuration creation."""
        config = StoriaConfig()

        assert config.app_name == "Storia"
        assert config.api.base_url == DEFAULT_API_URL
        assert config.polling.interval_seconds == DEFAULT_POLL_INTERVAL_SECONDS == 2.0
        assert config.polling.request_timeout == 10.0
        assert config.polling.backoff_on_failure is False
        assert config.polling.max_backoff_seconds == 30.0

    def test_config_from_dict(self, sample_config):
        """Test creating config from dictionary."""
        config = StoriaConfig.from_dict(sample_config)

        assert config.api.base_url == "http://api.example.test"
        assert config.api.story_path == ApiConfig().story_path
        assert config.polling.interval_seconds == 5.0
        assert config.polling.backoff_on_failure is True

    def test_config_to_dict(self):
        """Test converting config to dictionary."""
        config_dict = StoriaConfig().to_dict()

        assert isinstance(config_dict, dict)
        assert config_dict["polling"]["interval_seconds"] == 2.0
        assert config_dict["api"]["video_path"] == "/api/autoproduction/video"


class TestPollingConfig:
    """Tests for polling value validation."""

    @pytest.mark.parametrize("interval", [0, -1.5])
    def test_non_positive_interval_rejected(self, interval):
        with pytest.raises(InvalidConfigError):
            PollingConfig(interval_seconds=interval).validate()

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(InvalidConfigError):
            PollingConfig(request_timeout=0).validate()

    def test_backoff_cap_below_interval_rejected(self):
        with pytest.raises(InvalidConfigError):
            PollingConfig(interval_seconds=5, max_backoff_seconds=1, backoff_on_failure=True).validate()

    def test_long_interval_allowed_without_backoff(self):
        config = PollingConfig(interval_seconds=60.0)

        config.validate()
        assert config.max_backoff_seconds < config.interval_seconds

    def test_from_dict_validates(self):
        with pytest.raises(InvalidConfigError):
            PollingConfig.from_dict({"interval_seconds": 0})


class TestLoadSaveConfig:
    """Tests for config loading and saving."""

    def test_load_config_from_file(self, temp_dir, sample_config):
        """Test loading config from JSON file."""
        config_path = temp_dir / "test_config.json"

        with open(config_path, 'w') as f:
            json.dump(sample_config, f)

        config = load_config(config_path)

        assert config.api.base_url == "http://api.example.test"
        assert config.polling.request_timeout == 3.0

    def test_load_config_missing_file(self, temp_dir):
        """Test loading config from non-existent file returns default."""
        config = load_config(temp_dir / "nonexistent.json")

        assert config.app_name == "Storia"
        assert config.polling.interval_seconds == 2.0

    def test_load_config_invalid_json(self, temp_dir):
        config_path = temp_dir / "broken.json"
        config_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            load_config(config_path)

    def test_invalid_config_is_a_configuration_error(self, temp_dir):
        config_path = temp_dir / "broken.json"
        config_path.write_text("[", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(config_path)

    def test_save_config(self, temp_dir):
        """Test saving config to file."""
        config = StoriaConfig()
        config.polling.interval_seconds = 4.0
        config_path = temp_dir / "nested" / "saved_config.json"

        save_config(config, config_path)

        assert config_path.exists()
        assert load_config(config_path).polling.interval_seconds == 4.0


class TestGlobalConfig:
    """Tests for the module-level config instance."""

    def test_set_and_get_config(self):
        config = StoriaConfig(app_name="Other")
        set_config(config)

        assert get_config() is config

    def test_reset_loads_with_env_overrides(self, monkeypatch):
        monkeypatch.setenv("STORIA_API_URL", "http://env.example.test")
        monkeypatch.setenv("STORIA_POLL_INTERVAL", "0.5")
        set_config(None)

        config = get_config()

        assert config.api.base_url == "http://env.example.test"
        assert config.polling.interval_seconds == 0.5

    def test_unparsable_interval_env_is_ignored(self, monkeypatch):
        monkeypatch.delenv("STORIA_API_URL", raising=False)
        monkeypatch.setenv("STORIA_POLL_INTERVAL", "often")

        config = StoriaConfig().apply_env_overrides()

        assert config.polling.interval_seconds == 2.0

    def test_invalid_interval_env_is_rejected(self, monkeypatch):
        monkeypatch.setenv("STORIA_POLL_INTERVAL", "-1")

        with pytest.raises(InvalidConfigError):
            StoriaConfig().apply_env_overrides()
