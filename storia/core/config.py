"""
Storia Configuration Management

Client-side configuration for the wizard flows and the generation tracker,
loaded from JSON with environment overrides.
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError, InvalidConfigError
from .env_loader import get_api_url, get_poll_interval
from .constants import DEFAULT_API_URL, DEFAULT_POLL_INTERVAL_SECONDS


@dataclass
class PollingConfig:
    """Generation progress polling settings."""
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    request_timeout: float = 10.0
    backoff_on_failure: bool = False
    max_backoff_seconds: float = 30.0

    def validate(self) -> None:
        if self.interval_seconds <= 0:
            raise InvalidConfigError(
                "Polling interval must be positive",
                {"interval_seconds": self.interval_seconds}
            )
        if self.request_timeout <= 0:
            raise InvalidConfigError(
                "Request timeout must be positive",
                {"request_timeout": self.request_timeout}
            )
        if self.backoff_on_failure and self.max_backoff_seconds < self.interval_seconds:
            raise InvalidConfigError(
                "Maximum backoff cannot be shorter than the polling interval",
                {
                    "interval_seconds": self.interval_seconds,
                    "max_backoff_seconds": self.max_backoff_seconds,
                }
            )

    @classmethod
    def from_dict(cls, data: dict) -> 'PollingConfig':
        config = cls(
            interval_seconds=float(data.get('interval_seconds', DEFAULT_POLL_INTERVAL_SECONDS)),
            request_timeout=float(data.get('request_timeout', 10.0)),
            backoff_on_failure=bool(data.get('backoff_on_failure', False)),
            max_backoff_seconds=float(data.get('max_backoff_seconds', 30.0)),
        )
        config.validate()
        return config


@dataclass
class ApiConfig:
    """Where the generation API lives."""
    base_url: str = DEFAULT_API_URL
    story_path: str = "/api/autoproduction/story"
    video_path: str = "/api/autoproduction/video"


@dataclass
class StoriaConfig:
    """Main configuration class for Storia."""

    app_name: str = "Storia"
    version: str = "1.0.0"

    api: ApiConfig = field(default_factory=ApiConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)

    verbose_logging: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'StoriaConfig':
        """Create StoriaConfig from dictionary."""
        config = cls()

        config.app_name = data.get('app_name', config.app_name)
        config.version = data.get('version', config.version)
        config.verbose_logging = data.get('verbose_logging', config.verbose_logging)

        if 'api' in data:
            api_data = data['api']
            config.api = ApiConfig(
                base_url=api_data.get('base_url', DEFAULT_API_URL),
                story_path=api_data.get('story_path', config.api.story_path),
                video_path=api_data.get('video_path', config.api.video_path),
            )

        if 'polling' in data:
            config.polling = PollingConfig.from_dict(data['polling'])

        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def apply_env_overrides(self) -> 'StoriaConfig':
        """Let STORIA_API_URL / STORIA_POLL_INTERVAL win over file values."""
        api_url = get_api_url()
        if api_url:
            self.api.base_url = api_url

        interval = get_poll_interval()
        if interval is not None:
            self.polling.interval_seconds = interval
            self.polling.validate()

        return self


def load_config(config_path: Path = None) -> StoriaConfig:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to configuration file. If None, uses default.

    Returns:
        Loaded StoriaConfig instance
    """
    if config_path is None:
        config_path = Path("config/storia_config.json")
    config_path = Path(config_path)

    if not config_path.exists():
        return StoriaConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON in config file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to load config: {e}")

    return StoriaConfig.from_dict(data)


def save_config(config: StoriaConfig, config_path: Path) -> None:
    """Write configuration to a JSON file, creating parent folders."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)


# Global config instance
_config: Optional[StoriaConfig] = None


def get_config() -> StoriaConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config().apply_env_overrides()
    return _config


def set_config(config: Optional[StoriaConfig]) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
