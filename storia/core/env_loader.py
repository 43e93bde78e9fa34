"""
Centralized environment variable loading for Storia.

Loads the project's .env once so that config defaults and server settings see the
same values.

Usage:
    from storia.core.env_loader import ensure_env_loaded
    ensure_env_loaded()
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_env_loaded = False

API_URL_ENV = "STORIA_API_URL"
POLL_INTERVAL_ENV = "STORIA_POLL_INTERVAL"


def get_project_root() -> Path:
    """Get the project root directory (where .env is located)."""
    # storia/core/env_loader.py -> two levels up
    return Path(__file__).parent.parent.parent


def ensure_env_loaded(override: bool = False) -> bool:
    """
    Ensure environment variables from .env are loaded.

    Args:
        override: If True, .env values replace variables already set in the process

    Returns:
        True if .env was loaded, False if already loaded or file not found
    """
    global _env_loaded

    if _env_loaded:
        return False

    env_path = get_project_root() / ".env"
    if not env_path.exists():
        return False

    load_dotenv(env_path, override=override)
    _env_loaded = True
    return True


def get_env(name: str, fallback_names: Optional[list[str]] = None) -> Optional[str]:
    """
    Read a non-blank environment variable, trying fallbacks in order.

    Args:
        name: Primary environment variable name
        fallback_names: Other variable names to try

    Returns:
        Stripped value or None if nothing is set
    """
    ensure_env_loaded()

    for key in [name, *(fallback_names or [])]:
        value = os.getenv(key)
        if value and value.strip():
            return value.strip()
    return None


def get_api_url() -> Optional[str]:
    """Base URL of the generation API."""
    return get_env(API_URL_ENV)


def get_poll_interval() -> Optional[float]:
    """Polling interval override in seconds, or None when unset or unparsable."""
    value = get_env(POLL_INTERVAL_ENV)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
