"""
Storia Core Module

Configuration, constants, exceptions, logging and retry helpers.
"""

from .config import StoriaConfig, PollingConfig, ApiConfig, load_config, get_config, set_config
from .constants import *
from .exceptions import *
from .logging_config import setup_logging, get_logger, LogLevel

__all__ = [
    'StoriaConfig',
    'PollingConfig',
    'ApiConfig',
    'load_config',
    'get_config',
    'set_config',
    'setup_logging',
    'get_logger',
    'LogLevel',
]
