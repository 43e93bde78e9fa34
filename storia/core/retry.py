"""
Retry delay utilities with exponential backoff.

Used by the progress tracker to stretch the polling interval while the status
endpoint keeps failing.
"""

import random
from dataclasses import dataclass
from typing import Tuple


@dataclass
class RetryConfig:
    """Configuration for backoff delays."""
    base_delay: float = 1.0  # Base delay in seconds
    max_delay: float = 60.0  # Maximum delay in seconds
    exponential_base: float = 2.0  # Multiplier for exponential backoff
    jitter: bool = True  # Add random jitter to prevent thundering herd
    jitter_range: Tuple[float, float] = (0.5, 1.5)  # Jitter multiplier range


def calculate_delay(
    attempt: int,
    config: RetryConfig
) -> float:
    """
    Calculate delay before next retry attempt.

    Uses exponential backoff with optional jitter.

    Args:
        attempt: Current attempt number (0-indexed)
        config: Retry configuration

    Returns:
        Delay in seconds before next attempt
    """
    delay = config.base_delay * (config.exponential_base ** max(attempt, 0))
    delay = min(delay, config.max_delay)

    if config.jitter:
        jitter_multiplier = random.uniform(*config.jitter_range)
        delay *= jitter_multiplier

    return delay


def polling_backoff_config(interval: float, max_delay: float) -> RetryConfig:
    """Backoff that starts at the polling interval and is capped, without jitter."""
    return RetryConfig(
        base_delay=interval,
        max_delay=max_delay,
        exponential_base=2.0,
        jitter=False,
    )
