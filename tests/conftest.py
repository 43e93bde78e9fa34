"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import asyncio
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from storia.core.config import PollingConfig, StoriaConfig, set_config
from storia.generation.models import BatchProgress, JobStatus
from storia.generation.source import ProgressSource


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from default configuration, unaffected by the environment."""
    config = StoriaConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Sample configuration for testing."""
    return {
        "app_name": "Storia",
        "version": "1.0.0",
        "api": {
            "base_url": "http://api.example.test"
        },
        "polling": {
            "interval_seconds": 5,
            "request_timeout": 3,
            "backoff_on_failure": True,
            "max_backoff_seconds": 40
        }
    }


@pytest.fixture
def fast_polling() -> PollingConfig:
    """Millisecond polling for timing-sensitive tracker tests."""
    return PollingConfig(interval_seconds=0.01, request_timeout=1.0, max_backoff_seconds=0.05)


def make_snapshot(status: JobStatus, progress: float = 0.0, job_id: str = "job-1", **extra) -> BatchProgress:
    return BatchProgress(job_id=job_id, status=status, progress=progress, **extra)


class ScriptedProgressSource(ProgressSource):
    """
    Progress source that replays a script of snapshots and errors.

    The last entry repeats once the script runs out. An optional gate holds
    every fetch until it is set.
    """

    def __init__(
        self,
        script: List[Union[BatchProgress, Exception]],
        delay: float = 0.0,
        cancel_result: bool = True,
        cancel_error: Optional[Exception] = None
    ):
        self.script = list(script)
        self.delay = delay
        self.cancel_result = cancel_result
        self.cancel_error = cancel_error
        self.gate: Optional[asyncio.Event] = None

        self.calls = 0
        self.requested: List[str] = []
        self.cancelled: List[str] = []
        self.active = 0
        self.max_active = 0

    async def get_progress(self, job_id: str) -> BatchProgress:
        self.calls += 1
        self.requested.append(job_id)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            entry = self.script.pop(0) if len(self.script) > 1 else self.script[0]
            if isinstance(entry, Exception):
                raise entry
            return entry
        finally:
            self.active -= 1

    async def cancel(self, job_id: str) -> bool:
        self.cancelled.append(job_id)
        if self.cancel_error is not None:
            raise self.cancel_error
        return self.cancel_result


@pytest.fixture
def snapshot():
    """Factory for BatchProgress snapshots."""
    return make_snapshot


@pytest.fixture
def make_source():
    """Factory for scripted progress sources."""
    return ScriptedProgressSource
