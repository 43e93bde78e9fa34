"""
Progress source interface consumed by the job tracker.
"""

from abc import ABC, abstractmethod

from .models import BatchProgress


class ProgressSource(ABC):
    """Anything that can report a job's progress and accept a cancel request."""

    @abstractmethod
    async def get_progress(self, job_id: str) -> BatchProgress:
        """Fetch one snapshot. Must be safe to call repeatedly."""
        pass

    @abstractmethod
    async def cancel(self, job_id: str) -> bool:
        """Ask the backend to stop the job. Returns the acknowledgment."""
        pass
