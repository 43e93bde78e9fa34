"""
Storia Generation Module

Job snapshots, the autoproduction API client and the polling job tracker.
"""

from .models import (
    JobStatus,
    BatchProgress,
    JobDescriptor,
    CurrentItemProgress,
    BatchGenerationProgress,
    ItemStatus,
    snapshot_from_campaign,
)
from .source import ProgressSource
from .client import GenerationAPIClient
from .tracker import GenerationJobTracker, SnapshotStream

__all__ = [
    'JobStatus',
    'BatchProgress',
    'JobDescriptor',
    'CurrentItemProgress',
    'BatchGenerationProgress',
    'ItemStatus',
    'snapshot_from_campaign',
    'ProgressSource',
    'GenerationAPIClient',
    'GenerationJobTracker',
    'SnapshotStream',
]
