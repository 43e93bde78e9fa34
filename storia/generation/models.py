"""
Generation Job Models

Snapshot values observed by the tracker and the batch progress wire format
served by the autoproduction API.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storia.core.constants import CampaignStatus, ItemGenerationStatus


class JobStatus(str, Enum):
    """Status of a generation job as seen by the tracker."""
    QUEUED = "queued"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({JobStatus.DONE, JobStatus.FAILED, JobStatus.CANCELLED})


class CurrentItemProgress(BaseModel):
    """The item a batch is working on right now."""
    index: int
    topic: str = ""
    stage: str = ""
    progress: float = 0.0


class BatchProgress(BaseModel):
    """One immutable progress reading for a job."""

    job_id: str
    status: JobStatus
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    error: Optional[str] = None
    result_url: Optional[str] = None

    # Count-based detail, when the backend reports a batch
    total: int = 0
    completed: int = 0
    failed: int = 0
    pending: int = 0
    in_progress: int = 0
    current_item: Optional[CurrentItemProgress] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class JobDescriptor(BaseModel):
    """What the start-generation call hands back."""
    job_id: str
    status: JobStatus = JobStatus.QUEUED
    message: Optional[str] = None

    model_config = ConfigDict(frozen=True)


# =============================================================================
# WIRE FORMAT
# =============================================================================

class ItemStatus(BaseModel):
    """Status of one item in a campaign batch."""
    status: ItemGenerationStatus = ItemGenerationStatus.PENDING
    error: Optional[str] = None
    result_url: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class BatchGenerationProgress(BaseModel):
    """Campaign-level progress as returned by GET /{id}/progress."""
    campaign_id: str
    status: CampaignStatus
    total: int = 0
    completed: int = 0
    failed: int = 0
    pending: int = 0
    in_progress: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    item_statuses: Dict[str, ItemStatus] = Field(default_factory=dict)
    current_item: Optional[CurrentItemProgress] = None
    result_url: Optional[str] = None


class GenerateRequest(BaseModel):
    """Body of POST /{id}/generate."""
    topics: List[str] = Field(default_factory=list)


class GenerateResponse(BaseModel):
    success: bool
    started: bool
    campaign_id: str
    message: str


class ProgressResponse(BaseModel):
    success: bool
    progress: BatchGenerationProgress


class ActionResponse(BaseModel):
    success: bool
    message: str


_CAMPAIGN_TO_JOB_STATUS = {
    CampaignStatus.DRAFT: JobStatus.QUEUED,
    CampaignStatus.GENERATING: JobStatus.PROCESSING,
    CampaignStatus.REVIEW: JobStatus.DONE,
    CampaignStatus.COMPLETED: JobStatus.DONE,
    CampaignStatus.PAUSED: JobStatus.CANCELLED,
    CampaignStatus.CANCELLED: JobStatus.CANCELLED,
    CampaignStatus.FAILED: JobStatus.FAILED,
}


def job_status_for(campaign_status: str, started_items: int = 1) -> JobStatus:
    """
    Map a campaign status string onto the job status vocabulary.

    Unknown values map to PROCESSING so polling keeps going. A generating
    campaign with no item started yet is still QUEUED.
    """
    try:
        status = CampaignStatus(campaign_status)
    except ValueError:
        return JobStatus.PROCESSING

    job_status = _CAMPAIGN_TO_JOB_STATUS[status]
    if job_status == JobStatus.PROCESSING and started_items == 0:
        return JobStatus.QUEUED
    return job_status


def percent_complete(total: int, completed: int, failed: int) -> float:
    if total <= 0:
        return 0.0
    return min(100.0, (completed + failed) / total * 100.0)


def snapshot_from_campaign(progress: BatchGenerationProgress) -> BatchProgress:
    """Turn a campaign progress payload into a tracker snapshot."""
    started = progress.completed + progress.failed + progress.in_progress
    status = job_status_for(progress.status.value, started_items=started)

    error = None
    if status == JobStatus.FAILED:
        item_errors = [item.error for item in progress.item_statuses.values() if item.error]
        error = item_errors[-1] if item_errors else "Generation failed"

    return BatchProgress(
        job_id=progress.campaign_id,
        status=status,
        progress=percent_complete(progress.total, progress.completed, progress.failed),
        error=error,
        result_url=progress.result_url,
        total=progress.total,
        completed=progress.completed,
        failed=progress.failed,
        pending=progress.pending,
        in_progress=progress.in_progress,
        current_item=progress.current_item,
    )
