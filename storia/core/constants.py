"""
Storia Constants

Global constants shared by the wizard flows, the generation client and the API.
"""

from enum import Enum

# =============================================================================
# VERSION INFO
# =============================================================================
VERSION = "1.0.0"
PROJECT_NAME = "Storia"

# =============================================================================
# GENERATION API
# =============================================================================

DEFAULT_API_URL = "http://localhost:8000"

# Job durations run from tens of seconds to minutes
DEFAULT_POLL_INTERVAL_SECONDS = 2.0


class ProductionKind(Enum):
    """Autoproduction campaign kinds; each has its own route prefix."""
    STORY = "story"
    VIDEO = "video"


class CampaignStatus(str, Enum):
    """Campaign status vocabulary used by the batch API."""
    DRAFT = "draft"
    GENERATING = "generating"
    PAUSED = "paused"
    REVIEW = "review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ItemGenerationStatus(str, Enum):
    """Status of one item (story or video) inside a campaign batch."""
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


# Campaign states from which a new batch may be started
STARTABLE_CAMPAIGN_STATUSES = (CampaignStatus.DRAFT, CampaignStatus.PAUSED)
