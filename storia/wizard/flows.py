"""
Autoproduction creation flows.

Couples a wizard controller to the campaign draft it collects, validates the
content setup step, and hands the finished draft to the generation API and
job tracker.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from storia.core.constants import ProductionKind
from storia.core.logging_config import get_logger
from storia.generation.client import GenerationAPIClient
from storia.generation.models import JobDescriptor
from storia.generation.tracker import GenerationJobTracker
from .controller import StepValidator, WizardController
from .steps import AUTO_STORY_STEPS, AUTO_VIDEO_STEPS, CONTENT_SETUP_STEP, StepDescriptor

logger = get_logger("wizard.flows")


@dataclass
class CampaignDraft:
    """What the user has entered so far."""
    name: str = ""
    topics: List[str] = field(default_factory=list)
    kind: ProductionKind = ProductionKind.STORY
    settings: Dict[str, Any] = field(default_factory=dict)

    @property
    def valid_topics(self) -> List[str]:
        return [topic.strip() for topic in self.topics if topic.strip()]


def content_setup_errors(draft: CampaignDraft) -> List[str]:
    """Messages explaining why the content setup step cannot be left yet."""
    errors = []
    if not draft.name.strip():
        errors.append("Please provide a campaign name.")
    if not draft.valid_topics:
        errors.append("Please add at least one topic.")
    return errors


def campaign_step_validator(
    draft: CampaignDraft,
    content_step: int = CONTENT_SETUP_STEP
) -> StepValidator:
    """Validator that gates only the content setup step."""

    def validate(step: int) -> bool:
        if step == content_step:
            return not content_setup_errors(draft)
        return True

    return validate


def steps_for(kind: ProductionKind) -> Sequence[StepDescriptor]:
    return AUTO_STORY_STEPS if kind == ProductionKind.STORY else AUTO_VIDEO_STEPS


class CreationFlow:
    """
    The non-visual half of a campaign creation wizard.

    handle_next() validates the current step, advances, and on the last step
    starts generation and begins tracking the resulting job.
    """

    def __init__(
        self,
        campaign_id: str,
        draft: CampaignDraft,
        client: GenerationAPIClient,
        steps: Optional[Sequence[StepDescriptor]] = None,
        tracker: Optional[GenerationJobTracker] = None
    ):
        self.campaign_id = campaign_id
        self.draft = draft
        self.client = client
        self.controller = WizardController(
            steps or steps_for(draft.kind),
            validator=campaign_step_validator(draft),
        )
        self.tracker = tracker or GenerationJobTracker(client)
        self.job: Optional[JobDescriptor] = None
        self.errors: List[str] = []

    async def handle_next(self) -> bool:
        """Advance (or submit on the last step). Returns False when validation blocks."""
        step = self.controller.current_step
        if not self.controller.validate_step(step):
            self.errors = content_setup_errors(self.draft)
            logger.info(f"Step {step} of campaign {self.campaign_id} blocked: {self.errors}")
            return False

        self.errors = []
        if self.controller.is_last_step:
            await self.submit()
            return True
        return self.controller.next_step()

    def handle_back(self) -> bool:
        return self.controller.previous_step()

    async def submit(self) -> JobDescriptor:
        """
        Start generation for the draft and begin tracking it.

        Raises:
            JobStartError: if the backend rejects the start request
        """
        self.job = await self.client.start_generation(self.campaign_id, self.draft.valid_topics)
        self.controller.mark_step_completed(self.controller.current_step)
        self.tracker.start(self.job.job_id)
        return self.job

    async def cancel(self) -> bool:
        """Cancel the submitted job, if any."""
        if self.job is None:
            return False
        return await self.tracker.cancel(self.job.job_id)
