"""
Storia Batch Processor

Runs a campaign's items one after another and keeps the per-item and
campaign-level progress that the autoproduction API serves.

Item generation itself is delegated to an injected async generator. The
default generator refuses to run, since no provider is wired in here.
"""

from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Set

from storia.core.constants import (
    CampaignStatus,
    ItemGenerationStatus,
    ProductionKind,
    STARTABLE_CAMPAIGN_STATUSES,
)
from storia.core.exceptions import (
    BatchItemNotFoundError,
    CampaignNotFoundError,
    GenerationNotConfiguredError,
    InvalidCampaignStateError,
)
from storia.core.logging_config import get_logger
from storia.generation.models import BatchGenerationProgress, CurrentItemProgress, ItemStatus

logger = get_logger("pipelines.batch")

# (campaign_id, item_index, topic) -> result url
ItemGenerator = Callable[[str, int, str], Awaitable[Optional[str]]]


async def unconfigured_generator(campaign_id: str, item_index: int, topic: str) -> Optional[str]:
    raise GenerationNotConfiguredError(
        "No item generator is configured",
        {"campaign_id": campaign_id, "item_index": item_index}
    )


class CampaignBatchProcessor:
    """
    In-memory batch registry and sequential processor for one production kind.

    Features:
    - One item at a time, in topic order
    - A failed item is recorded and the batch moves on
    - Soft cancel: the running item finishes, no new item starts
    - One processing loop per campaign at a time
    - Retry of a single failed item
    """

    def __init__(
        self,
        kind: ProductionKind = ProductionKind.STORY,
        generator: ItemGenerator = None
    ):
        self.kind = kind
        self.generator = generator or unconfigured_generator
        self._batches: Dict[str, BatchGenerationProgress] = {}
        self._topics: Dict[str, List[str]] = {}
        self._running: Set[str] = set()
        self._status_before_retry: Dict[str, CampaignStatus] = {}

    def __contains__(self, campaign_id: str) -> bool:
        return campaign_id in self._batches

    def _get(self, campaign_id: str) -> BatchGenerationProgress:
        if campaign_id not in self._batches:
            raise CampaignNotFoundError(campaign_id)
        return self._batches[campaign_id]

    def get_batch_progress(self, campaign_id: str) -> BatchGenerationProgress:
        """Return a copy of the campaign's current progress."""
        return self._get(campaign_id).model_copy(deep=True)

    def create_campaign(self, campaign_id: str, topics: List[str]) -> BatchGenerationProgress:
        """Register a draft campaign with one pending item per non-blank topic."""
        topics = _clean_topics(topics)
        progress = BatchGenerationProgress(
            campaign_id=campaign_id,
            status=CampaignStatus.DRAFT,
            item_statuses={str(index): ItemStatus() for index in range(len(topics))},
        )
        _recount(progress)
        self._batches[campaign_id] = progress
        self._topics[campaign_id] = topics
        return progress

    def start_batch(self, campaign_id: str, topics: List[str]) -> BatchGenerationProgress:
        """
        Move a campaign into the generating state.

        Unknown campaigns are registered as drafts first. A paused campaign
        resumes with its remaining pending items and ignores new topics, once
        the item that was running when it paused has finished.

        Raises:
            InvalidCampaignStateError: if the campaign cannot start or has no topics
        """
        progress = self._batches.get(campaign_id)
        if progress is None or progress.status == CampaignStatus.DRAFT:
            if not _clean_topics(topics):
                raise InvalidCampaignStateError(campaign_id, "No topics in campaign")
            progress = self.create_campaign(campaign_id, topics)
        elif progress.status not in STARTABLE_CAMPAIGN_STATUSES:
            raise InvalidCampaignStateError(
                campaign_id,
                f"Cannot start generation: campaign status is {progress.status.value}"
            )
        elif campaign_id in self._running:
            raise InvalidCampaignStateError(
                campaign_id,
                "Cannot resume generation: the current item is still finishing"
            )

        progress.status = CampaignStatus.GENERATING
        progress.started_at = progress.started_at or datetime.now()
        progress.completed_at = None
        logger.info(f"Starting {self.kind.value} batch for {campaign_id}: {progress.pending} pending items")
        return progress

    async def process_batch(self, campaign_id: str) -> BatchGenerationProgress:
        """Generate every pending item in order until done or cancelled."""
        progress = self._get(campaign_id)
        if campaign_id in self._running:
            logger.debug(f"Batch {campaign_id} is already being processed")
            return progress

        self._running.add(campaign_id)
        try:
            for key in sorted(progress.item_statuses, key=int):
                if progress.status != CampaignStatus.GENERATING:
                    logger.info(f"Batch {campaign_id} stopped ({progress.status.value}) before item {key}")
                    return progress
                if progress.item_statuses[key].status == ItemGenerationStatus.PENDING:
                    await self._process_item(campaign_id, int(key))

            if progress.status == CampaignStatus.GENERATING:
                self._finish(progress)
            return progress
        finally:
            self._running.discard(campaign_id)

    def cancel_batch(self, campaign_id: str) -> BatchGenerationProgress:
        """
        Soft-cancel a running batch; the campaign becomes paused.

        Raises:
            CampaignNotFoundError: unknown campaign
            InvalidCampaignStateError: the campaign is not generating
        """
        progress = self._get(campaign_id)
        if progress.status != CampaignStatus.GENERATING:
            raise InvalidCampaignStateError(
                campaign_id,
                f"Campaign is not generating (status: {progress.status.value})"
            )
        progress.status = CampaignStatus.PAUSED
        progress.current_item = None
        logger.info(f"Batch {campaign_id} paused by cancel request")
        return progress

    def prepare_retry(self, campaign_id: str, item_index: int) -> BatchGenerationProgress:
        """
        Check that an item can be retried and put the campaign back to generating.

        Raises:
            CampaignNotFoundError: unknown campaign
            BatchItemNotFoundError: no item at that index
            InvalidCampaignStateError: the item is not failed, or a batch is running
        """
        progress = self._get(campaign_id)
        item = progress.item_statuses.get(str(item_index))
        if item is None:
            raise BatchItemNotFoundError(campaign_id, item_index)
        if item.status != ItemGenerationStatus.FAILED:
            raise InvalidCampaignStateError(
                campaign_id,
                f"Item {item_index} is not in failed status (current: {item.status.value})"
            )
        if progress.status == CampaignStatus.GENERATING or campaign_id in self._running:
            raise InvalidCampaignStateError(campaign_id, "Generation already in progress")

        self._status_before_retry[campaign_id] = progress.status
        progress.status = CampaignStatus.GENERATING
        progress.completed_at = None
        return progress

    async def retry_item(self, campaign_id: str, item_index: int) -> BatchGenerationProgress:
        """Re-run one failed item, then settle the campaign status again."""
        self.prepare_retry(campaign_id, item_index)
        return await self.run_retry(campaign_id, item_index)

    async def run_retry(self, campaign_id: str, item_index: int) -> BatchGenerationProgress:
        """
        Second half of retry_item(), for callers that already ran prepare_retry().

        The campaign is settled only when no pending items remain; otherwise
        it goes back to the status it had before the retry.
        """
        progress = self._get(campaign_id)
        previous = self._status_before_retry.get(campaign_id, CampaignStatus.PAUSED)
        logger.info(f"Retrying item {item_index} in {campaign_id}")
        self._running.add(campaign_id)
        try:
            await self._process_item(campaign_id, item_index)
        finally:
            self._running.discard(campaign_id)
            self._status_before_retry.pop(campaign_id, None)

        if progress.status == CampaignStatus.GENERATING:
            if progress.pending:
                progress.status = previous
            else:
                self._finish(progress)
        return progress

    async def _process_item(self, campaign_id: str, item_index: int) -> None:
        progress = self._batches[campaign_id]
        topic = self._topics[campaign_id][item_index]
        item = ItemStatus(status=ItemGenerationStatus.GENERATING, started_at=datetime.now())
        progress.item_statuses[str(item_index)] = item
        progress.current_item = CurrentItemProgress(index=item_index, topic=topic, stage="generating")
        _recount(progress)

        try:
            result_url = await self.generator(campaign_id, item_index, topic)
        except Exception as e:
            item.status = ItemGenerationStatus.FAILED
            item.error = str(e)
            logger.warning(f"Item {item_index} of {campaign_id} failed: {e}")
        else:
            item.status = ItemGenerationStatus.COMPLETED
            item.result_url = result_url
            if result_url:
                progress.result_url = result_url
            logger.info(f"Item {item_index} of {campaign_id} completed")
        finally:
            item.completed_at = datetime.now()
            progress.current_item = None
            _recount(progress)

    def _finish(self, progress: BatchGenerationProgress) -> None:
        progress.status = CampaignStatus.COMPLETED if progress.completed > 0 else CampaignStatus.FAILED
        progress.completed_at = datetime.now()
        logger.info(
            f"Batch {progress.campaign_id} {progress.status.value}: "
            f"{progress.completed} completed, {progress.failed} failed"
        )


def _recount(progress: BatchGenerationProgress) -> None:
    statuses = [item.status for item in progress.item_statuses.values()]
    progress.total = len(statuses)
    progress.completed = statuses.count(ItemGenerationStatus.COMPLETED)
    progress.failed = statuses.count(ItemGenerationStatus.FAILED)
    progress.pending = statuses.count(ItemGenerationStatus.PENDING)
    progress.in_progress = statuses.count(ItemGenerationStatus.GENERATING)


def _clean_topics(topics: List[str]) -> List[str]:
    return [topic.strip() for topic in topics if topic and topic.strip()]
