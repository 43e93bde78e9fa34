"""Generation router for the Storia autoproduction API.

Start, progress, cancel and retry endpoints for story and video campaigns.
Batches run in the background; clients poll the progress endpoint.
"""

from typing import Dict

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from storia.api.settings import get_settings
from storia.core.constants import ProductionKind
from storia.core.exceptions import CampaignNotFoundError, InvalidCampaignStateError, StoriaError
from storia.core.logging_config import get_logger
from storia.generation.models import (
    ActionResponse,
    GenerateRequest,
    GenerateResponse,
    ProgressResponse,
)
from storia.pipelines.batch_processor import CampaignBatchProcessor

logger = get_logger("api.generation")

router = APIRouter()

# Rate limiter for batch starts
limiter = Limiter(key_func=get_remote_address)

# One in-memory batch registry per production kind
processors: Dict[ProductionKind, CampaignBatchProcessor] = {
    kind: CampaignBatchProcessor(kind) for kind in ProductionKind
}


def get_processor(kind: ProductionKind) -> CampaignBatchProcessor:
    return processors[kind]


def _http_error(error: StoriaError) -> HTTPException:
    if isinstance(error, CampaignNotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, InvalidCampaignStateError):
        return HTTPException(status_code=400, detail=error.message)
    logger.error(f"Unexpected generation error: {error}")
    return HTTPException(status_code=500, detail=error.message)


async def execute_batch(processor: CampaignBatchProcessor, campaign_id: str):
    """Background task: run a started batch to the end."""
    try:
        await processor.process_batch(campaign_id)
    except Exception as e:
        logger.error(f"Batch processing error for {campaign_id}: {e}")


async def execute_retry(processor: CampaignBatchProcessor, campaign_id: str, item_index: int):
    """Background task: re-run one failed item."""
    try:
        await processor.run_retry(campaign_id, item_index)
    except Exception as e:
        logger.error(f"Retry error for {campaign_id}/{item_index}: {e}")


@router.post("/{kind}/{campaign_id}/generate", response_model=GenerateResponse)
@limiter.limit(lambda: get_settings().generate_rate_limit)
async def start_generation(
    request: Request,
    kind: ProductionKind,
    campaign_id: str,
    generate_request: GenerateRequest,
    background_tasks: BackgroundTasks
):
    """Start batch generation for a campaign and return immediately."""
    processor = get_processor(kind)
    try:
        progress = processor.start_batch(campaign_id, generate_request.topics)
    except StoriaError as e:
        raise _http_error(e)

    background_tasks.add_task(execute_batch, processor, campaign_id)
    return GenerateResponse(
        success=True,
        started=True,
        campaign_id=campaign_id,
        message=f"Started generation for {progress.pending} {kind.value} items",
    )


@router.get("/{kind}/{campaign_id}/progress", response_model=ProgressResponse)
async def get_progress(kind: ProductionKind, campaign_id: str):
    """Current batch progress with per-item status."""
    # Polled every couple of seconds; no logging here
    try:
        progress = get_processor(kind).get_batch_progress(campaign_id)
    except StoriaError as e:
        raise _http_error(e)
    return ProgressResponse(success=True, progress=progress)


@router.post("/{kind}/{campaign_id}/cancel-batch", response_model=ActionResponse)
async def cancel_batch(kind: ProductionKind, campaign_id: str):
    """Soft-cancel: the current item finishes and the campaign is paused."""
    try:
        get_processor(kind).cancel_batch(campaign_id)
    except StoriaError as e:
        raise _http_error(e)
    return ActionResponse(success=True, message="Batch generation paused")


@router.post("/{kind}/{campaign_id}/retry/{item_index}", response_model=ActionResponse)
async def retry_item(
    kind: ProductionKind,
    campaign_id: str,
    item_index: int,
    background_tasks: BackgroundTasks
):
    """Retry one failed item in the background."""
    processor = get_processor(kind)
    try:
        processor.prepare_retry(campaign_id, item_index)
    except StoriaError as e:
        raise _http_error(e)

    background_tasks.add_task(execute_retry, processor, campaign_id, item_index)
    return ActionResponse(success=True, message=f"Retrying {kind.value} item {item_index}")
