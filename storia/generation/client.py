"""
Generation API Client

Async HTTP client for the autoproduction start / progress / cancel endpoints.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from storia.core.config import get_config
from storia.core.constants import ProductionKind
from storia.core.exceptions import JobStartError, ProgressFetchError, JobCancelError, GenerationError
from storia.core.logging_config import get_logger
from .models import (
    BatchProgress,
    JobDescriptor,
    JobStatus,
    ProgressResponse,
    snapshot_from_campaign,
)
from .source import ProgressSource

logger = get_logger("generation.client")


def _error_detail(response: httpx.Response) -> str:
    """Pull the error text out of a FastAPI-style error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if detail:
            return str(detail)
    return f"HTTP {response.status_code}"


class GenerationAPIClient(ProgressSource):
    """
    Client for one autoproduction kind (story or video).

    Usage:
        async with GenerationAPIClient(kind=ProductionKind.STORY) as api:
            job = await api.start_generation("campaign-1", ["topic"])
            snapshot = await api.get_progress(job.job_id)
    """

    def __init__(
        self,
        base_url: str = None,
        kind: ProductionKind = ProductionKind.STORY,
        timeout: float = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        config = get_config()
        self.kind = kind
        self.base_url = (base_url or config.api.base_url).rstrip("/")
        self.prefix = config.api.story_path if kind == ProductionKind.STORY else config.api.video_path
        self.timeout = timeout or config.polling.request_timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    def _url(self, campaign_id: str, action: str) -> str:
        return f"{self.prefix}/{campaign_id}/{action}"

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GenerationAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def start_generation(self, campaign_id: str, topics: List[str]) -> JobDescriptor:
        """Start a batch for a campaign. The job id is the campaign id."""
        try:
            response = await self._get_client().post(
                self._url(campaign_id, "generate"),
                json={"topics": topics},
            )
        except httpx.HTTPError as e:
            raise JobStartError(campaign_id, str(e))

        if response.status_code >= 400:
            raise JobStartError(campaign_id, _error_detail(response), response.status_code)

        try:
            data: Dict[str, Any] = response.json()
        except ValueError:
            data = {}
        logger.info(f"Started {self.kind.value} generation for campaign {campaign_id}")
        return JobDescriptor(
            job_id=data.get("campaign_id", campaign_id),
            status=JobStatus.QUEUED,
            message=data.get("message"),
        )

    async def get_progress(self, job_id: str) -> BatchProgress:
        try:
            response = await self._get_client().get(self._url(job_id, "progress"))
        except httpx.HTTPError as e:
            raise ProgressFetchError(job_id, str(e))

        if response.status_code >= 400:
            raise ProgressFetchError(job_id, _error_detail(response))

        try:
            payload = ProgressResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProgressFetchError(job_id, f"Malformed progress payload: {e}")

        return snapshot_from_campaign(payload.progress)

    async def cancel(self, job_id: str) -> bool:
        try:
            response = await self._get_client().post(self._url(job_id, "cancel-batch"))
        except httpx.HTTPError as e:
            raise JobCancelError(job_id, str(e))

        if response.status_code >= 400:
            raise JobCancelError(job_id, _error_detail(response))

        logger.info(f"Cancel acknowledged for job {job_id}")
        try:
            return bool(response.json().get("success", True))
        except ValueError:
            return True

    async def retry_item(self, campaign_id: str, item_index: int) -> bool:
        """Re-run one failed item of a campaign."""
        try:
            response = await self._get_client().post(self._url(campaign_id, f"retry/{item_index}"))
        except httpx.HTTPError as e:
            raise GenerationError(f"Retry of item {item_index} failed: {e}", {"campaign_id": campaign_id})

        if response.status_code >= 400:
            raise GenerationError(
                f"Retry of item {item_index} rejected: {_error_detail(response)}",
                {"campaign_id": campaign_id, "status_code": response.status_code}
            )
        try:
            return bool(response.json().get("success", True))
        except ValueError:
            return True
