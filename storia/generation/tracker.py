"""
Generation Job Tracker

Polls a progress source on a fixed interval and publishes snapshots until the
job reaches a terminal status.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Union

from storia.core.config import PollingConfig, get_config
from storia.core.logging_config import get_logger
from storia.core.retry import calculate_delay, polling_backoff_config
from .models import BatchProgress
from .source import ProgressSource

logger = get_logger("generation.tracker")

SnapshotCallback = Callable[[BatchProgress], Union[None, Awaitable[None]]]


class SnapshotStream:
    """
    Async iterator holding only the most recent snapshot.

    A slow consumer skips intermediate values but always receives the latest
    one. Iteration ends once the stream is closed and drained.
    """

    def __init__(self):
        self._latest: Optional[BatchProgress] = None
        self._pending = False
        self._closed = False
        self._event = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, snapshot: BatchProgress) -> None:
        if self._closed:
            return
        self._latest = snapshot
        self._pending = True
        self._event.set()

    def close(self) -> None:
        self._closed = True
        self._event.set()

    def __aiter__(self) -> "SnapshotStream":
        return self

    async def __anext__(self) -> BatchProgress:
        while not self._pending:
            if self._closed:
                raise StopAsyncIteration
            self._event.clear()
            await self._event.wait()
        self._pending = False
        return self._latest


class GenerationJobTracker:
    """
    Turns a job id into a live progress feed.

    Features:
    - Fixed-interval polling; the first tick fires immediately
    - Single-flight: a tick that finds a fetch outstanding is skipped
    - Automatic stop on done / failed / cancelled
    - Transient fetch failures are logged and polling carries on
    - Results that arrive after stop() or cancel() are discarded

    Usage:
        tracker = GenerationJobTracker(api_client)
        tracker.subscribe(lambda snapshot: print(snapshot.progress))
        tracker.start(job.job_id)
        final = await tracker.wait_until_settled()
    """

    def __init__(self, source: ProgressSource, config: Optional[PollingConfig] = None):
        """
        Initialize the tracker.

        Args:
            source: Where snapshots come from and cancel requests go
            config: Polling settings; defaults to the global config
        """
        self._source = source
        self._config = config or get_config().polling
        self._config.validate()

        self._job_id: Optional[str] = None
        # Bumped by start/stop; a fetch only publishes if its epoch is current
        self._epoch = 0
        self._ticker: Optional[asyncio.Task] = None
        self._in_flight: Optional[asyncio.Future] = None

        self._snapshots: Dict[str, BatchProgress] = {}
        self._callbacks: List[SnapshotCallback] = []
        self._streams: List[SnapshotStream] = []

        self._consecutive_failures = 0
        self.ticks = 0
        self.skipped_ticks = 0

    @property
    def job_id(self) -> Optional[str]:
        return self._job_id

    @property
    def is_polling(self) -> bool:
        return self._ticker is not None

    @property
    def has_request_in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def latest(self) -> Optional[BatchProgress]:
        if self._job_id is None:
            return None
        return self._snapshots.get(self._job_id)

    def start(self, job_id: str) -> None:
        """Begin polling a job. Must be called from a running event loop."""
        loop = asyncio.get_running_loop()
        if self.is_polling:
            self.stop()

        self._job_id = job_id
        self._epoch += 1
        self._consecutive_failures = 0
        self._ticker = loop.create_task(self._run(job_id, self._epoch))
        logger.info(f"Tracking generation job {job_id} every {self._config.interval_seconds}s")

    def stop(self) -> None:
        """Halt polling. A fetch already sent may finish; its result is dropped."""
        was_polling = self._ticker is not None
        self._epoch += 1

        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

        for stream in self._streams:
            stream.close()
        self._streams.clear()

        if was_polling:
            logger.info(f"Stopped tracking generation job {self._job_id}")

    async def cancel(self, job_id: str) -> bool:
        """
        Request cancellation of a job, stop polling it and forget its snapshot.

        Returns:
            The backend's acknowledgment

        Raises:
            JobCancelError: if the cancel request itself fails
        """
        request = asyncio.ensure_future(self._source.cancel(job_id))
        if job_id == self._job_id:
            self.stop()
        self._snapshots.pop(job_id, None)
        logger.info(f"Cancellation requested for generation job {job_id}")
        return await request

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Register a sync or async callback; returns an unsubscribe function."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def snapshots(self) -> SnapshotStream:
        """
        Open a latest-value stream of snapshots.

        The stream starts with the cached snapshot, if any, and ends when
        polling stops. Opened while idle, it ends right after that snapshot.
        """
        stream = SnapshotStream()
        if self.latest is not None:
            stream.push(self.latest)
        if self.is_polling:
            self._streams.append(stream)
        else:
            stream.close()
        return stream

    async def wait_until_settled(self) -> Optional[BatchProgress]:
        """Consume snapshots until polling stops; returns the last one seen."""
        last = self.latest
        async for snapshot in self.snapshots():
            last = snapshot
        return last

    def _next_delay(self) -> float:
        interval = self._config.interval_seconds
        if self._config.backoff_on_failure and self._consecutive_failures > 0:
            backoff = polling_backoff_config(interval, self._config.max_backoff_seconds)
            return calculate_delay(self._consecutive_failures - 1, backoff)
        return interval

    async def _run(self, job_id: str, epoch: int) -> None:
        while epoch == self._epoch:
            self.ticks += 1
            if self._in_flight is None:
                self._in_flight = asyncio.ensure_future(self._poll_once(job_id, epoch))
            else:
                self.skipped_ticks += 1
                logger.debug(f"Skipping tick for {job_id}: previous request still outstanding")
            await asyncio.sleep(self._next_delay())

    async def _poll_once(self, job_id: str, epoch: int) -> None:
        try:
            try:
                snapshot = await self._source.get_progress(job_id)
            except Exception as e:
                if epoch == self._epoch:
                    self._consecutive_failures += 1
                    logger.warning(
                        f"Progress fetch for {job_id} failed "
                        f"({self._consecutive_failures} in a row): {e}"
                    )
                return

            if epoch != self._epoch:
                logger.debug(f"Discarding late snapshot for {job_id}")
                return

            self._consecutive_failures = 0
            self._snapshots[job_id] = snapshot
            logger.debug(f"Job {job_id}: {snapshot.status.value} {snapshot.progress:.0f}%")
            await self._publish(snapshot, epoch)

            if snapshot.is_terminal and epoch == self._epoch:
                logger.info(f"Generation job {job_id} settled: {snapshot.status.value}")
                self.stop()
        finally:
            self._in_flight = None

    async def _publish(self, snapshot: BatchProgress, epoch: int) -> None:
        for stream in list(self._streams):
            stream.push(snapshot)

        for callback in list(self._callbacks):
            if epoch != self._epoch:
                return
            try:
                result = callback(snapshot)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"Snapshot callback error: {e}")
