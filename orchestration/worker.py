"""Task worker pool - polls the durable queue and runs due tasks."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.data.uow import create_uow
from core.domain.entities import FulfillmentTask
from hostflow_sdk.logging import get_logger
from hostflow_sdk.utils.datetime import utc_now

from .coordinator import FulfillmentCoordinator
from .models import TaskResult


class TaskWorker:
    """
    Runs queued fulfillment tasks off the request path.

    Each poll claims due tasks with a compare-and-swap (so several worker
    processes can share one queue) and executes up to `concurrency` of them
    at once.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        coordinator: FulfillmentCoordinator,
        concurrency: int = 4,
        batch_size: int = 20,
        poll_interval_seconds: float = 5.0,
        stale_task_seconds: int = 900,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._coordinator = coordinator
        self._semaphore = asyncio.Semaphore(max(concurrency, 1))
        self._batch_size = batch_size
        self._poll_interval = poll_interval_seconds
        self._stale_after = timedelta(seconds=stale_task_seconds)
        self._clock = clock
        self._stopping = asyncio.Event()
        self._loop_task: asyncio.Task | None = None
        self._logger = get_logger("orchestration.worker")

    async def run_once(self, now: datetime | None = None) -> list[TaskResult]:
        """Claim and execute every task due at `now`.

        Args:
            now: Poll time (defaults to the clock)

        Returns:
            One TaskResult per executed task
        """
        now = now or self._clock()
        await self.recover_stale(now)

        async with create_uow(self._session_factory) as uow:
            due = await uow.tasks.find_due(now, limit=self._batch_size)

        claimed: list[FulfillmentTask] = []
        for candidate in due:
            async with create_uow(self._session_factory) as uow:
                if not await uow.tasks.claim(candidate.id, now):
                    continue
                await uow.commit()
                claimed.append(await uow.tasks.find_by_id(candidate.id))

        if not claimed:
            return []

        self._logger.info(f"claimed {len(claimed)} task(s)")

        async def run(task: FulfillmentTask) -> TaskResult:
            async with self._semaphore:
                return await self._coordinator.execute(task, now=now)

        return list(await asyncio.gather(*(run(task) for task in claimed)))

    async def recover_stale(self, now: datetime) -> int:
        """Re-queue tasks left running by a crashed worker.

        The interrupted attempt stays counted.

        Returns:
            Number of tasks re-queued
        """
        cutoff = now - self._stale_after
        async with create_uow(self._session_factory) as uow:
            stale = await uow.tasks.find_stale_running(cutoff)
            recovered = 0
            for task in stale:
                if await uow.tasks.requeue(task.id, now):
                    recovered += 1
            await uow.commit()

        if recovered:
            self._logger.warning(f"re-queued {recovered} stale running task(s)")
        return recovered

    async def run_forever(self) -> None:
        """Poll until `stop()` is called."""
        self._logger.info("task worker started")
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except Exception as exc:
                self._logger.error(f"worker poll failed: {exc}", exc_info=True)
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass
        self._logger.info("task worker stopped")

    def start(self) -> asyncio.Task:
        """Run the poll loop as a background task on the current event loop."""
        if self._loop_task is None or self._loop_task.done():
            self._stopping.clear()
            self._loop_task = asyncio.create_task(self.run_forever())
        return self._loop_task

    async def stop(self) -> None:
        """Signal the poll loop to stop and wait for the current poll to finish."""
        self._stopping.set()
        if self._loop_task is not None:
            await self._loop_task
            self._loop_task = None
