"""Repository interface for fulfillment task records."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities import FulfillmentTask


class TaskRepository(ABC):
    """Abstract repository for the durable task queue."""

    @abstractmethod
    async def add(self, task: FulfillmentTask) -> FulfillmentTask:
        pass

    @abstractmethod
    async def find_by_id(self, task_id: int) -> Optional[FulfillmentTask]:
        pass

    @abstractmethod
    async def list_for_order(self, order_id: int) -> List[FulfillmentTask]:
        pass

    @abstractmethod
    async def find_due(self, now: datetime, limit: int = 10) -> List[FulfillmentTask]:
        """Queued tasks whose `next_run_at` has passed, oldest first."""

    @abstractmethod
    async def claim(self, task_id: int, now: datetime) -> bool:
        """Atomically move a queued task to running and count the attempt.

        Returns:
            False if another worker claimed it first
        """

    @abstractmethod
    async def mark_succeeded(self, task_id: int, now: datetime) -> None:
        pass

    @abstractmethod
    async def mark_skipped(self, task_id: int, now: datetime, reason: str) -> None:
        pass

    @abstractmethod
    async def schedule_retry(self, task_id: int, next_run_at: datetime, error: str) -> None:
        pass

    @abstractmethod
    async def mark_failed(self, task_id: int, now: datetime, error: str) -> None:
        pass

    @abstractmethod
    async def requeue(self, task_id: int, now: datetime, reset_attempts: bool = False) -> bool:
        """Put a failed or stale task back in the queue. False if it was not requeueable."""

    @abstractmethod
    async def find_stale_running(self, started_before: datetime) -> List[FulfillmentTask]:
        pass
