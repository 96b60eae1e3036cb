"""SQLAlchemy implementation of TaskRepository (the durable task queue)."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import FulfillmentTask
from core.domain.enums import TaskStatus
from core.domain.repositories import TaskRepository

from ..mappers import TaskMapper
from ..models import FulfillmentTaskModel


class SqlAlchemyTaskRepository(TaskRepository):
    """
    Task queue backed by the fulfillment_tasks table.

    Every state change is one UPDATE guarded by the expected status, so two
    workers can never both claim or finish the same task.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, task: FulfillmentTask) -> FulfillmentTask:
        model = TaskMapper.to_persistence(task)
        self._session.add(model)
        await self._session.flush()
        return TaskMapper.to_domain(model)

    async def find_by_id(self, task_id: int) -> Optional[FulfillmentTask]:
        result = await self._session.execute(
            select(FulfillmentTaskModel)
            .where(FulfillmentTaskModel.id == task_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return TaskMapper.to_domain(model) if model else None

    async def list_for_order(self, order_id: int) -> List[FulfillmentTask]:
        result = await self._session.execute(
            select(FulfillmentTaskModel)
            .where(FulfillmentTaskModel.order_id == order_id)
            .order_by(FulfillmentTaskModel.id)
            .execution_options(populate_existing=True)
        )
        return [TaskMapper.to_domain(m) for m in result.scalars().all()]

    async def find_due(self, now: datetime, limit: int = 10) -> List[FulfillmentTask]:
        result = await self._session.execute(
            select(FulfillmentTaskModel)
            .where(
                FulfillmentTaskModel.status == TaskStatus.QUEUED.value,
                FulfillmentTaskModel.next_run_at <= now,
            )
            .order_by(FulfillmentTaskModel.next_run_at, FulfillmentTaskModel.id)
            .limit(limit)
        )
        return [TaskMapper.to_domain(m) for m in result.scalars().all()]

    async def claim(self, task_id: int, now: datetime) -> bool:
        result = await self._session.execute(
            update(FulfillmentTaskModel)
            .where(
                FulfillmentTaskModel.id == task_id,
                FulfillmentTaskModel.status == TaskStatus.QUEUED.value,
            )
            .values(
                status=TaskStatus.RUNNING.value,
                attempts=FulfillmentTaskModel.attempts + 1,
                started_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_succeeded(self, task_id: int, now: datetime) -> None:
        await self._finish(task_id, TaskStatus.SUCCEEDED, now)

    async def mark_skipped(self, task_id: int, now: datetime, reason: str) -> None:
        await self._finish(task_id, TaskStatus.SKIPPED, now, last_error=reason)

    async def mark_failed(self, task_id: int, now: datetime, error: str) -> None:
        await self._finish(task_id, TaskStatus.FAILED, now, last_error=error)

    async def schedule_retry(self, task_id: int, next_run_at: datetime, error: str) -> None:
        await self._session.execute(
            update(FulfillmentTaskModel)
            .where(
                FulfillmentTaskModel.id == task_id,
                FulfillmentTaskModel.status == TaskStatus.RUNNING.value,
            )
            .values(
                status=TaskStatus.QUEUED.value,
                next_run_at=next_run_at,
                last_error=error,
            )
            .execution_options(synchronize_session=False)
        )

    async def requeue(self, task_id: int, now: datetime, reset_attempts: bool = False) -> bool:
        values = {
            "status": TaskStatus.QUEUED.value,
            "next_run_at": now,
            "finished_at": None,
            "updated_at": now,
        }
        if reset_attempts:
            values["attempts"] = 0
        result = await self._session.execute(
            update(FulfillmentTaskModel)
            .where(
                FulfillmentTaskModel.id == task_id,
                FulfillmentTaskModel.status.in_([TaskStatus.FAILED.value, TaskStatus.RUNNING.value]),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_stale_running(self, started_before: datetime) -> List[FulfillmentTask]:
        result = await self._session.execute(
            select(FulfillmentTaskModel).where(
                FulfillmentTaskModel.status == TaskStatus.RUNNING.value,
                FulfillmentTaskModel.started_at < started_before,
            )
        )
        return [TaskMapper.to_domain(m) for m in result.scalars().all()]

    async def _finish(self, task_id: int, status: TaskStatus, now: datetime, **values) -> None:
        await self._session.execute(
            update(FulfillmentTaskModel)
            .where(
                FulfillmentTaskModel.id == task_id,
                FulfillmentTaskModel.status == TaskStatus.RUNNING.value,
            )
            .values(status=status.value, finished_at=now, updated_at=now, **values)
            .execution_options(synchronize_session=False)
        )
