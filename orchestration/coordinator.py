"""Fulfillment coordinator - enqueues task records and runs single attempts."""

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import INotificationService
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import FulfillmentTask, Order
from core.domain.enums import TaskStatus, TaskType
from core.domain.exceptions import IllegalTransition
from core.domain.services import TaskRequest
from core.domain.value_objects import ExecutionID
from hostflow_sdk.logging import get_logger
from hostflow_sdk.utils.datetime import utc_now

from .bus import EventBusProtocol
from .events import build_event
from .models import ExecutionContext, TaskResult
from .workflow import DEFAULT_RETRY_POLICIES, RUNNABLE_ORDER_STATUSES, RetryPolicy, TaskHandler


class FulfillmentCoordinator:
    """
    Dispatches fulfillment tasks with per-task retry.

    Tasks are durable records: `enqueue` writes them inside the caller's
    unit of work (so they commit atomically with the transition that
    produced them) and `execute` runs one attempt of an already claimed
    task, recording success, a scheduled retry or a permanent failure.
    Failures are isolated per task; nothing already succeeded is undone.
    """

    SERVICE = "fulfillment"

    def __init__(
        self,
        session_factory: async_sessionmaker,
        handlers: Mapping[TaskType, TaskHandler],
        event_bus: EventBusProtocol,
        policies: Mapping[TaskType, RetryPolicy] | None = None,
        notification_service: INotificationService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize coordinator.

        Args:
            session_factory: SQLAlchemy async session factory
            handlers: Use case per task type
            event_bus: EventBusProtocol for publishing task events
            policies: Retry policy per task type
            notification_service: Receives permanent failures
            clock: Source of "now" (naive UTC)
        """
        self._session_factory = session_factory
        self._handlers = dict(handlers)
        self._event_bus = event_bus
        self._policies = dict(policies or DEFAULT_RETRY_POLICIES)
        self._notifications = notification_service
        self._clock = clock
        self._logger = get_logger("orchestration.coordinator")

    def policy_for(self, task_type: TaskType) -> RetryPolicy:
        return self._policies.get(task_type, RetryPolicy())

    async def enqueue(
        self,
        uow: UnitOfWork,
        requests: Iterable[TaskRequest],
        now: datetime | None = None,
    ) -> list[FulfillmentTask]:
        """Persist task records for a transition's task list.

        Does not commit; the caller commits together with the transition.

        Args:
            uow: Open UnitOfWork of the triggering transition
            requests: TaskRequest list produced by the lifecycle
            now: First run time (defaults to the clock)

        Returns:
            Persisted FulfillmentTask records
        """
        now = now or self._clock()
        tasks = []
        for request in requests:
            policy = self.policy_for(request.task_type)
            task = FulfillmentTask(
                task_type=request.task_type,
                order_id=int(request.payload["order_id"]),
                domain_id=request.domain_id,
                payload=dict(request.payload),
                max_attempts=policy.max_attempts,
                backoff_seconds=policy.backoff_seconds,
                next_run_at=now,
            )
            tasks.append(await uow.tasks.add(task))

        if tasks:
            self._logger.info(
                f"[{uow.execution_id}] enqueued {len(tasks)} task(s): "
                + ", ".join(t.task_type.value for t in tasks)
            )
        return tasks

    async def execute(self, task: FulfillmentTask, now: datetime | None = None) -> TaskResult:
        """Run one attempt of a claimed (running) task.

        Args:
            task: Task record as claimed by the worker (attempts already counted)
            now: Attempt time (defaults to the clock)

        Returns:
            TaskResult describing what happened
        """
        started_at = now or self._clock()
        ctx = ExecutionContext(
            execution_id=ExecutionID.generate(),
            task=task,
            started_at=started_at,
        )

        # Order status check immediately before dispatch
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(task.order_id)
            reason = self._skip_reason(order, task.task_type)
            if reason is not None:
                await uow.tasks.mark_skipped(task.id, started_at, reason)
                await uow.commit()
                self._logger.info(f"{ctx.log_prefix} skipped: {reason}")
                await self._publish("task.skipped", ctx, {"reason": reason})
                return self._result(ctx, TaskStatus.SKIPPED, error=reason)

        handler = self._handlers.get(task.task_type)
        if handler is None:
            error = f"no handler registered for {task.task_type.value}"
            await self._fail_permanently(ctx, None, error, RuntimeError(error))
            return self._result(ctx, TaskStatus.FAILED, error=error)

        self._logger.info(
            f"{ctx.log_prefix} starting attempt {task.attempts}/{task.max_attempts} "
            f"(order {task.order_id})"
        )
        await self._publish("task.started", ctx, {"attempt": task.attempts})

        try:
            output = await handler.execute(ctx)
        except Exception as exc:
            return await self._handle_failure(ctx, handler, exc)

        finished_at = self._clock()
        async with create_uow(self._session_factory) as uow:
            await uow.tasks.mark_succeeded(task.id, finished_at)
            await uow.commit()

        self._logger.info(f"{ctx.log_prefix} ✅ succeeded: {output}")
        await self._publish("task.succeeded", ctx, {"attempt": task.attempts, "output": str(output)})
        return self._result(ctx, TaskStatus.SUCCEEDED, output=output)

    async def retry_task(self, task_id: int) -> FulfillmentTask | None:
        """Re-queue a permanently failed task with a fresh attempt budget.

        A task whose order can no longer run it (e.g. provisioning after the
        order was reverted to pending) is refused; re-approve the order instead.

        Args:
            task_id: Task record id

        Returns:
            Updated task, or None if it does not exist or was not failed

        Raises:
            IllegalTransition: If the order's status does not allow the task to run
        """
        now = self._clock()
        async with create_uow(self._session_factory) as uow:
            task = await uow.tasks.find_by_id(task_id)
            if task is None or task.status is not TaskStatus.FAILED:
                return None
            order = await uow.orders.find_by_id(task.order_id)
            if order is not None and self._skip_reason(order, task.task_type) is not None:
                raise IllegalTransition(
                    "order",
                    order.status.value,
                    f"retry {task.task_type.value} for",
                    hint="re-approve the order to start a new task list",
                )
            await uow.tasks.requeue(task_id, now, reset_attempts=True)
            await uow.commit()
            self._logger.info(f"[{uow.execution_id}] task {task_id} re-queued manually")
            return await uow.tasks.find_by_id(task_id)

    @staticmethod
    def _skip_reason(order: Order | None, task_type: TaskType) -> str | None:
        if order is None:
            return "order not found"
        if order.is_cancelled():
            return "order cancelled"
        if order.status not in RUNNABLE_ORDER_STATUSES.get(task_type, frozenset()):
            return f"order is {order.status.value}"
        return None

    async def _handle_failure(
        self, ctx: ExecutionContext, handler: TaskHandler, exc: Exception
    ) -> TaskResult:
        task = ctx.task
        error = f"{type(exc).__name__}: {exc}"

        if task.has_attempts_left():
            next_run_at = ctx.started_at + timedelta(seconds=task.backoff_seconds)
            async with create_uow(self._session_factory) as uow:
                await uow.tasks.schedule_retry(task.id, next_run_at, error)
                await uow.commit()

            self._logger.warning(
                f"{ctx.log_prefix} attempt {task.attempts}/{task.max_attempts} failed: "
                f"{error}; retrying at {next_run_at.isoformat()}"
            )
            await self._publish(
                "task.retry_scheduled",
                ctx,
                {"attempt": task.attempts, "error": error, "next_run_at": next_run_at.isoformat()},
            )
            return self._result(ctx, TaskStatus.QUEUED, error=error)

        await self._fail_permanently(ctx, handler, error, exc)
        return self._result(ctx, TaskStatus.FAILED, error=error)

    async def _fail_permanently(
        self,
        ctx: ExecutionContext,
        handler: TaskHandler | None,
        error: str,
        exc: Exception,
    ) -> None:
        task = ctx.task
        async with create_uow(self._session_factory) as uow:
            await uow.tasks.mark_failed(task.id, self._clock(), error)
            await uow.commit()

        self._logger.error(
            f"{ctx.log_prefix} ❌ permanently failed after {task.attempts} attempt(s): {error}"
        )

        if handler is not None:
            try:
                await handler.on_permanent_failure(ctx, exc)
            except Exception as hook_exc:
                self._logger.error(
                    f"{ctx.log_prefix} failure hook raised: {hook_exc}", exc_info=True
                )

        await self._publish("task.failed", ctx, {"attempt": task.attempts, "error": error})

        if self._notifications is not None:
            await self._notifications.send_error(
                execution_id=ctx.execution_id,
                reference=f"order {task.order_id} / {task.task_type.value}#{task.id}",
                error=error,
                details="Retries exhausted; manual follow-up required.",
            )

    async def _publish(self, name: str, ctx: ExecutionContext, extra: dict[str, object]) -> None:
        payload: dict[str, object] = {
            "task_id": ctx.task.id,
            "task_type": ctx.task.task_type.value,
            "order_id": ctx.task.order_id,
            "domain_id": ctx.task.domain_id,
        }
        payload.update(extra)
        await self._event_bus.publish(
            build_event(name, ctx.execution_id, self.SERVICE, payload, operation=ctx.task.task_type.value)
        )

    def _result(
        self,
        ctx: ExecutionContext,
        status: TaskStatus,
        error: str | None = None,
        output: object = None,
    ) -> TaskResult:
        duration_ms = int((self._clock() - ctx.started_at).total_seconds() * 1000)
        return TaskResult(
            task_id=ctx.task.id,
            task_type=ctx.task.task_type,
            status=status,
            attempts=ctx.task.attempts,
            duration_ms=max(duration_ms, 0),
            error=error,
            output=output,
        )
