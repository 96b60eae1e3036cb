"""Tests for FulfillmentCoordinator retry, permanent failure and skip handling."""

from datetime import timedelta

import pytest

from core.application.services import OrderLifecycleService
from core.data.uow import create_uow
from core.domain.enums import TaskStatus, TaskType
from core.domain.exceptions import IllegalTransition
from core.domain.services import TaskRequest
from orchestration import FulfillmentCoordinator, TaskWorker


async def approved_order(order_service, lifecycle_service, order_request, **overrides):
    order = await order_service.create_order(order_request(**overrides))
    await lifecycle_service.approve(order.order_number)
    return order


def task_of(tasks, task_type):
    [task] = [t for t in tasks if t.task_type == task_type.value]
    return task


@pytest.mark.asyncio
async def test_failed_attempt_is_retried_after_backoff(
    order_request, order_service, lifecycle_service, worker, hosting, clock
):
    order = await approved_order(order_service, lifecycle_service, order_request)
    hosting.fail_next("create_subscription")
    start = clock.now

    first = await worker.run_once()
    assert [r.status for r in first] == [
        TaskStatus.SUCCEEDED,
        TaskStatus.QUEUED,
        TaskStatus.SUCCEEDED,
        TaskStatus.SUCCEEDED,
    ]
    provision = task_of(await lifecycle_service.list_tasks(order.order_number), TaskType.PROVISION_HOSTING)
    assert provision.status == "queued"
    assert provision.attempts == 1
    assert provision.next_run_at == start + timedelta(seconds=60)
    assert "injected create_subscription failure" in provision.last_error

    # not due yet
    clock.advance(seconds=30)
    assert await worker.run_once() == []

    clock.advance(seconds=30)
    [retry] = await worker.run_once()
    assert retry.success
    assert retry.attempts == 2

    final = await order_service.get_order(order.order_number)
    assert final.status == "active"
    assert final.domains[0].status == "active"
    assert len(hosting.calls_to("create_customer_account")) == 1
    assert len(hosting.calls_to("create_subscription")) == 2


@pytest.mark.asyncio
async def test_exhausted_provisioning_reverts_order(
    order_request, order_service, lifecycle_service, worker, hosting, notifications, event_bus, clock
):
    order = await approved_order(order_service, lifecycle_service, order_request)
    hosting.fail_next("create_subscription", times=3)

    await worker.run_once()
    clock.advance(seconds=60)
    await worker.run_once()
    clock.advance(seconds=60)
    [last] = await worker.run_once()

    assert last.status is TaskStatus.FAILED
    assert last.attempts == 3

    final = await order_service.get_order(order.order_number)
    assert final.status == "pending"
    assert final.activated_at is None

    provision = task_of(await lifecycle_service.list_tasks(order.order_number), TaskType.PROVISION_HOSTING)
    assert provision.status == "failed"
    assert provision.finished_at == clock.now

    [error] = notifications.of_type("error")
    assert "provision_hosting" in error["reference"]
    assert "task.failed" in event_bus.names()
    assert "order.provisioning_reverted" in event_bus.names()

    # re-approval starts a fresh task list
    again = await lifecycle_service.approve(order.order_number)
    assert again.status == "processing"


@pytest.mark.asyncio
async def test_tasks_of_cancelled_order_are_skipped(
    order_request, order_service, lifecycle_service, worker, hosting, registrar, accounting
):
    order = await approved_order(order_service, lifecycle_service, order_request)
    await lifecycle_service.cancel(order.order_number, reason="fraud")

    results = await worker.run_once()

    assert [r.status for r in results] == [TaskStatus.SKIPPED] * 4
    assert hosting.calls == [] and registrar.calls == [] and accounting.calls == []
    tasks = await lifecycle_service.list_tasks(order.order_number)
    assert {t.last_error for t in tasks} == {"order cancelled"}


@pytest.mark.asyncio
async def test_missing_handler_fails_task_permanently(
    order_request, order_service, session_factory, event_bus, notifications, clock
):
    coordinator = FulfillmentCoordinator(
        session_factory, {}, event_bus, notification_service=notifications, clock=clock
    )
    lifecycle = OrderLifecycleService(session_factory, coordinator, event_bus, clock=clock)
    order = await order_service.create_order(order_request())
    await lifecycle.approve(order.order_number)

    results = await TaskWorker(session_factory, coordinator, concurrency=1, clock=clock).run_once()

    assert {r.status for r in results} == {TaskStatus.FAILED}
    assert "no handler registered" in results[0].error
    assert len(notifications.of_type("error")) == 4


@pytest.mark.asyncio
async def test_retry_task_resets_budget(
    order_request, order_service, lifecycle_service, coordinator, worker, registrar, clock
):
    order = await approved_order(order_service, lifecycle_service, order_request)
    registrar.fail_next("register_domain", times=3)
    for _ in range(3):
        await worker.run_once()
        clock.advance(seconds=120)

    register = task_of(await lifecycle_service.list_tasks(order.order_number), TaskType.REGISTER_DOMAIN)
    assert register.status == "failed"

    retried = await coordinator.retry_task(register.id)
    assert retried.status is TaskStatus.QUEUED
    assert retried.attempts == 0
    assert retried.next_run_at == clock.now

    assert await coordinator.retry_task(register.id) is None
    assert await coordinator.retry_task(9999) is None


@pytest.mark.asyncio
async def test_enqueue_uses_retry_policy(order_request, order_service, session_factory, coordinator, clock):
    order = await order_service.create_order(order_request())
    async with create_uow(session_factory) as uow:
        [task] = await coordinator.enqueue(
            uow,
            [TaskRequest(TaskType.REGISTER_DOMAIN, {"order_id": order.id, "domain_id": 1}, domain_id=1)],
        )
        await uow.commit()

    assert task.id is not None
    assert task.max_attempts == 3
    assert task.backoff_seconds == 120
    assert task.next_run_at == clock.now


async def exhaust_provisioning(order_service, lifecycle_service, order_request, worker, hosting, clock):
    order = await approved_order(order_service, lifecycle_service, order_request)
    hosting.fail_next("create_subscription", times=3)
    for _ in range(3):
        await worker.run_once()
        clock.advance(seconds=60)
    return order


@pytest.mark.asyncio
async def test_retry_refuses_provisioning_of_reverted_order(
    order_request, order_service, lifecycle_service, coordinator, worker, hosting, clock
):
    order = await exhaust_provisioning(order_service, lifecycle_service, order_request, worker, hosting, clock)
    provision = task_of(await lifecycle_service.list_tasks(order.order_number), TaskType.PROVISION_HOSTING)
    assert (await order_service.get_order(order.order_number)).status == "pending"

    with pytest.raises(IllegalTransition, match="re-approve"):
        await coordinator.retry_task(provision.id)

    unchanged = task_of(await lifecycle_service.list_tasks(order.order_number), TaskType.PROVISION_HOSTING)
    assert unchanged.status == "failed"


@pytest.mark.asyncio
async def test_provisioning_never_runs_against_pending_order(
    order_request, order_service, lifecycle_service, session_factory, worker, hosting, clock
):
    order = await exhaust_provisioning(order_service, lifecycle_service, order_request, worker, hosting, clock)
    provision = task_of(await lifecycle_service.list_tasks(order.order_number), TaskType.PROVISION_HOSTING)

    # re-queued behind the coordinator's back
    async with create_uow(session_factory) as uow:
        await uow.tasks.requeue(provision.id, clock.now, reset_attempts=True)
        await uow.commit()

    [result] = await worker.run_once()

    assert result.status is TaskStatus.SKIPPED
    assert result.error == "order is pending"
    assert len(hosting.calls_to("create_subscription")) == 3
    final = await order_service.get_order(order.order_number)
    assert final.status == "pending"
    assert final.domains[0].hosting_subscription_ref is None


@pytest.mark.asyncio
async def test_hosting_status_tasks_follow_order_status(
    order_request, order_service, lifecycle_service, worker, hosting
):
    order = await approved_order(order_service, lifecycle_service, order_request)
    await worker.run_once()

    await lifecycle_service.suspend(order.order_number)
    await lifecycle_service.reactivate(order.order_number)
    results = await worker.run_once()

    assert [(r.task_type, r.status) for r in results] == [
        (TaskType.SUSPEND_HOSTING, TaskStatus.SKIPPED),
        (TaskType.REACTIVATE_HOSTING, TaskStatus.SUCCEEDED),
    ]
    assert hosting.calls_to("suspend_subscription") == []
