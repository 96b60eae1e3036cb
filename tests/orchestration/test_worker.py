"""Tests for TaskWorker claiming and stale-task recovery."""

import asyncio

import pytest

from core.data.uow import create_uow
from core.domain.enums import TaskStatus


@pytest.mark.asyncio
async def test_claim_is_exclusive(order_request, order_service, lifecycle_service, session_factory, clock):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)
    [first, *_] = await lifecycle_service.list_tasks(order.order_number)

    async with create_uow(session_factory) as uow:
        assert await uow.tasks.claim(first.id, clock.now)
        await uow.commit()
    async with create_uow(session_factory) as uow:
        assert not await uow.tasks.claim(first.id, clock.now)

    async with create_uow(session_factory) as uow:
        claimed = await uow.tasks.find_by_id(first.id)
    assert claimed.status is TaskStatus.RUNNING
    assert claimed.attempts == 1
    assert claimed.started_at == clock.now


@pytest.mark.asyncio
async def test_stale_running_task_is_recovered(
    order_request, order_service, lifecycle_service, session_factory, worker, clock
):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)
    [first, *_] = await lifecycle_service.list_tasks(order.order_number)

    # a worker claimed the task and died
    async with create_uow(session_factory) as uow:
        await uow.tasks.claim(first.id, clock.now)
        await uow.commit()

    clock.advance(minutes=1)
    assert await worker.recover_stale(clock.now) == 0

    clock.advance(minutes=15)
    results = await worker.run_once()

    recovered = next(r for r in results if r.task_id == first.id)
    assert recovered.success
    assert recovered.attempts == 2


@pytest.mark.asyncio
async def test_run_once_without_due_tasks(worker):
    assert await worker.run_once() == []


@pytest.mark.asyncio
async def test_start_and_stop(worker):
    worker.start()
    await asyncio.sleep(0)
    await worker.stop()
