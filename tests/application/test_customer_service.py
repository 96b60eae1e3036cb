"""Tests for CustomerApplicationService."""

import pytest

from core.domain.exceptions import IllegalTransition, NotFound


@pytest.mark.asyncio
async def test_customer_approval_cycle(order_request, order_service, customer_service, clock):
    order = await order_service.create_order(order_request())
    customer_id = order.customer.id
    assert order.customer.status == "pending"

    approved = await customer_service.approve(customer_id)
    assert approved.status == "approved"

    suspended = await customer_service.suspend(customer_id)
    assert suspended.status == "suspended"

    reapproved = await customer_service.approve(customer_id)
    assert reapproved.status == "approved"

    with pytest.raises(IllegalTransition):
        await customer_service.reject(customer_id)


@pytest.mark.asyncio
async def test_reject_pending_customer(order_request, order_service, customer_service):
    order = await order_service.create_order(order_request())
    rejected = await customer_service.reject(order.customer.id)
    assert rejected.status == "rejected"


@pytest.mark.asyncio
async def test_unknown_customer(customer_service):
    with pytest.raises(NotFound):
        await customer_service.approve(404)
