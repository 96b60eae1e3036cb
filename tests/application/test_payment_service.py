"""Tests for PaymentReconciliationService."""

import pytest

from core.application.dtos import PaymentEvent
from core.domain.exceptions import IllegalTransition


async def paid_checkout(order_service, payment_service, payments, order_request):
    order = await order_service.create_order(order_request())
    checkout = await payment_service.start_payment(order.order_number)
    return order, checkout


@pytest.mark.asyncio
async def test_start_payment_stores_reference(order_request, order_service, payment_service, payments):
    order, checkout = await paid_checkout(order_service, payment_service, payments, order_request)

    assert checkout.checkout_url.endswith(checkout.payment_ref)
    stored = await order_service.get_order(order.order_number)
    assert stored.payment_ref == checkout.payment_ref
    assert payments.payments[checkout.payment_ref]["metadata"]["order_id"] == order.id


@pytest.mark.asyncio
async def test_paid_webhook_marks_paid_and_auto_approves(
    order_request, order_service, payment_service, lifecycle_service, payments, event_bus, clock
):
    order, checkout = await paid_checkout(order_service, payment_service, payments, order_request)
    payments.set_status(checkout.payment_ref, "paid")

    result = await payment_service.handle_webhook(checkout.payment_ref)

    assert result.applied
    assert result.previous_status == "pending"
    assert result.new_status == "processing"
    stored = await order_service.get_order(order.order_number)
    assert stored.paid_at == clock.now
    assert stored.activated_at is None
    assert len(await lifecycle_service.list_tasks(order.order_number)) == 4
    assert event_bus.names()[-2:] == ["order.paid", "order.approved"]


@pytest.mark.asyncio
async def test_duplicate_paid_webhook_is_noop(
    order_request, order_service, payment_service, lifecycle_service, payments
):
    order, checkout = await paid_checkout(order_service, payment_service, payments, order_request)
    payments.set_status(checkout.payment_ref, "paid")
    await payment_service.handle_webhook(checkout.payment_ref)

    again = await payment_service.handle_webhook(checkout.payment_ref)

    assert not again.applied
    assert again.new_status == "processing"
    assert len(await lifecycle_service.list_tasks(order.order_number)) == 4


@pytest.mark.asyncio
async def test_paid_without_auto_approve_stays_paid(
    order_request, order_service, session_factory, payments, lifecycle_service, clock
):
    from core.application.services import PaymentReconciliationService

    service = PaymentReconciliationService(
        session_factory, payments, lifecycle_service=lifecycle_service, auto_approve=False, clock=clock
    )
    order = await order_service.create_order(order_request())
    result = await service.reconcile(
        PaymentEvent(payment_ref="tr_manual", status="paid", metadata={"order_id": order.id})
    )

    assert result.new_status == "paid"
    stored = await order_service.get_order(order.order_number)
    assert stored.payment_ref == "tr_manual"
    assert await lifecycle_service.list_tasks(order.order_number) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["failed", "expired"])
async def test_failed_payment_fails_order(order_request, order_service, payment_service, status):
    order = await order_service.create_order(order_request())

    result = await payment_service.reconcile(
        PaymentEvent(payment_ref="tr_1", status=status, metadata={"order_id": order.id})
    )

    assert result.applied and result.new_status == "failed"


@pytest.mark.asyncio
async def test_canceled_payment_cancels_order(order_request, order_service, payment_service):
    order = await order_service.create_order(order_request())

    result = await payment_service.reconcile(
        PaymentEvent(payment_ref="tr_1", status="canceled", metadata={"order_id": str(order.id)})
    )

    assert result.new_status == "cancelled"
    stored = await order_service.get_order(order.order_number)
    assert stored.domains[0].status == "cancelled"


@pytest.mark.asyncio
async def test_open_payment_changes_nothing(order_request, order_service, payment_service):
    order = await order_service.create_order(order_request())

    result = await payment_service.reconcile(
        PaymentEvent(payment_ref="tr_1", status="open", metadata={"order_id": order.id})
    )

    assert not result.applied
    assert result.new_status == "pending"


@pytest.mark.asyncio
async def test_unknown_or_missing_order_is_reported(payment_service):
    unknown = await payment_service.reconcile(
        PaymentEvent(payment_ref="tr_1", status="paid", metadata={"order_id": 4242})
    )
    missing = await payment_service.reconcile(PaymentEvent(payment_ref="tr_2", status="paid"))

    assert not unknown.applied and unknown.reason == "order not found"
    assert not missing.applied and missing.order_id is None


@pytest.mark.asyncio
async def test_payment_only_for_pending_orders(order_request, order_service, payment_service, lifecycle_service):
    order = await order_service.create_order(order_request())
    await lifecycle_service.cancel(order.order_number)

    with pytest.raises(IllegalTransition):
        await payment_service.start_payment(order.order_number)
