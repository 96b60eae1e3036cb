"""Tests for OrderLifecycleService: admin transitions and task dispatch."""

import pytest

from core.data.uow import create_uow
from core.domain.enums import DomainStatus, TaskStatus, TaskType
from core.domain.exceptions import IllegalTransition, NotFound


@pytest.mark.asyncio
async def test_approve_enqueues_fulfillment_tasks(order_request, order_service, lifecycle_service, event_bus, clock):
    order = await order_service.create_order(order_request())

    approved = await lifecycle_service.approve(order.order_number)

    assert approved.status == "processing"
    assert approved.approved_at == clock.now
    tasks = await lifecycle_service.list_tasks(order.order_number)
    assert [t.task_type for t in tasks] == [
        "sync_accounting_contact",
        "provision_hosting",
        "register_domain",
        "create_invoice",
    ]
    assert all(t.status == "queued" and t.attempts == 0 for t in tasks)
    assert "order.approved" in event_bus.names()


@pytest.mark.asyncio
async def test_illegal_approve_has_no_side_effects(order_request, order_service, lifecycle_service):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)

    with pytest.raises(IllegalTransition):
        await lifecycle_service.approve(order.order_number)

    assert len(await lifecycle_service.list_tasks(order.order_number)) == 4


@pytest.mark.asyncio
async def test_approve_unknown_order(lifecycle_service):
    with pytest.raises(NotFound):
        await lifecycle_service.approve("HF-20240315-NOPE00")


@pytest.mark.asyncio
async def test_cancel_cascades_to_domains_and_is_idempotent(
    order_request, order_service, lifecycle_service, clock
):
    order = await order_service.create_order(
        order_request(domains=[{"name": "one.nl"}, {"name": "two.nl", "register": False}])
    )

    cancelled = await lifecycle_service.cancel(order.order_number, reason="changed mind")
    assert cancelled.status == "cancelled"
    assert cancelled.cancellation_reason == "changed mind"
    assert cancelled.cancelled_at == clock.now
    assert {d.status for d in cancelled.domains} == {"cancelled"}

    clock.advance(hours=1)
    again = await lifecycle_service.cancel(order.order_number, reason="twice")
    assert again.cancelled_at == cancelled.cancelled_at
    assert again.cancellation_reason == "changed mind"


@pytest.mark.asyncio
async def test_full_fulfillment_activates_order(
    order_request, order_service, lifecycle_service, worker, hosting, registrar, accounting, notifications
):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)

    results = await worker.run_once()

    assert [r.status for r in results] == [TaskStatus.SUCCEEDED] * 4
    final = await order_service.get_order(order.order_number)
    assert final.status == "active"
    assert final.provisioned_at is not None
    assert final.next_billing_date.month == 4
    assert final.customer.accounting_contact_ref == "moneybird-contact-1"
    assert final.customer.hosting_account_ref == "plesk-client-1"
    assert final.external_invoice_ref is not None

    [domain] = final.domains
    assert domain.status == "active"
    assert domain.registration_ref == "openprovider-domain-1"
    assert domain.hosting_subscription_ref is not None
    assert domain.expires_at.year == domain.registered_at.year + 1

    [invoice] = accounting.invoices.values()
    assert invoice["reference"] == order.order_number
    assert [line.description for line in invoice["lines"]] == [
        "Startup hosting (monthly)",
        "Domain registration: janedoe.nl",
    ]
    assert notifications.of_type("success")


@pytest.mark.asyncio
async def test_customer_owned_domain_is_activated_by_provisioning(
    order_request, order_service, lifecycle_service, worker, registrar
):
    order = await order_service.create_order(order_request(domains=[{"name": "owned.nl", "register": False}]))
    await lifecycle_service.approve(order.order_number)

    await worker.run_once()

    final = await order_service.get_order(order.order_number)
    assert final.status == "active"
    assert final.domains[0].status == "active"
    assert registrar.calls == []


@pytest.mark.asyncio
async def test_suspend_and_reactivate_drive_hosting(
    order_request, order_service, lifecycle_service, worker, hosting
):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)
    await worker.run_once()
    subscription = (await order_service.get_order(order.order_number)).domains[0].hosting_subscription_ref

    suspended = await lifecycle_service.suspend(order.order_number)
    assert suspended.status == "suspended"
    await worker.run_once()
    assert hosting.subscription_status[subscription] == "suspended"

    reactivated = await lifecycle_service.reactivate(order.order_number)
    assert reactivated.status == "active"
    await worker.run_once()
    assert hosting.subscription_status[subscription] == "active"


@pytest.mark.asyncio
async def test_suspend_requires_active_order(order_request, order_service, lifecycle_service):
    order = await order_service.create_order(order_request())
    with pytest.raises(IllegalTransition):
        await lifecycle_service.suspend(order.order_number)


@pytest.mark.asyncio
async def test_redispatch_failed_domain_registration(
    order_request, order_service, lifecycle_service, worker, registrar, clock, session_factory
):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)
    registrar.fail_next("register_domain", times=3)

    await worker.run_once()
    clock.advance(seconds=120)
    await worker.run_once()
    clock.advance(seconds=120)
    await worker.run_once()

    final = await order_service.get_order(order.order_number)
    domain = final.domains[0]
    assert final.status == "active"
    assert domain.status == "failed"

    task = await lifecycle_service.redispatch_domain_registration(domain.id)
    assert task.task_type == TaskType.REGISTER_DOMAIN.value
    assert task.status == "queued"

    await worker.run_once()
    async with create_uow(session_factory) as uow:
        registered = await uow.domains.find_by_id(domain.id)
    assert registered.status is DomainStatus.ACTIVE


@pytest.mark.asyncio
async def test_redispatch_requires_failed_domain(order_request, order_service, lifecycle_service):
    order = await order_service.create_order(order_request())
    await lifecycle_service.approve(order.order_number)

    with pytest.raises(IllegalTransition):
        await lifecycle_service.redispatch_domain_registration(order.domains[0].id)
    with pytest.raises(NotFound):
        await lifecycle_service.redispatch_domain_registration(9999)


@pytest.mark.asyncio
async def test_domain_only_order_activates_after_registration(
    order_request, order_service, lifecycle_service, worker, hosting, accounting, event_bus
):
    order = await order_service.create_order(
        order_request(hosting_package_id=None, domains=[{"name": "one.nl"}, {"name": "taken.com"}])
    )
    approved = await lifecycle_service.approve(order.order_number)
    assert [t.task_type for t in await lifecycle_service.list_tasks(order.order_number)] == [
        "sync_accounting_contact",
        "register_domain",
        "register_domain",
        "create_invoice",
    ]
    assert approved.status == "processing"

    await worker.run_once()

    final = await order_service.get_order(order.order_number)
    assert final.status == "active"
    assert final.next_billing_date is not None
    assert [d.status for d in final.domains] == ["registered", "unavailable"]
    assert hosting.calls == []
    [invoice] = accounting.invoices.values()
    assert [line.description for line in invoice["lines"]] == ["Domain registration: one.nl"]
    assert event_bus.names().count("order.activated") == 1
