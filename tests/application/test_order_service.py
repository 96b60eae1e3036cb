"""Tests for OrderApplicationService (order assembly)."""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from core.application.services import OrderApplicationService
from core.data.models import CustomerModel, DomainModel, OrderModel
from core.data.uow import create_uow
from core.domain.enums import DomainStatus, OrderStatus
from core.domain.exceptions import InvalidPackage, ValidationError
from core.domain.value_objects import OrderNumber



async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_create_order_prices_and_persists_aggregate(order_request, order_service, event_bus):
    order = await order_service.create_order(order_request())

    assert order.status == "pending"
    assert order.order_number.startswith("HF-20240315-")
    assert order.subtotal == Decimal("29.98")
    assert order.tax == Decimal("6.30")
    assert order.total == Decimal("36.28")
    assert order.customer.email == "jane.doe@example.com"
    assert order.package.name == "Startup"
    assert [(d.name, d.tld, d.status) for d in order.domains] == [("janedoe.nl", "nl", "pending")]
    assert event_bus.names() == ["order.created"]


@pytest.mark.asyncio
async def test_yearly_cycle_uses_yearly_rate(order_request, order_service):
    order = await order_service.create_order(order_request(billing_cycle="yearly"))

    assert order.subtotal == Decimal("24.98")
    assert order.tax == Decimal("5.25")
    assert order.total == Decimal("30.23")


@pytest.mark.asyncio
async def test_existing_customer_is_reused(order_request, order_service):
    first = await order_service.create_order(order_request())
    second = await order_service.create_order(order_request(domains=[{"name": "janedoe.com"}]))

    assert first.customer.id == second.customer.id
    assert first.order_number != second.order_number


@pytest.mark.asyncio
async def test_domain_only_order(order_request, order_service):
    order = await order_service.create_order(
        order_request(hosting_package_id=None, domains=[{"name": "a.nl"}, {"name": "b.nl"}])
    )

    assert order.package is None
    assert order.subtotal == Decimal("19.98")


@pytest.mark.asyncio
async def test_unknown_package_creates_nothing(order_request, order_service, session_factory):
    with pytest.raises(InvalidPackage):
        await order_service.create_order(order_request(hosting_package_id=999))

    assert await count_rows(session_factory, OrderModel) == 0
    assert await count_rows(session_factory, CustomerModel) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"domains": [{"name": "not a domain"}]},
        {"domains": [{"name": "same.nl"}, {"name": "SAME.nl"}]},
    ],
)
async def test_malformed_domains_are_rejected(order_request, order_service, session_factory, overrides):
    with pytest.raises(ValidationError):
        await order_service.create_order(order_request(**overrides))

    assert await count_rows(session_factory, DomainModel) == 0


@pytest.mark.asyncio
async def test_malformed_email_is_rejected(order_request, order_service):
    request = order_request(
        customer={"email": "nobody", "first_name": "No", "last_name": "Body"}
    )
    with pytest.raises(ValidationError):
        await order_service.create_order(request)


@pytest.mark.asyncio
async def test_domain_held_by_open_order_is_rejected(order_request, order_service, lifecycle_service):
    first = await order_service.create_order(order_request())

    with pytest.raises(ValidationError):
        await order_service.create_order(order_request())

    await lifecycle_service.cancel(first.order_number)
    again = await order_service.create_order(order_request())
    assert again.domains[0].name == "janedoe.nl"


@pytest.mark.asyncio
async def test_order_number_collision_is_regenerated(order_request, session_factory, pricing, clock, packages):
    taken = OrderNumber("HF-20240315-AAAAAA")
    candidates = iter([taken, taken, OrderNumber("HF-20240315-BBBBBB")])

    first = OrderApplicationService(
        session_factory, pricing, clock=clock, number_factory=lambda prefix, today: taken
    )
    await first.create_order(order_request())

    second = OrderApplicationService(
        session_factory, pricing, clock=clock, number_factory=lambda prefix, today: next(candidates)
    )
    order = await second.create_order(order_request(domains=[{"name": "other.nl"}]))

    assert order.order_number == "HF-20240315-BBBBBB"


@pytest.mark.asyncio
async def test_exhausted_order_numbers_roll_back_customer(order_request, session_factory, pricing, clock, packages):
    taken = OrderNumber("HF-20240315-AAAAAA")
    service = OrderApplicationService(
        session_factory,
        pricing,
        order_number_attempts=3,
        clock=clock,
        number_factory=lambda prefix, today: taken,
    )
    await service.create_order(order_request())

    request = order_request(
        customer={"email": "new@example.com", "first_name": "New", "last_name": "Customer"},
        domains=[{"name": "new.nl"}],
    )
    with pytest.raises(RuntimeError):
        await service.create_order(request)

    async with create_uow(session_factory) as uow:
        assert await uow.customers.find_by_email("new@example.com") is None
    assert await count_rows(session_factory, OrderModel) == 1


@pytest.mark.asyncio
async def test_get_and_list_orders(order_request, order_service):
    created = await order_service.create_order(order_request())

    fetched = await order_service.get_order(created.order_number)
    assert fetched.id == created.id
    assert await order_service.get_order("HF-20240315-ZZZZZZ") is None

    listing = await order_service.list_orders()
    assert listing.total == 1
    assert listing.orders[0].order_number == created.order_number


@pytest.mark.asyncio
async def test_list_packages(order_service):
    packages = await order_service.list_packages()
    assert [p.name for p in packages] == ["Startup", "Plus", "Premium"]


async def place(order_service, order_request, domain_name):
    return await order_service.create_order(order_request(domains=[{"name": domain_name}]))


async def move_order(session_factory, order, new_status, **fields):
    async with create_uow(session_factory) as uow:
        await uow.orders.transition(order.id, OrderStatus.PENDING, new_status, **fields)
        await uow.commit()


@pytest.mark.asyncio
async def test_due_for_invoicing_window(order_request, order_service, session_factory, clock):
    soon = await place(order_service, order_request, "soon.nl")
    edge = await place(order_service, order_request, "edge.nl")
    later = await place(order_service, order_request, "later.nl")
    invoiced = await place(order_service, order_request, "invoiced.nl")
    processing = await place(order_service, order_request, "processing.nl")

    await move_order(session_factory, soon, OrderStatus.ACTIVE, next_billing_date=clock.now + timedelta(days=3))
    await move_order(session_factory, edge, OrderStatus.ACTIVE, next_billing_date=clock.now + timedelta(days=7))
    await move_order(session_factory, later, OrderStatus.ACTIVE, next_billing_date=clock.now + timedelta(days=8))
    await move_order(
        session_factory, invoiced, OrderStatus.ACTIVE, next_billing_date=clock.now + timedelta(days=1)
    )
    await move_order(
        session_factory, processing, OrderStatus.PROCESSING, next_billing_date=clock.now + timedelta(days=1)
    )
    async with create_uow(session_factory) as uow:
        assert await uow.orders.set_invoice_ref(invoiced.id, "moneybird-invoice-9")
        await uow.commit()

    due = await order_service.due_for_invoicing(days_ahead=7)

    assert [o.order_number for o in due] == [soon.order_number, edge.order_number]
    wider = await order_service.due_for_invoicing(days_ahead=10)
    assert later.order_number in [o.order_number for o in wider]


@pytest.mark.asyncio
async def test_expiring_domains_window(order_request, order_service, session_factory, clock):
    orders = [
        await place(order_service, order_request, name)
        for name in ("expiring.nl", "renewed.nl", "dropped.nl")
    ]
    expiring, renewed, dropped = (o.domains[0] for o in orders)

    async with create_uow(session_factory) as uow:
        await uow.domains.transition(
            expiring.id, DomainStatus.PENDING, DomainStatus.REGISTERED, expires_at=clock.now + timedelta(days=10)
        )
        await uow.domains.transition(
            renewed.id, DomainStatus.PENDING, DomainStatus.ACTIVE, expires_at=clock.now + timedelta(days=45)
        )
        await uow.domains.transition(
            dropped.id, DomainStatus.PENDING, DomainStatus.CANCELLED, expires_at=clock.now + timedelta(days=5)
        )
        await uow.commit()

    assert [d.name for d in await order_service.expiring_domains(days=30)] == ["expiring.nl"]
    assert [d.name for d in await order_service.expiring_domains(days=60)] == ["expiring.nl", "renewed.nl"]
