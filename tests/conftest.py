"""Shared fixtures: in-memory database, mock providers, wired services."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.application.dtos import CreateOrderRequest
from core.application.services import (
    CustomerApplicationService,
    OrderApplicationService,
    OrderLifecycleService,
    PaymentReconciliationService,
)
from core.application.use_cases import (
    CreateInvoiceUseCase,
    ProvisionHostingUseCase,
    ReactivateHostingUseCase,
    RegisterDomainUseCase,
    SuspendHostingUseCase,
    SyncAccountingContactUseCase,
)
from core.data.models import Base
from core.data.uow import create_uow
from core.domain.enums import TaskType
from core.domain.services import PricingCalculator
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.adapters.providers import (
    MockAccountingGateway,
    MockHostingGateway,
    MockPaymentGateway,
    MockRegistrarGateway,
)
from core.infrastructure.database.config import create_session_factory
from core.infrastructure.database.seed import seed_packages
from orchestration import FulfillmentCoordinator, InMemoryEventBus, TaskWorker


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """Settable clock (naive UTC)."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingEventBus(InMemoryEventBus):
    """In-memory bus that also keeps every published event."""

    def __init__(self) -> None:
        super().__init__()
        self.events = []

    async def publish(self, event) -> None:
        self.events.append(event)
        await super().publish(event)

    def names(self) -> list[str]:
        return [e.name for e in self.events]


def make_order_request(**overrides) -> CreateOrderRequest:
    data = {
        "customer": {
            "email": "Jane.Doe@Example.com",
            "first_name": "Jane",
            "last_name": "Doe",
            "company": "Doe Webdesign",
            "address": "Keizersgracht 1",
            "postal_code": "1015 AA",
            "city": "Amsterdam",
        },
        "hosting_package_id": 1,
        "billing_cycle": "monthly",
        "domains": [{"name": "janedoe.nl"}],
    }
    data.update(overrides)
    return CreateOrderRequest.model_validate(data)


# =============================================================================
# DATABASE
# =============================================================================

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    factory = create_session_factory(engine)
    await seed_packages(factory)
    return factory


@pytest_asyncio.fixture
async def packages(session_factory):
    """Seeded catalog, cheapest first: Startup, Plus, Premium."""
    async with create_uow(session_factory) as uow:
        return await uow.packages.list_active()


# =============================================================================
# COLLABORATORS
# =============================================================================

@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
def hosting():
    return MockHostingGateway()


@pytest.fixture
def registrar():
    return MockRegistrarGateway(unavailable={"taken.com"})


@pytest.fixture
def accounting():
    return MockAccountingGateway()


@pytest.fixture
def payments():
    return MockPaymentGateway()


@pytest.fixture
def notifications():
    return MockNotificationService()


@pytest.fixture
def pricing():
    return PricingCalculator(Decimal("0.21"), Decimal("9.99"), "EUR")


# =============================================================================
# SERVICES
# =============================================================================

@pytest.fixture
def handlers(session_factory, hosting, registrar, accounting, notifications, event_bus, clock):
    common = {"event_bus": event_bus, "clock": clock}
    return {
        TaskType.SYNC_ACCOUNTING_CONTACT: SyncAccountingContactUseCase(session_factory, accounting, **common),
        TaskType.PROVISION_HOSTING: ProvisionHostingUseCase(
            session_factory, hosting, notification_service=notifications, **common
        ),
        TaskType.REGISTER_DOMAIN: RegisterDomainUseCase(session_factory, registrar, period_years=1, **common),
        TaskType.CREATE_INVOICE: CreateInvoiceUseCase(
            session_factory, accounting, domain_price=Decimal("15.00"), **common
        ),
        TaskType.SUSPEND_HOSTING: SuspendHostingUseCase(session_factory, hosting, **common),
        TaskType.REACTIVATE_HOSTING: ReactivateHostingUseCase(session_factory, hosting, **common),
    }


@pytest.fixture
def coordinator(session_factory, handlers, event_bus, notifications, clock):
    return FulfillmentCoordinator(
        session_factory,
        handlers,
        event_bus,
        notification_service=notifications,
        clock=clock,
    )


@pytest.fixture
def worker(session_factory, coordinator, clock):
    return TaskWorker(session_factory, coordinator, concurrency=1, batch_size=50, clock=clock)


@pytest.fixture
def order_service(session_factory, pricing, event_bus, clock, packages):
    return OrderApplicationService(session_factory, pricing, event_bus=event_bus, clock=clock)


@pytest.fixture
def lifecycle_service(session_factory, coordinator, event_bus, clock):
    return OrderLifecycleService(session_factory, coordinator, event_bus, clock=clock)


@pytest.fixture
def payment_service(session_factory, payments, lifecycle_service, event_bus, clock):
    return PaymentReconciliationService(
        session_factory,
        payments,
        lifecycle_service=lifecycle_service,
        event_bus=event_bus,
        auto_approve=True,
        clock=clock,
    )


@pytest.fixture
def customer_service(session_factory, clock):
    return CustomerApplicationService(session_factory, clock=clock)


@pytest.fixture
def order_request():
    """Factory for CreateOrderRequest with overridable fields."""
    return make_order_request
