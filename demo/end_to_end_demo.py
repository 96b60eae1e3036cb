"""
End-to-End Demo: Hosting Order Fulfillment

This demonstrates the complete workflow:
1. Place an order (package + domain)
2. Start a payment and deliver the "paid" webhook (twice)
3. Run the fulfillment worker (contact sync, provisioning, registration, invoice)
4. Inject a registrar outage and watch the retries exhaust
5. Re-dispatch the failed registration

Uses the in-memory provider gateways and a throwaway SQLite file
(no Plesk/OpenProvider/Moneybird/Mollie account needed).
"""
import asyncio
import logging
import tempfile
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from core.application.dtos import CreateOrderRequest
from core.application.services import (
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
from core.domain.enums import TaskType
from core.domain.services import PricingCalculator
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.adapters.providers import (
    MockAccountingGateway,
    MockHostingGateway,
    MockPaymentGateway,
    MockRegistrarGateway,
)
from core.infrastructure.database.config import (
    DatabaseSettings,
    create_engine,
    create_session_factory,
    init_database,
)
from core.infrastructure.database.seed import seed_packages
from hostflow_sdk.utils.datetime import utc_now
from orchestration import FulfillmentCoordinator, InMemoryEventBus, TaskWorker


class DemoClock:
    """Clock the demo can move forward to make retries due."""

    def __init__(self):
        self.now = utc_now()

    def __call__(self):
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


def banner(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80 + "\n")


async def main():
    banner("DEMO: Hosting order from checkout to active")

    # =========================================================================
    # SETUP: database, mock providers, services
    # =========================================================================
    print("📦 Setting up database and mock providers...")

    db_path = Path(tempfile.mkdtemp()) / "hostflow_demo.db"
    engine = create_engine(DatabaseSettings(database_url=f"sqlite+aiosqlite:///{db_path}"))
    await init_database(engine)
    session_factory = create_session_factory(engine)
    await seed_packages(session_factory)

    clock = DemoClock()
    event_bus = InMemoryEventBus()
    hosting = MockHostingGateway()
    registrar = MockRegistrarGateway()
    accounting = MockAccountingGateway()
    payments = MockPaymentGateway()
    notifications = MockNotificationService()

    async def print_lifecycle_event(event):
        if event.name.startswith("order."):
            print(f"   📣 {event.name}: {event.payload.get('order_number')}")

    event_bus.subscribe("*", print_lifecycle_event)

    common = {"event_bus": event_bus, "clock": clock}
    coordinator = FulfillmentCoordinator(
        session_factory,
        {
            TaskType.SYNC_ACCOUNTING_CONTACT: SyncAccountingContactUseCase(session_factory, accounting, **common),
            TaskType.PROVISION_HOSTING: ProvisionHostingUseCase(
                session_factory, hosting, notification_service=notifications, **common
            ),
            TaskType.REGISTER_DOMAIN: RegisterDomainUseCase(session_factory, registrar, **common),
            TaskType.CREATE_INVOICE: CreateInvoiceUseCase(session_factory, accounting, **common),
            TaskType.SUSPEND_HOSTING: SuspendHostingUseCase(session_factory, hosting, **common),
            TaskType.REACTIVATE_HOSTING: ReactivateHostingUseCase(session_factory, hosting, **common),
        },
        event_bus,
        notification_service=notifications,
        clock=clock,
    )
    worker = TaskWorker(session_factory, coordinator, concurrency=1, clock=clock)

    orders = OrderApplicationService(
        session_factory,
        PricingCalculator(Decimal("0.21"), Decimal("9.99"), "EUR"),
        event_bus=event_bus,
        clock=clock,
    )
    lifecycle = OrderLifecycleService(session_factory, coordinator, event_bus, clock=clock)
    payment_service = PaymentReconciliationService(
        session_factory, payments, lifecycle_service=lifecycle, event_bus=event_bus, clock=clock
    )

    print("✅ Ready\n")

    # =========================================================================
    # 1. PLACE ORDER
    # =========================================================================
    print("🛒 Placing order...")
    order = await orders.create_order(
        CreateOrderRequest.model_validate({
            "customer": {"email": "jane.doe@example.com", "first_name": "Jane", "last_name": "Doe"},
            "hosting_package_id": 1,
            "billing_cycle": "monthly",
            "domains": [{"name": "janedoe.nl"}],
        })
    )
    print(f"   Order:    {order.order_number}")
    print(f"   Subtotal: {order.subtotal} {order.currency}")
    print(f"   Tax:      {order.tax} {order.currency}")
    print(f"   Total:    {order.total} {order.currency}\n")

    # =========================================================================
    # 2. PAYMENT
    # =========================================================================
    print("💳 Starting payment...")
    checkout = await payment_service.start_payment(order.order_number)
    print(f"   Checkout: {checkout.checkout_url}")

    payments.set_status(checkout.payment_ref, "paid")
    first = await payment_service.handle_webhook(checkout.payment_ref)
    duplicate = await payment_service.handle_webhook(checkout.payment_ref)
    print(f"   Webhook #1: applied={first.applied} → {first.new_status}")
    print(f"   Webhook #2: applied={duplicate.applied} ({duplicate.reason})\n")

    # =========================================================================
    # 3. FULFILLMENT
    # =========================================================================
    print("⚙️ Running fulfillment worker...")
    for result in await worker.run_once():
        print(f"   {result.task_type.value:<26} {result.status.value}")

    active = await orders.get_order(order.order_number)
    print(f"\n   Order status:  {active.status}")
    print(f"   Domain status: {active.domains[0].status}")
    print(f"   Invoice:       {active.external_invoice_ref}")
    print(f"   Next billing:  {active.next_billing_date:%Y-%m-%d}")

    # =========================================================================
    # 4. REGISTRAR OUTAGE
    # =========================================================================
    banner("DEMO: Registrar outage and manual re-dispatch")

    second = await orders.create_order(
        CreateOrderRequest.model_validate({
            "customer": {"email": "jane.doe@example.com", "first_name": "Jane", "last_name": "Doe"},
            "hosting_package_id": 2,
            "billing_cycle": "yearly",
            "domains": [{"name": "doewebdesign.com"}],
        })
    )
    await lifecycle.approve(second.order_number)
    registrar.fail_next("register_domain", times=3)

    for attempt in range(3):
        results = await worker.run_once()
        for result in results:
            print(f"   attempt window {attempt + 1}: {result.task_type.value:<26} {result.status.value}")
        clock.advance(120)

    failed = await orders.get_order(second.order_number)
    print(f"\n   Order status:  {failed.status}")
    print(f"   Domain status: {failed.domains[0].status}")
    print(f"   Error alerts:  {len(notifications.of_type('error'))}")

    print("\n🔁 Re-dispatching registration...")
    task = await lifecycle.redispatch_domain_registration(failed.domains[0].id)
    await worker.run_once()
    recovered = await orders.get_order(second.order_number)
    print(f"   Task {task.id}: domain now {recovered.domains[0].status}")

    await engine.dispose()
    print("\n✅ Demo complete\n")


if __name__ == "__main__":
    asyncio.run(main())
