"""
FastAPI Dependencies.

Provides dependency injection for services, gateways and the task worker.
Every getter builds its object once and caches it; `reset_dependencies()`
drops the cache (tests).
"""
from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import (
    IAccountingGateway,
    IHostingGateway,
    INotificationService,
    IPaymentGateway,
    IRegistrarGateway,
)
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
from core.domain.enums import TaskType
from core.domain.services import PricingCalculator
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.database.config import get_session_factory as _database_session_factory
from core.settings import AppSettings, get_app_settings
from orchestration import (
    FulfillmentCoordinator,
    InMemoryEventBus,
    TaskWorker,
    retry_policies_from_settings,
)


logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_session_factory = None
_event_bus = None
_redis_publisher = None
_hosting_gateway = None
_registrar_gateway = None
_accounting_gateway = None
_payment_gateway = None
_notification_service = None
_coordinator = None
_worker = None
_order_service = None
_lifecycle_service = None
_payment_service = None
_customer_service = None


# =============================================================================
# INFRASTRUCTURE
# =============================================================================

def get_settings() -> AppSettings:
    return get_app_settings()


def get_session_factory() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = _database_session_factory()
    return _session_factory


def get_event_bus() -> InMemoryEventBus:
    global _event_bus, _redis_publisher
    if _event_bus is None:
        _event_bus = InMemoryEventBus()
        settings = get_settings().redis
        if settings.enabled:
            from core.infrastructure.bus import RedisStreamPublisher

            _redis_publisher = RedisStreamPublisher(
                redis_url=settings.url,
                stream_name=settings.stream_name,
                maxlen=settings.stream_maxlen,
            )
            _redis_publisher.attach(_event_bus)
            logger.info(f"Lifecycle events mirrored to Redis stream {settings.stream_name}")
    return _event_bus


def get_redis_publisher():
    get_event_bus()
    return _redis_publisher


# =============================================================================
# PROVIDER GATEWAYS
# =============================================================================

def _use_mocks() -> bool:
    return get_settings().fulfillment.use_mock_providers


def get_hosting_gateway() -> IHostingGateway:
    global _hosting_gateway
    if _hosting_gateway is None:
        if _use_mocks():
            from core.infrastructure.adapters.providers import MockHostingGateway
            _hosting_gateway = MockHostingGateway()
        else:
            from core.infrastructure.adapters.providers import PleskHostingGateway
            from hostflow_sdk.plesk import PleskClient

            s = get_settings().plesk
            _hosting_gateway = PleskHostingGateway(
                PleskClient(s.host, s.username, s.password, s.port, s.protocol, s.timeout_seconds)
            )
        logger.info(f"Created {type(_hosting_gateway).__name__} instance")
    return _hosting_gateway


def get_registrar_gateway() -> IRegistrarGateway:
    global _registrar_gateway
    if _registrar_gateway is None:
        if _use_mocks():
            from core.infrastructure.adapters.providers import MockRegistrarGateway
            _registrar_gateway = MockRegistrarGateway()
        else:
            from core.infrastructure.adapters.providers import OpenProviderRegistrarGateway
            from hostflow_sdk.openprovider import OpenProviderClient

            s = get_settings().openprovider
            _registrar_gateway = OpenProviderRegistrarGateway(
                OpenProviderClient(s.api_url, s.username, s.password, s.ns_group, s.timeout_seconds)
            )
        logger.info(f"Created {type(_registrar_gateway).__name__} instance")
    return _registrar_gateway


def get_accounting_gateway() -> IAccountingGateway:
    global _accounting_gateway
    if _accounting_gateway is None:
        if _use_mocks():
            from core.infrastructure.adapters.providers import MockAccountingGateway
            _accounting_gateway = MockAccountingGateway()
        else:
            from core.infrastructure.adapters.providers import MoneybirdAccountingGateway
            from hostflow_sdk.moneybird import MoneybirdClient

            s = get_settings().moneybird
            _accounting_gateway = MoneybirdAccountingGateway(
                MoneybirdClient(s.api_url, s.api_token, s.administration_id, s.timeout_seconds),
                tax_rate_id=s.default_tax_rate_id,
            )
        logger.info(f"Created {type(_accounting_gateway).__name__} instance")
    return _accounting_gateway


def get_payment_gateway() -> IPaymentGateway:
    global _payment_gateway
    if _payment_gateway is None:
        if _use_mocks():
            from core.infrastructure.adapters.providers import MockPaymentGateway
            _payment_gateway = MockPaymentGateway()
        else:
            from core.infrastructure.adapters.providers import MolliePaymentGateway
            from hostflow_sdk.mollie import MollieClient

            s = get_settings().mollie
            _payment_gateway = MolliePaymentGateway(
                MollieClient(s.api_url, s.api_key, s.timeout_seconds),
                redirect_url=s.redirect_url,
                webhook_url=s.webhook_url,
            )
        logger.info(f"Created {type(_payment_gateway).__name__} instance")
    return _payment_gateway


def get_notification_service() -> INotificationService:
    global _notification_service

    if _notification_service is None:
        settings = get_settings()
        if settings.slack.enabled:
            from core.infrastructure.adapters.notifications.slack_notification_service import SlackNotificationService
            _notification_service = SlackNotificationService(settings.slack)
            logger.info("Created SlackNotificationService instance")
        else:
            _notification_service = MockNotificationService()
            logger.info("Using MockNotificationService (notifications disabled)")

    return _notification_service


# =============================================================================
# FULFILLMENT
# =============================================================================

def get_coordinator() -> FulfillmentCoordinator:
    global _coordinator
    if _coordinator is None:
        settings = get_settings().fulfillment
        session_factory = get_session_factory()
        event_bus = get_event_bus()
        common = {"event_bus": event_bus}

        handlers = {
            TaskType.SYNC_ACCOUNTING_CONTACT: SyncAccountingContactUseCase(
                session_factory, get_accounting_gateway(), **common
            ),
            TaskType.PROVISION_HOSTING: ProvisionHostingUseCase(
                session_factory,
                get_hosting_gateway(),
                notification_service=get_notification_service(),
                **common,
            ),
            TaskType.REGISTER_DOMAIN: RegisterDomainUseCase(
                session_factory,
                get_registrar_gateway(),
                period_years=settings.registration_period_years,
                **common,
            ),
            TaskType.CREATE_INVOICE: CreateInvoiceUseCase(
                session_factory,
                get_accounting_gateway(),
                domain_price=settings.domain_invoice_price,
                **common,
            ),
            TaskType.SUSPEND_HOSTING: SuspendHostingUseCase(session_factory, get_hosting_gateway(), **common),
            TaskType.REACTIVATE_HOSTING: ReactivateHostingUseCase(session_factory, get_hosting_gateway(), **common),
        }
        _coordinator = FulfillmentCoordinator(
            session_factory,
            handlers,
            event_bus,
            policies=retry_policies_from_settings(settings),
            notification_service=get_notification_service(),
        )
        logger.info("Created FulfillmentCoordinator instance")
    return _coordinator


def get_worker() -> TaskWorker:
    global _worker
    if _worker is None:
        settings = get_settings().fulfillment
        _worker = TaskWorker(
            get_session_factory(),
            get_coordinator(),
            concurrency=settings.concurrency,
            batch_size=settings.batch_size,
            poll_interval_seconds=settings.poll_interval_seconds,
            stale_task_seconds=settings.stale_task_seconds,
        )
    return _worker


# =============================================================================
# APPLICATION SERVICES
# =============================================================================

def get_order_service() -> OrderApplicationService:
    global _order_service
    if _order_service is None:
        settings = get_settings().fulfillment
        _order_service = OrderApplicationService(
            get_session_factory(),
            PricingCalculator(settings.tax_rate, settings.domain_fee, settings.currency),
            order_number_prefix=settings.order_number_prefix,
            order_number_attempts=settings.order_number_attempts,
            event_bus=get_event_bus(),
        )
    return _order_service


def get_lifecycle_service() -> OrderLifecycleService:
    global _lifecycle_service
    if _lifecycle_service is None:
        _lifecycle_service = OrderLifecycleService(get_session_factory(), get_coordinator(), get_event_bus())
    return _lifecycle_service


def get_payment_service() -> PaymentReconciliationService:
    global _payment_service
    if _payment_service is None:
        _payment_service = PaymentReconciliationService(
            get_session_factory(),
            get_payment_gateway(),
            lifecycle_service=get_lifecycle_service(),
            event_bus=get_event_bus(),
            auto_approve=get_settings().fulfillment.auto_approve_paid_orders,
        )
    return _payment_service


def get_customer_service() -> CustomerApplicationService:
    global _customer_service
    if _customer_service is None:
        _customer_service = CustomerApplicationService(get_session_factory())
    return _customer_service


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _session_factory, _event_bus, _redis_publisher
    global _hosting_gateway, _registrar_gateway, _accounting_gateway, _payment_gateway
    global _notification_service, _coordinator, _worker
    global _order_service, _lifecycle_service, _payment_service, _customer_service

    _session_factory = None
    _event_bus = None
    _redis_publisher = None
    _hosting_gateway = None
    _registrar_gateway = None
    _accounting_gateway = None
    _payment_gateway = None
    _notification_service = None
    _coordinator = None
    _worker = None
    _order_service = None
    _lifecycle_service = None
    _payment_service = None
    _customer_service = None

    logger.info("Dependencies reset")
