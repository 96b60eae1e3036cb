"""Application service for Order operations."""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CreateOrderRequest,
    DomainDTO,
    OrderDTO,
    OrderListDTO,
    PackageDTO,
)
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import Customer, Domain, Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import InvalidPackage, ValidationError
from core.domain.services import PricingCalculator
from core.domain.value_objects import DomainName, EmailAddress, OrderNumber
from hostflow_sdk.utils.datetime import utc_now
from orchestration.bus import EventBusProtocol
from orchestration.events import build_event


logger = logging.getLogger(__name__)

OrderNumberFactory = Callable[[str, date], OrderNumber]


class OrderApplicationService:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Validate order input before anything is written
    - Price the order and assemble the Order + Domains aggregate
    - Persist customer, order and domains in one transaction via UoW
    - Transform domain entities into DTOs
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        pricing: PricingCalculator,
        order_number_prefix: str = "HF",
        order_number_attempts: int = 10,
        event_bus: Optional[EventBusProtocol] = None,
        clock: Callable[[], datetime] = utc_now,
        number_factory: OrderNumberFactory = OrderNumber.generate,
    ) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            pricing: Calculator fixing subtotal, tax and total
            order_number_prefix: Prefix of generated order numbers
            order_number_attempts: Collision retries before giving up
            event_bus: Receives `order.created`
            clock: Source of "now" (naive UTC)
            number_factory: Order number generator (prefix, date)
        """
        self._session_factory = session_factory
        self._pricing = pricing
        self._prefix = order_number_prefix
        self._attempts = order_number_attempts
        self._event_bus = event_bus
        self._clock = clock
        self._number_factory = number_factory

    async def create_order(self, request: CreateOrderRequest) -> OrderDTO:
        """Create a new pending order.

        Args:
            request: CreateOrderRequest DTO

        Returns:
            OrderDTO with the fully hydrated order

        Raises:
            ValidationError: Malformed e-mail or domain name, duplicate or taken domain
            InvalidPackage: Package id does not resolve to an active package
        """
        # 1. Validate everything before the first write
        email = EmailAddress(request.customer.email)
        names = [DomainName(d.name) for d in request.domains]
        seen = set()
        for name in names:
            if name.value in seen:
                raise ValidationError(f"Domain {name} is listed more than once")
            seen.add(name.value)

        now = self._clock()
        async with create_uow(self._session_factory) as uow:
            package = None
            if request.hosting_package_id is not None:
                package = await uow.packages.find_active_by_id(request.hosting_package_id)
                if package is None:
                    raise InvalidPackage(request.hosting_package_id)

            for name in names:
                if await uow.domains.is_name_taken(name.value):
                    raise ValidationError(f"Domain {name} is already on another order")

            # 2. Look up or create the customer (first match wins)
            customer = await uow.customers.find_by_email(email.value)
            if customer is None:
                customer = await uow.customers.add(self._new_customer(request, email))

            # 3. Price and assemble
            quote = self._pricing.quote(package, request.billing_cycle, len(names))
            order = Order(
                customer_id=customer.id,
                order_number=await self._unique_order_number(uow, now.date()),
                billing_cycle=request.billing_cycle,
                subtotal=quote.subtotal,
                tax=quote.tax,
                total=quote.total,
                status=OrderStatus.PENDING,
                hosting_package_id=package.id if package else None,
                notes=request.notes,
                domains=[
                    Domain(name=name.value, tld=name.tld, customer_id=customer.id, register=item.register)
                    for name, item in zip(names, request.domains)
                ],
            )

            # 4. Persist and commit atomically
            order = await uow.orders.add(order)
            await uow.commit()
            execution_id = uow.execution_id

        logger.info(
            f"[{execution_id}] order {order.order_number} created for {customer.email}: "
            f"{len(order.domains)} domain(s), total {order.total.amount} {order.total.currency}"
        )
        if self._event_bus is not None:
            await self._event_bus.publish(
                build_event(
                    "order.created",
                    execution_id,
                    "orders",
                    {
                        "order_id": order.id,
                        "order_number": order.order_number.value,
                        "customer_id": order.customer_id,
                        "total": str(order.total.amount),
                    },
                )
            )
        return OrderDTO.from_entity(order)

    async def get_order(self, order_number: str) -> Optional[OrderDTO]:
        """Get order by order number.

        Returns:
            OrderDTO if found, None otherwise
        """
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_order_number(order_number)
        return OrderDTO.from_entity(order) if order else None

    async def list_orders(
        self, status: Optional[OrderStatus] = None, limit: int = 100, offset: int = 0
    ) -> OrderListDTO:
        """List orders with pagination, newest first."""
        async with create_uow(self._session_factory) as uow:
            orders = await uow.orders.find_all(status=status, limit=limit, offset=offset)
        return OrderListDTO(orders=[OrderDTO.from_entity(o) for o in orders], total=len(orders))

    async def list_packages(self) -> List[PackageDTO]:
        async with create_uow(self._session_factory) as uow:
            packages = await uow.packages.list_active()
        return [PackageDTO.from_entity(p) for p in packages]

    async def due_for_invoicing(self, days_ahead: int = 7) -> List[OrderDTO]:
        """Active orders whose next billing date falls within `days_ahead` and have no invoice."""
        async with create_uow(self._session_factory) as uow:
            orders = await uow.orders.find_due_for_invoicing(self._clock(), days_ahead=days_ahead)
        return [OrderDTO.from_entity(o) for o in orders]

    async def expiring_domains(self, days: int = 30) -> List[DomainDTO]:
        async with create_uow(self._session_factory) as uow:
            domains = await uow.domains.find_expiring_soon(self._clock(), days=days)
        return [DomainDTO.from_entity(d) for d in domains]

    async def _unique_order_number(self, uow: UnitOfWork, today: date) -> OrderNumber:
        for _ in range(self._attempts):
            candidate = self._number_factory(self._prefix, today)
            if not await uow.orders.exists_order_number(candidate.value):
                return candidate
            logger.warning(f"[{uow.execution_id}] order number collision on {candidate}, regenerating")
        raise RuntimeError(f"Could not generate a unique order number in {self._attempts} attempts")

    @staticmethod
    def _new_customer(request: CreateOrderRequest, email: EmailAddress) -> Customer:
        data = request.customer
        return Customer(
            email=email.value,
            first_name=data.first_name,
            last_name=data.last_name,
            company=data.company,
            phone=data.phone,
            address=data.address,
            postal_code=data.postal_code,
            city=data.city,
            country=data.country.upper(),
            vat_number=data.vat_number,
        )
