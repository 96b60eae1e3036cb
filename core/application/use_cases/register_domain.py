"""
Register Domain Use Case.

Flow:
1. Skip domains that are already registered or no longer pending
2. Ask the registrar whether the name is free
   - taken: domain → unavailable (terminal, no registration call)
3. Register for the configured period with the customer as registrant
4. domain → registered with registration/expiry dates
   (→ active straight away if hosting is already attached)
   If the order was cancelled meanwhile, the registration details are
   still stored and the domain stays cancelled.

Orders without hosting have no provisioning step, so the last registration
activates them. A domain whose retries are exhausted is left in `failed`;
an operator can re-dispatch it.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IRegistrarGateway
from core.application.services.order_transitions import apply_order_transition
from core.data.uow import create_uow
from core.domain.entities import Order
from core.domain.enums import DomainStatus, OrderStatus
from core.domain.exceptions import ConflictError, NotFound
from core.domain.services import OrderLifecycle
from hostflow_sdk.utils.datetime import add_years
from orchestration.models import ExecutionContext

from .base import FulfillmentUseCase


logger = logging.getLogger(__name__)


class RegisterDomainUseCase(FulfillmentUseCase):
    """Handler for `register_domain` tasks."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        registrar: IRegistrarGateway,
        period_years: int = 1,
        **kwargs,
    ) -> None:
        super().__init__(session_factory, **kwargs)
        self._registrar = registrar
        self._period_years = period_years
        self._lifecycle = OrderLifecycle()

    async def execute(self, ctx: ExecutionContext) -> str:
        domain_id = int(ctx.payload["domain_id"])

        async with create_uow(self._session_factory) as uow:
            domain = await uow.domains.find_by_id(domain_id)
            customer = await uow.customers.find_by_id(domain.customer_id) if domain else None
        if domain is None:
            raise NotFound("domain", domain_id)

        if domain.status is not DomainStatus.PENDING:
            return f"{domain.name} skipped: status is {domain.status.value}"

        available = await self._registrar.check_availability(domain.name)
        if not available:
            async with create_uow(self._session_factory) as uow:
                await uow.domains.transition(domain.id, DomainStatus.PENDING, DomainStatus.UNAVAILABLE)
                activated = await self._activate_domain_only_order(uow, domain.order_id, ctx)
                await uow.commit()
            logger.info(f"{ctx.log_prefix} {domain.name} is not available")
            if activated is not None:
                await self._publish("order.activated", ctx, activated)
            return f"{domain.name} unavailable"

        registration_ref = await self._registrar.register_domain(
            domain.name, customer.to_profile(), self._period_years
        )

        registered_at = self._clock()
        expires_at = add_years(registered_at, self._period_years)
        async with create_uow(self._session_factory) as uow:
            try:
                await uow.domains.transition(
                    domain.id,
                    DomainStatus.PENDING,
                    DomainStatus.REGISTERED,
                    registration_ref=registration_ref,
                    registered_at=registered_at,
                    expires_at=expires_at,
                )
            except ConflictError:
                current = await uow.domains.find_by_id(domain.id)
                if current is None or current.status is not DomainStatus.CANCELLED:
                    raise
                # Bought at the registrar while the order was being cancelled
                await uow.domains.record_registration(domain.id, registration_ref, registered_at, expires_at)
                await uow.commit()
                logger.warning(
                    f"{ctx.log_prefix} {domain.name} registered ({registration_ref}) after its order "
                    f"was cancelled; left cancelled for operator follow-up"
                )
                return registration_ref
            current = await uow.domains.find_by_id(domain.id)
            if current.hosting_subscription_ref:
                await uow.domains.transition(domain.id, DomainStatus.REGISTERED, DomainStatus.ACTIVE)
            activated = await self._activate_domain_only_order(uow, domain.order_id, ctx)
            await uow.commit()

        logger.info(f"{ctx.log_prefix} ✅ registered {domain.name} ({registration_ref})")
        if activated is not None:
            await self._publish("order.activated", ctx, activated)
        return registration_ref

    async def _activate_domain_only_order(self, uow, order_id: int, ctx: ExecutionContext) -> Optional[Order]:
        """Without hosting there is no provisioning step: the last registration activates the order."""
        order = await uow.orders.find_by_id(order_id)
        if order.hosting_package_id is not None or order.status is not OrderStatus.PROCESSING:
            return None
        if any(d.status is DomainStatus.PENDING for d in order.domains):
            return None
        try:
            await apply_order_transition(uow, self._lifecycle.complete_provisioning(order, self._clock()))
        except ConflictError as exc:
            logger.warning(f"{ctx.log_prefix} order {order.order_number} not activated: {exc}")
            return None
        return order

    async def on_permanent_failure(self, ctx: ExecutionContext, error: Exception) -> None:
        """Leave the domain in `failed` for manual re-dispatch."""
        domain_id = int(ctx.payload["domain_id"])
        async with create_uow(self._session_factory) as uow:
            domain = await uow.domains.find_by_id(domain_id)
            if domain is None or domain.status is not DomainStatus.PENDING:
                return
            try:
                await uow.domains.transition(domain_id, DomainStatus.PENDING, DomainStatus.FAILED)
            except ConflictError:
                return
            await uow.commit()
        logger.warning(f"{ctx.log_prefix} {domain.name} marked failed: {error}")
