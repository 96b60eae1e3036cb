"""
Provision Hosting Use Case.

Flow:
1. Load the order (package, customer, domains)
2. Create the customer's hosting panel account if it has none
3. Create a subscription for the order's primary domain
4. Attach the subscription to the domain (activating it when it is
   registered or customer-owned)
5. Move the order processing → active

Every external reference is written with a set-once update, so a retry
after a partial success reuses what the previous attempt created.
When retries are exhausted the order goes back to pending for an
operator to re-approve.
"""
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IHostingGateway, INotificationService
from core.application.services.order_transitions import apply_order_transition
from core.data.uow import create_uow
from core.domain.enums import DomainStatus, OrderStatus
from core.domain.exceptions import ConflictError, IllegalTransition, PrerequisiteUnmet
from core.domain.services import DomainLifecycle, OrderLifecycle
from orchestration.models import ExecutionContext

from .base import FulfillmentUseCase


logger = logging.getLogger(__name__)


class ProvisionHostingUseCase(FulfillmentUseCase):
    """Handler for `provision_hosting` tasks."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        hosting: IHostingGateway,
        notification_service: INotificationService = None,
        **kwargs,
    ) -> None:
        super().__init__(session_factory, **kwargs)
        self._hosting = hosting
        self._notifications = notification_service
        self._lifecycle = OrderLifecycle()

    async def execute(self, ctx: ExecutionContext) -> str:
        order = await self._load_order(int(ctx.payload["order_id"]))

        if order.package is None:
            raise PrerequisiteUnmet(f"order {order.order_number} has no hosting package")
        domain = order.primary_domain()
        if domain is None:
            raise PrerequisiteUnmet(f"order {order.order_number} has no domain to host")

        # 1. Panel account (once per customer)
        account_ref = order.customer.hosting_account_ref
        if not account_ref:
            created_ref = await self._hosting.create_customer_account(order.customer.to_profile())
            async with create_uow(self._session_factory) as uow:
                if await uow.customers.set_hosting_account_ref(order.customer_id, created_ref):
                    account_ref = created_ref
                else:
                    account_ref = (await uow.customers.find_by_id(order.customer_id)).hosting_account_ref
                    logger.warning(
                        f"{ctx.log_prefix} customer {order.customer_id} got a panel account "
                        f"concurrently; {created_ref} is unused"
                    )
                await uow.commit()

        # 2. Subscription for the primary domain
        subscription_ref = domain.hosting_subscription_ref
        if not subscription_ref:
            subscription_ref = await self._hosting.create_subscription(
                account_ref, domain.name, order.package.name
            )

        # 3. Write results back
        now = self._clock()
        activated = False
        async with create_uow(self._session_factory) as uow:
            await uow.domains.set_subscription_ref(domain.id, subscription_ref)

            current = await uow.domains.find_by_id(domain.id)
            hostable = current.status is DomainStatus.REGISTERED or (
                current.status is DomainStatus.PENDING and not current.register
            )
            if hostable and DomainLifecycle.can(current.status, DomainStatus.ACTIVE):
                await uow.domains.transition(current.id, current.status, DomainStatus.ACTIVE)

            fresh = await uow.orders.find_by_id(order.id)
            try:
                result = self._lifecycle.complete_provisioning(fresh, now)
                await apply_order_transition(uow, result)
                activated = True
            except (IllegalTransition, ConflictError) as exc:
                logger.warning(
                    f"{ctx.log_prefix} hosting provisioned but order {order.order_number} "
                    f"was not activated: {exc}"
                )
            await uow.commit()

        logger.info(
            f"{ctx.log_prefix} ✅ provisioned {domain.name} "
            f"(account {account_ref}, subscription {subscription_ref})"
        )
        if activated:
            await self._publish("order.activated", ctx, order, subscription_ref=subscription_ref)
            if self._notifications is not None:
                await self._notifications.send_success(
                    execution_id=ctx.execution_id,
                    reference=order.order_number.value,
                    message=f"Hosting for {domain.name} is active",
                )
        return subscription_ref

    async def on_permanent_failure(self, ctx: ExecutionContext, error: Exception) -> None:
        """Revert the order to pending so it can be re-approved."""
        order_id = int(ctx.payload["order_id"])
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)
            if order is None or order.status is not OrderStatus.PROCESSING:
                return
            result = self._lifecycle.revert_provisioning(order, self._clock())
            try:
                await apply_order_transition(uow, result)
            except ConflictError:
                logger.warning(f"{ctx.log_prefix} order {order_id} changed before rollback")
                return
            await uow.commit()

        logger.warning(f"{ctx.log_prefix} order {order.order_number} reverted to pending")
        await self._publish("order.provisioning_reverted", ctx, order, error=str(error))
