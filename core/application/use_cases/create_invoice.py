"""
Create Invoice Use Case.

Requires the customer's accounting contact to be persisted first; when it
is missing the attempt fails with PrerequisiteUnmet and is retried within
the task's own budget. Line items: the hosting package at its billing
cycle rate, plus one line per domain registered so far.
"""
import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IAccountingGateway
from core.data.uow import create_uow
from core.domain.entities import Order
from core.domain.exceptions import PrerequisiteUnmet
from core.domain.value_objects import InvoiceLine
from orchestration.models import ExecutionContext

from .base import FulfillmentUseCase


logger = logging.getLogger(__name__)


class CreateInvoiceUseCase(FulfillmentUseCase):
    """Handler for `create_invoice` tasks."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        accounting: IAccountingGateway,
        domain_price: Decimal = Decimal("15.00"),
        **kwargs,
    ) -> None:
        super().__init__(session_factory, **kwargs)
        self._accounting = accounting
        self._domain_price = Decimal(str(domain_price))

    def build_lines(self, order: Order) -> list:
        """Invoice lines for an order in its current state."""
        lines = []
        if order.package is not None:
            lines.append(
                InvoiceLine(
                    description=f"{order.package.name} hosting ({order.billing_cycle.value})",
                    price=order.package.rate_for(order.billing_cycle),
                )
            )
        for domain in order.domains:
            if domain.is_registered():
                lines.append(
                    InvoiceLine(description=f"Domain registration: {domain.name}", price=self._domain_price)
                )
        return lines

    async def execute(self, ctx: ExecutionContext) -> str:
        order = await self._load_order(int(ctx.payload["order_id"]))

        if order.external_invoice_ref:
            return f"order {order.order_number} already invoiced ({order.external_invoice_ref})"

        contact_ref = order.customer.accounting_contact_ref if order.customer else None
        if not contact_ref:
            raise PrerequisiteUnmet(
                f"customer {order.customer_id} has no accounting contact yet; "
                f"cannot invoice order {order.order_number} before the contact sync completes"
            )

        lines = self.build_lines(order)
        if not lines:
            raise PrerequisiteUnmet(f"order {order.order_number} has nothing billable yet")

        invoice_ref = await self._accounting.create_invoice(contact_ref, lines, order.order_number.value)

        async with create_uow(self._session_factory) as uow:
            won = await uow.orders.set_invoice_ref(order.id, invoice_ref)
            await uow.commit()

        if not won:
            logger.warning(
                f"{ctx.log_prefix} order {order.order_number} was invoiced concurrently; "
                f"invoice {invoice_ref} is a duplicate"
            )
            return f"order {order.order_number} already invoiced"

        logger.info(f"{ctx.log_prefix} ✅ invoice {invoice_ref} for {order.order_number}")
        await self._publish("order.invoiced", ctx, order, invoice_ref=invoice_ref)
        return invoice_ref
