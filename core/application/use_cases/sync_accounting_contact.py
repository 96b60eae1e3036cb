"""
Sync Accounting Contact Use Case.

Creates the customer's contact in the accounting system. Idempotent: a
customer that already has `accounting_contact_ref` is left alone, and only
the first successful sync may set the reference.
"""
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IAccountingGateway
from core.data.uow import create_uow
from core.domain.exceptions import NotFound
from orchestration.models import ExecutionContext

from .base import FulfillmentUseCase


logger = logging.getLogger(__name__)


class SyncAccountingContactUseCase(FulfillmentUseCase):
    """Handler for `sync_accounting_contact` tasks."""

    def __init__(self, session_factory: async_sessionmaker, accounting: IAccountingGateway, **kwargs) -> None:
        super().__init__(session_factory, **kwargs)
        self._accounting = accounting

    async def execute(self, ctx: ExecutionContext) -> str:
        customer_id = int(ctx.payload["customer_id"])

        async with create_uow(self._session_factory) as uow:
            customer = await uow.customers.find_by_id(customer_id)
        if customer is None:
            raise NotFound("customer", customer_id)

        if customer.accounting_contact_ref:
            return f"customer {customer_id} already synced ({customer.accounting_contact_ref})"

        contact_ref = await self._accounting.create_contact(customer.to_profile())

        async with create_uow(self._session_factory) as uow:
            won = await uow.customers.set_accounting_contact_ref(customer_id, contact_ref)
            await uow.commit()

        if not won:
            logger.warning(
                f"{ctx.log_prefix} customer {customer_id} was synced concurrently; "
                f"accounting contact {contact_ref} is unused"
            )
            return f"customer {customer_id} already synced"

        logger.info(f"{ctx.log_prefix} customer {customer_id} → accounting contact {contact_ref}")
        return contact_ref
