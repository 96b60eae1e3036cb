"""Application service for customer account approval."""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import CustomerDTO
from core.data.uow import create_uow
from core.domain.enums import CustomerStatus
from core.domain.exceptions import NotFound
from core.domain.services import CustomerLifecycle
from hostflow_sdk.utils.datetime import utc_now


logger = logging.getLogger(__name__)


class CustomerApplicationService:
    """Admin operations on customer accounts (approve, reject, suspend)."""

    def __init__(self, session_factory: async_sessionmaker, clock: Callable[[], datetime] = utc_now) -> None:
        self._session_factory = session_factory
        self._clock = clock

    async def approve(self, customer_id: int) -> CustomerDTO:
        return await self._transition(customer_id, "approve")

    async def reject(self, customer_id: int) -> CustomerDTO:
        return await self._transition(customer_id, "reject")

    async def suspend(self, customer_id: int) -> CustomerDTO:
        return await self._transition(customer_id, "suspend")

    async def _transition(self, customer_id: int, action: str) -> CustomerDTO:
        async with create_uow(self._session_factory) as uow:
            customer = await uow.customers.find_by_id(customer_id)
            if customer is None:
                raise NotFound("customer", customer_id)

            new_status = CustomerLifecycle.target(customer, action)
            fields = {}
            if new_status is CustomerStatus.APPROVED and customer.approved_at is None:
                fields["approved_at"] = self._clock()

            await uow.customers.transition(customer.id, customer.status, new_status, **fields)
            await uow.commit()

            logger.info(
                f"[{uow.execution_id}] customer {customer.id}: "
                f"{customer.status.value} → {new_status.value}"
            )
            updated = await uow.customers.find_by_id(customer.id)
        return CustomerDTO.from_entity(updated)
