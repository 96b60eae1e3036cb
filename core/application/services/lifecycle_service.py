"""Application service for admin-driven order lifecycle operations."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import OrderDTO, TaskDTO
from core.data.uow import create_uow
from core.domain.entities import Order
from core.domain.enums import DomainStatus, OrderStatus, TaskType
from core.domain.exceptions import IllegalTransition, NotFound
from core.domain.services import DomainLifecycle, OrderLifecycle, TaskRequest, TransitionResult
from hostflow_sdk.utils.datetime import utc_now
from orchestration.bus import EventBusProtocol
from orchestration.coordinator import FulfillmentCoordinator

from .order_transitions import apply_order_transition, publish_transition


logger = logging.getLogger(__name__)

Decision = Callable[[Order, datetime], Optional[TransitionResult]]


class OrderLifecycleService:
    """
    Runs order transitions requested by an administrator (or by payment
    reconciliation) and hands the resulting tasks to the coordinator.

    Each operation is one unit of work: the compare-and-swap status update,
    any domain cascade and the task records commit together or not at all.
    An illegal request raises before anything is written.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        coordinator: FulfillmentCoordinator,
        event_bus: Optional[EventBusProtocol] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._coordinator = coordinator
        self._event_bus = event_bus
        self._clock = clock
        self._lifecycle = OrderLifecycle()

    async def approve(self, order_number: str) -> OrderDTO:
        """pending|paid → processing; enqueues the fulfillment tasks."""
        return await self._run(order_number, None, self._lifecycle.approve)

    async def approve_order_id(self, order_id: int) -> OrderDTO:
        return await self._run(None, order_id, self._lifecycle.approve)

    async def cancel(self, order_number: str, reason: Optional[str] = None) -> OrderDTO:
        """Cancel from any non-cancelled status; a cancelled order is returned unchanged."""
        return await self._run(
            order_number, None, lambda order, now: self._lifecycle.cancel(order, now, reason)
        )

    async def cancel_order_id(self, order_id: int, reason: Optional[str] = None) -> OrderDTO:
        return await self._run(
            None, order_id, lambda order, now: self._lifecycle.cancel(order, now, reason)
        )

    async def suspend(self, order_number: str) -> OrderDTO:
        return await self._run(order_number, None, self._lifecycle.suspend)

    async def reactivate(self, order_number: str) -> OrderDTO:
        return await self._run(order_number, None, self._lifecycle.reactivate)

    async def list_tasks(self, order_number: str) -> List[TaskDTO]:
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_order_number(order_number)
            if order is None:
                raise NotFound("order", order_number)
            tasks = await uow.tasks.list_for_order(order.id)
        return [TaskDTO.from_entity(t) for t in tasks]

    async def redispatch_domain_registration(self, domain_id: int) -> TaskDTO:
        """Move a failed domain back to pending and enqueue a fresh registration task.

        Raises:
            NotFound: Unknown domain
            IllegalTransition: Domain not failed, or its order is not being fulfilled
        """
        now = self._clock()
        async with create_uow(self._session_factory) as uow:
            domain = await uow.domains.find_by_id(domain_id)
            if domain is None:
                raise NotFound("domain", domain_id)
            DomainLifecycle.ensure(domain.status, DomainStatus.PENDING)

            order = await uow.orders.find_by_id(domain.order_id)
            if order.status not in (OrderStatus.PROCESSING, OrderStatus.ACTIVE):
                raise IllegalTransition("order", order.status.value, "re-dispatch domain registration for")

            await uow.domains.transition(domain.id, DomainStatus.FAILED, DomainStatus.PENDING)
            request = TaskRequest(
                TaskType.REGISTER_DOMAIN,
                {
                    "order_id": order.id,
                    "customer_id": order.customer_id,
                    "domain_id": domain.id,
                    "domain_name": domain.name,
                },
                domain_id=domain.id,
            )
            [task] = await self._coordinator.enqueue(uow, [request], now)
            await uow.commit()

            logger.info(f"[{uow.execution_id}] re-dispatched registration of {domain.name} (task {task.id})")
        return TaskDTO.from_entity(task)

    async def _run(
        self, order_number: Optional[str], order_id: Optional[int], decide: Decision
    ) -> OrderDTO:
        now = self._clock()
        async with create_uow(self._session_factory) as uow:
            if order_number is not None:
                order = await uow.orders.find_by_order_number(order_number)
            else:
                order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise NotFound("order", order_number if order_number is not None else order_id)

            result = decide(order, now)
            if result is None:
                logger.info(f"[{uow.execution_id}] order {order.order_number} unchanged")
                return OrderDTO.from_entity(order)

            await apply_order_transition(uow, result)
            await self._coordinator.enqueue(uow, result.tasks, now)
            await uow.commit()

            updated = await uow.orders.find_by_id(order.id)
            execution_id = uow.execution_id

        logger.info(
            f"[{execution_id}] order {order.order_number}: "
            f"{result.from_status.value} → {result.to_status.value}"
        )
        await publish_transition(self._event_bus, execution_id, updated, result)
        return OrderDTO.from_entity(updated)
