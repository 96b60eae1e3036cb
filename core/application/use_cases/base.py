"""Shared plumbing for fulfillment use cases (task handlers)."""
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.data.uow import create_uow
from core.domain.entities import Order
from core.domain.exceptions import NotFound
from hostflow_sdk.utils.datetime import utc_now
from orchestration.bus import EventBusProtocol
from orchestration.events import build_event
from orchestration.models import ExecutionContext


logger = logging.getLogger(__name__)


class FulfillmentUseCase:
    """
    Base class for the task handlers the coordinator dispatches.

    Subclasses implement `execute(ctx)`. Gateway calls are made outside any
    open transaction; results are written back in short units of work using
    compare-and-swap / set-once updates.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        event_bus: Optional[EventBusProtocol] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._event_bus = event_bus
        self._clock = clock

    async def execute(self, ctx: ExecutionContext) -> object:
        raise NotImplementedError

    async def on_permanent_failure(self, ctx: ExecutionContext, error: Exception) -> None:
        """Nothing to undo by default."""

    async def _load_order(self, order_id: int) -> Order:
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)
        if order is None:
            raise NotFound("order", order_id)
        return order

    async def _publish(self, name: str, ctx: ExecutionContext, order: Order, **payload) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.publish(
            build_event(
                name,
                ctx.execution_id,
                "fulfillment",
                {"order_id": order.id, "order_number": order.order_number.value, **payload},
                operation=ctx.task.task_type.value,
            )
        )
