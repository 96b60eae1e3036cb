"""Persisting and announcing order lifecycle transitions."""

from typing import Optional

from core.data.uow import UnitOfWork
from core.domain.entities import Order
from core.domain.enums import DomainStatus
from core.domain.services import TransitionResult
from core.domain.value_objects import ExecutionID
from orchestration.bus import EventBusProtocol
from orchestration.events import build_event


async def apply_order_transition(uow: UnitOfWork, result: TransitionResult) -> None:
    """Write a transition with a compare-and-swap on the expected status.

    Does not commit. Cascades to the order's domains when the transition
    asks for it.

    Raises:
        ConflictError: If the stored status is no longer `result.from_status`
    """
    await uow.orders.transition(result.order_id, result.from_status, result.to_status, **result.fields)
    if result.cascade_domains_to is DomainStatus.CANCELLED:
        await uow.domains.cancel_all_for_order(result.order_id)


async def publish_transition(
    event_bus: Optional[EventBusProtocol],
    execution_id: ExecutionID,
    order: Order,
    result: TransitionResult,
    **extra: object,
) -> None:
    """Publish the lifecycle event of a committed transition."""
    if event_bus is None:
        return
    payload = {
        "order_id": order.id,
        "order_number": order.order_number.value,
        "from_status": result.from_status.value,
        "to_status": result.to_status.value,
        "tasks": [request.task_type.value for request in result.tasks],
    }
    payload.update(extra)
    await event_bus.publish(build_event(result.event_name, execution_id, "orders", payload))
