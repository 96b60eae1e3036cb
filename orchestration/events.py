"""Orchestration events - Event, EventMetadata."""

from dataclasses import dataclass
from datetime import datetime

from core.domain.value_objects import ExecutionID
from hostflow_sdk.utils.datetime import utc_now


@dataclass
class EventMetadata:
    """Metadata for an event."""

    execution_id: str
    service: str
    operation: str | None
    timestamp: datetime


@dataclass
class Event:
    """Something that happened in the fulfillment system."""

    name: str
    payload: dict[str, object]
    metadata: EventMetadata


def build_event(
    name: str,
    execution_id: ExecutionID,
    service: str,
    payload: dict[str, object],
    operation: str | None = None,
) -> Event:
    """Build an event stamped with the current time.

    Args:
        name: Event name (e.g. "order.approved", "task.failed")
        execution_id: ExecutionID of the unit of work that produced it
        service: Producing component ("orders", "fulfillment", ...)
        payload: Event payload
        operation: Optional operation name

    Returns:
        Event instance
    """
    return Event(
        name=name,
        payload=payload,
        metadata=EventMetadata(
            execution_id=str(execution_id),
            service=service,
            operation=operation,
            timestamp=utc_now(),
        ),
    )
