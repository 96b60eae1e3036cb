"""Tests for EventBus."""

from datetime import datetime

import pytest

from core.domain.value_objects import ExecutionID
from orchestration.bus import InMemoryEventBus
from orchestration.events import Event, EventMetadata, build_event


def make_event(name: str = "order.approved", **payload) -> Event:
    metadata = EventMetadata(
        execution_id="exec-test-123",
        service="orders",
        operation=None,
        timestamp=datetime(2024, 3, 15, 12, 0),
    )
    return Event(name=name, payload=payload or {"order_id": 1}, metadata=metadata)


@pytest.mark.asyncio
async def test_event_bus_subscribe_and_publish():
    """Test subscribing and publishing events."""
    bus = InMemoryEventBus()

    events_received: list[Event] = []

    async def handler(event: Event) -> None:
        events_received.append(event)

    bus.subscribe("order.approved", handler)

    await bus.publish(make_event())

    assert len(events_received) == 1
    assert events_received[0].name == "order.approved"
    assert events_received[0].payload == {"order_id": 1}
    assert events_received[0].metadata.execution_id == "exec-test-123"
    assert events_received[0].metadata.service == "orders"


@pytest.mark.asyncio
async def test_event_bus_multiple_handlers():
    """Test multiple handlers for the same event."""
    bus = InMemoryEventBus()

    events_1: list[Event] = []
    events_2: list[Event] = []

    async def handler1(event: Event) -> None:
        events_1.append(event)

    async def handler2(event: Event) -> None:
        events_2.append(event)

    bus.subscribe("order.approved", handler1)
    bus.subscribe("order.approved", handler2)

    await bus.publish(make_event())

    assert len(events_1) == 1
    assert len(events_2) == 1


@pytest.mark.asyncio
async def test_event_bus_wildcard_receives_everything():
    bus = InMemoryEventBus()
    names: list[str] = []

    async def handler(event: Event) -> None:
        names.append(event.name)

    bus.subscribe("*", handler)

    await bus.publish(make_event("order.created"))
    await bus.publish(make_event("task.failed"))

    assert names == ["order.created", "task.failed"]


@pytest.mark.asyncio
async def test_event_bus_isolates_failing_handler():
    """A broken subscriber does not stop the others or reach the publisher."""
    bus = InMemoryEventBus()
    received: list[Event] = []

    async def broken(event: Event) -> None:
        raise RuntimeError("subscriber down")

    async def healthy(event: Event) -> None:
        received.append(event)

    bus.subscribe("order.paid", broken)
    bus.subscribe("order.paid", healthy)

    await bus.publish(make_event("order.paid"))

    assert len(received) == 1


@pytest.mark.asyncio
async def test_event_bus_no_handlers():
    """Test publishing event with no handlers."""
    bus = InMemoryEventBus()

    # Should not raise an error
    await bus.publish(make_event())


def test_build_event_stamps_metadata():
    execution_id = ExecutionID.generate()

    event = build_event("task.started", execution_id, "fulfillment", {"task_id": 7}, operation="register_domain")

    assert event.metadata.execution_id == str(execution_id)
    assert event.metadata.service == "fulfillment"
    assert event.metadata.operation == "register_domain"
    assert event.metadata.timestamp.tzinfo is None
