"""Tests for RedisStreamPublisher."""

import json
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from core.infrastructure.bus import LIFECYCLE_EVENTS, RedisStreamPublisher
from orchestration.bus import InMemoryEventBus
from orchestration.events import Event, EventMetadata


def order_event(name="order.paid"):
    return Event(
        name=name,
        payload={"order_id": 1, "order_number": "HF-20240315-ABC123"},
        metadata=EventMetadata(
            execution_id="exec-1",
            service="orders",
            operation=None,
            timestamp=datetime(2024, 3, 15, 12, 0),
        ),
    )


@pytest.mark.asyncio
async def test_publish_appends_to_stream():
    client = AsyncMock()
    client.xadd.return_value = "1710504000000-0"
    publisher = RedisStreamPublisher(stream_name="test:orders", maxlen=500, client=client)

    msg_id = await publisher.publish(order_event())

    assert msg_id == "1710504000000-0"
    client.xadd.assert_awaited_once()
    stream, message = client.xadd.await_args.args
    assert stream == "test:orders"
    assert message["event"] == "order.paid"
    assert message["timestamp"] == "2024-03-15T12:00:00"
    assert json.loads(message["payload"])["order_number"] == "HF-20240315-ABC123"
    assert client.xadd.await_args.kwargs == {"maxlen": 500, "approximate": True}


@pytest.mark.asyncio
async def test_attach_forwards_lifecycle_events_only():
    client = AsyncMock()
    publisher = RedisStreamPublisher(client=client)
    bus = InMemoryEventBus()
    publisher.attach(bus)

    await bus.publish(order_event("order.approved"))
    await bus.publish(order_event("task.started"))

    assert "order.approved" in LIFECYCLE_EVENTS
    assert client.xadd.await_count == 1


@pytest.mark.asyncio
async def test_disconnect_closes_client():
    client = AsyncMock()
    publisher = RedisStreamPublisher(client=client)

    await publisher.disconnect()

    client.aclose.assert_awaited_once()
