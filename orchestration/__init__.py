"""Orchestration layer - fulfillment task coordination with eventing."""

from .bus import EventBusProtocol, InMemoryEventBus
from .coordinator import FulfillmentCoordinator
from .events import Event, EventMetadata, build_event
from .models import ExecutionContext, TaskResult
from .worker import TaskWorker
from .workflow import DEFAULT_RETRY_POLICIES, RetryPolicy, TaskHandler, retry_policies_from_settings

__all__ = [
    "DEFAULT_RETRY_POLICIES",
    "Event",
    "EventBusProtocol",
    "EventMetadata",
    "ExecutionContext",
    "FulfillmentCoordinator",
    "InMemoryEventBus",
    "RetryPolicy",
    "TaskHandler",
    "TaskResult",
    "TaskWorker",
    "build_event",
    "retry_policies_from_settings",
]
