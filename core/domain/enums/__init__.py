"""Domain enumerations."""

from .status import BillingCycle, CustomerStatus, DomainStatus, OrderStatus
from .task import TaskStatus, TaskType

__all__ = [
    "BillingCycle",
    "CustomerStatus",
    "DomainStatus",
    "OrderStatus",
    "TaskStatus",
    "TaskType",
]
