"""Domain layer - pure domain models and interfaces."""

from .entities import Customer, Domain, FulfillmentTask, HostingPackage, Order
from .enums import BillingCycle, CustomerStatus, DomainStatus, OrderStatus, TaskStatus, TaskType
from .value_objects import ExecutionID, Money, OrderNumber

__all__ = [
    "BillingCycle",
    "Customer",
    "CustomerStatus",
    "Domain",
    "DomainStatus",
    "ExecutionID",
    "FulfillmentTask",
    "HostingPackage",
    "Money",
    "Order",
    "OrderNumber",
    "OrderStatus",
    "TaskStatus",
    "TaskType",
]
