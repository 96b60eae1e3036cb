"""Repository interfaces."""

from .customer_repository import CustomerRepository
from .domain_repository import DomainRepository
from .order_repository import OrderRepository
from .package_repository import PackageRepository
from .task_repository import TaskRepository

__all__ = [
    "CustomerRepository",
    "DomainRepository",
    "OrderRepository",
    "PackageRepository",
    "TaskRepository",
]
