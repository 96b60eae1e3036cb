"""Database models."""

from .base import Base
from .customer_model import CustomerModel
from .domain_model import DomainModel
from .order_model import OrderModel
from .package_model import HostingPackageModel
from .task_model import FulfillmentTaskModel

__all__ = [
    "Base",
    "CustomerModel",
    "DomainModel",
    "FulfillmentTaskModel",
    "HostingPackageModel",
    "OrderModel",
]
