"""Domain entities."""

from .customer import Customer
from .domain import Domain
from .hosting_package import HostingPackage
from .order import Order
from .task import FulfillmentTask

__all__ = ["Customer", "Domain", "FulfillmentTask", "HostingPackage", "Order"]
