"""Domain value objects."""

from .value_objects import EmailAddress, ExecutionID, Money
from .order_number import OrderNumber
from .domain_name import DomainName
from .profiles import CustomerProfile, InvoiceLine

__all__ = [
    "CustomerProfile",
    "DomainName",
    "EmailAddress",
    "ExecutionID",
    "InvoiceLine",
    "Money",
    "OrderNumber",
]
