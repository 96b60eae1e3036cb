"""
Status enums for customers, orders and domains.

Values are the strings stored in the database and returned by the API.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DomainStatus(str, Enum):
    """Domain registration states."""

    PENDING = "pending"
    REGISTERED = "registered"
    ACTIVE = "active"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"
    CANCELLED = "cancelled"


class CustomerStatus(str, Enum):
    """Customer account states."""

    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


class BillingCycle(str, Enum):
    """Billing cycle with its length in months."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        return {"monthly": 1, "quarterly": 3, "yearly": 12}[self.value]
