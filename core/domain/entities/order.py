"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..enums import BillingCycle, OrderStatus
from ..value_objects import Money, OrderNumber
from .customer import Customer
from .domain import Domain
from .hosting_package import HostingPackage


@dataclass
class Order:
    """
    Order aggregate root.

    Subtotal, tax and total are fixed when the order is assembled and never
    recomputed. Milestone timestamps are written once, by the transition
    that reaches the milestone.
    """
    customer_id: int
    order_number: OrderNumber
    billing_cycle: BillingCycle
    subtotal: Money
    tax: Money
    total: Money
    status: OrderStatus = OrderStatus.PENDING
    hosting_package_id: Optional[int] = None
    payment_ref: Optional[str] = None
    external_invoice_ref: Optional[str] = None
    cancellation_reason: Optional[str] = None
    notes: Optional[str] = None

    # Milestones
    paid_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    provisioned_at: Optional[datetime] = None
    activated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    next_billing_date: Optional[datetime] = None

    id: Optional[int] = None
    created_at: Optional[datetime] = None

    # Hydrated relations
    customer: Optional[Customer] = None
    package: Optional[HostingPackage] = None
    domains: List[Domain] = field(default_factory=list)

    def primary_domain(self) -> Optional[Domain]:
        """First domain of the order; the one hosting is provisioned for."""
        return self.domains[0] if self.domains else None

    def domains_to_register(self) -> List[Domain]:
        return [d for d in self.domains if d.register]

    def is_cancelled(self) -> bool:
        return self.status is OrderStatus.CANCELLED
