"""
Domain entity (a domain name attached to an order).

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import DomainStatus


@dataclass
class Domain:
    """
    A single domain name ordered together with an order.

    `register` is False when the customer already owns the name and only
    wants it hosted. `customer_id` always mirrors the parent order.
    """
    name: str
    tld: str
    customer_id: int
    order_id: Optional[int] = None
    register: bool = True
    status: DomainStatus = DomainStatus.PENDING
    registration_ref: Optional[str] = None
    hosting_subscription_ref: Optional[str] = None
    registered_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def is_registered(self) -> bool:
        return self.status in (DomainStatus.REGISTERED, DomainStatus.ACTIVE) and self.registered_at is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def days_until_expiration(self, now: datetime) -> Optional[int]:
        if self.expires_at is None:
            return None
        return (self.expires_at - now).days
