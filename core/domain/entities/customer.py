"""
Customer entity.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import CustomerStatus
from ..value_objects import CustomerProfile


@dataclass
class Customer:
    """
    A buyer of hosting packages and domains.

    `hosting_account_ref` and `accounting_contact_ref` point at the
    customer's records in the hosting panel and the accounting system.
    Each is set once, by the first successful sync, and never changed.
    """
    email: str
    first_name: str
    last_name: str
    company: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: str = "NL"
    vat_number: Optional[str] = None
    status: CustomerStatus = CustomerStatus.PENDING
    hosting_account_ref: Optional[str] = None
    accounting_contact_ref: Optional[str] = None
    approved_at: Optional[datetime] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_profile(self) -> CustomerProfile:
        """Snapshot of the contact details sent to providers."""
        return CustomerProfile(
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            company=self.company,
            phone=self.phone,
            address=self.address,
            postal_code=self.postal_code,
            city=self.city,
            country=self.country,
            vat_number=self.vat_number,
        )
