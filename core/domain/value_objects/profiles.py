"""Value objects handed to provider gateways."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class CustomerProfile:
    """Contact and billing details of a customer, as sent to providers."""
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

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        return self.company or self.full_name


@dataclass(frozen=True)
class InvoiceLine:
    """One invoice line item."""
    description: str
    price: Decimal
    quantity: int = 1
