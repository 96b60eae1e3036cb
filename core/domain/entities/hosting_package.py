"""Hosting package catalog entry."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..enums import BillingCycle


@dataclass
class HostingPackage:
    """
    Catalog entry. Read-only for the order workflow.

    Prices are per month; `price_yearly` is the discounted monthly rate
    for yearly billing, not twelve months of `price_monthly`.
    """
    name: str
    price_monthly: Decimal
    price_yearly: Decimal
    price_quarterly: Optional[Decimal] = None
    description: Optional[str] = None
    disk_space_mb: int = 0
    bandwidth_gb: int = 0
    email_accounts: int = 0
    databases: int = 0
    domains: int = 1
    subdomains: int = 0
    active: bool = True
    id: Optional[int] = None

    def rate_for(self, cycle: BillingCycle) -> Decimal:
        """Unit price for a billing cycle (quarterly falls back to monthly)."""
        if cycle is BillingCycle.YEARLY:
            return self.price_yearly
        if cycle is BillingCycle.QUARTERLY and self.price_quarterly is not None:
            return self.price_quarterly
        return self.price_monthly
