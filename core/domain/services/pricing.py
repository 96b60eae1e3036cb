"""Order pricing."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..entities import HostingPackage
from ..enums import BillingCycle
from ..value_objects import Money


@dataclass(frozen=True)
class PriceQuote:
    """Amounts fixed on an order at creation."""
    subtotal: Money
    tax: Money
    total: Money


class PricingCalculator:
    """
    Computes order amounts.

    subtotal = package rate for the billing cycle + domain fee per domain
    tax      = subtotal * tax rate, rounded half-up to cents
    total    = subtotal + tax
    """

    def __init__(self, tax_rate: Decimal, domain_fee: Decimal, currency: str = "EUR") -> None:
        self.tax_rate = Decimal(str(tax_rate))
        self.domain_fee = Decimal(str(domain_fee))
        self.currency = currency

    def quote(
        self,
        package: Optional[HostingPackage],
        billing_cycle: BillingCycle,
        domain_count: int,
    ) -> PriceQuote:
        """
        Price an order.

        Args:
            package: Selected package, or None for a domain-only order
            billing_cycle: Billing cycle picking the package rate
            domain_count: Number of domains on the order

        Returns:
            PriceQuote with subtotal, tax and total
        """
        subtotal = Money.zero(self.currency)
        if package is not None:
            subtotal = subtotal + Money(package.rate_for(billing_cycle), self.currency)
        subtotal = (subtotal + Money(self.domain_fee, self.currency) * domain_count).rounded()

        tax = (subtotal * self.tax_rate).rounded()
        return PriceQuote(subtotal=subtotal, tax=tax, total=subtotal + tax)
