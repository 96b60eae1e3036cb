"""Tests for PricingCalculator."""

from decimal import Decimal

import pytest

from core.domain.entities import HostingPackage
from core.domain.enums import BillingCycle
from core.domain.services import PricingCalculator


@pytest.fixture
def startup():
    return HostingPackage(
        name="Startup",
        price_monthly=Decimal("19.99"),
        price_yearly=Decimal("14.99"),
        id=1,
    )


@pytest.fixture
def calculator():
    return PricingCalculator(tax_rate=Decimal("0.21"), domain_fee=Decimal("9.99"))


def test_yearly_package_with_one_domain(calculator, startup):
    quote = calculator.quote(startup, BillingCycle.YEARLY, domain_count=1)

    assert quote.subtotal.amount == Decimal("24.98")
    assert quote.tax.amount == Decimal("5.25")  # 5.2458 rounds half-up
    assert quote.total.amount == Decimal("30.23")
    assert quote.total.currency == "EUR"


def test_yearly_rate_is_not_twelve_months(calculator, startup):
    monthly = calculator.quote(startup, BillingCycle.MONTHLY, 0)
    yearly = calculator.quote(startup, BillingCycle.YEARLY, 0)

    assert monthly.subtotal.amount == Decimal("19.99")
    assert yearly.subtotal.amount == Decimal("14.99")


def test_quarterly_falls_back_to_monthly_rate(calculator, startup):
    quote = calculator.quote(startup, BillingCycle.QUARTERLY, 0)
    assert quote.subtotal.amount == Decimal("19.99")


def test_domain_only_order(calculator):
    quote = calculator.quote(None, BillingCycle.MONTHLY, domain_count=2)

    assert quote.subtotal.amount == Decimal("19.98")
    assert quote.tax.amount == Decimal("4.20")
    assert quote.total.amount == Decimal("24.18")


def test_half_cent_tax_rounds_up():
    calculator = PricingCalculator(tax_rate=Decimal("0.5"), domain_fee=Decimal("0.05"))
    quote = calculator.quote(None, BillingCycle.MONTHLY, domain_count=1)

    assert quote.tax.amount == Decimal("0.03")


@pytest.mark.parametrize("cycle", list(BillingCycle))
@pytest.mark.parametrize("domain_count", [0, 1, 3, 7])
@pytest.mark.parametrize("rate", ["0.21", "0.09", "0.00"])
def test_total_is_subtotal_plus_tax_in_cents(startup, cycle, domain_count, rate):
    calculator = PricingCalculator(tax_rate=Decimal(rate), domain_fee=Decimal("9.99"))
    quote = calculator.quote(startup, cycle, domain_count)

    assert quote.total.amount == quote.subtotal.amount + quote.tax.amount
    for money in (quote.subtotal, quote.tax, quote.total):
        assert money.amount == money.amount.quantize(Decimal("0.01"))
        assert not money.is_negative()
