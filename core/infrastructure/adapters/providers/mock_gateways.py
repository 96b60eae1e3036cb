"""
In-memory provider gateways.

Used in development (`HOSTFLOW_USE_MOCK_PROVIDERS=true`) and in tests.
References are deterministic (`plesk-client-1`, `op-domain-1`, ...), every
call is recorded in `calls`, and failures can be injected per operation:

    hosting.fail_next("create_subscription", times=2)
"""
import itertools
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.application.dtos import PaymentCheckout, PaymentEvent
from core.application.interfaces import (
    IAccountingGateway,
    IHostingGateway,
    IPaymentGateway,
    IRegistrarGateway,
)
from core.domain.exceptions import ProviderError
from core.domain.value_objects import CustomerProfile, InvoiceLine


logger = logging.getLogger(__name__)


class _MockGateway:
    provider = "mock"

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self._failures: Dict[str, List[Exception]] = {}
        self._counter = itertools.count(1)

    def fail_next(self, operation: str, times: int = 1, error: Optional[Exception] = None) -> None:
        """Make the next `times` calls of `operation` raise."""
        error = error or ProviderError(self.provider, f"injected {operation} failure", 503)
        self._failures.setdefault(operation, []).extend([error] * times)

    def calls_to(self, operation: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == operation]

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    def _ref(self, kind: str) -> str:
        return f"{self.provider}-{kind}-{next(self._counter)}"


class MockHostingGateway(_MockGateway, IHostingGateway):
    provider = "plesk"

    def __init__(self) -> None:
        super().__init__()
        self.subscription_status: Dict[str, str] = {}

    async def create_customer_account(self, profile: CustomerProfile) -> str:
        self._record("create_customer_account", profile.email)
        return self._ref("client")

    async def create_subscription(self, account_ref: str, domain_name: str, plan_name: str) -> str:
        self._record("create_subscription", account_ref, domain_name, plan_name)
        ref = self._ref("subscription")
        self.subscription_status[ref] = "active"
        return ref

    async def suspend_subscription(self, subscription_ref: str) -> None:
        self._record("suspend_subscription", subscription_ref)
        self.subscription_status[subscription_ref] = "suspended"

    async def reactivate_subscription(self, subscription_ref: str) -> None:
        self._record("reactivate_subscription", subscription_ref)
        self.subscription_status[subscription_ref] = "active"


class MockRegistrarGateway(_MockGateway, IRegistrarGateway):
    provider = "openprovider"

    def __init__(self, unavailable: Iterable[str] = ()) -> None:
        super().__init__()
        self.unavailable = {name.lower() for name in unavailable}
        self.registered: Dict[str, str] = {}

    async def check_availability(self, domain_name: str) -> bool:
        self._record("check_availability", domain_name)
        return domain_name.lower() not in self.unavailable and domain_name not in self.registered

    async def register_domain(self, domain_name: str, contact: CustomerProfile, period_years: int) -> str:
        self._record("register_domain", domain_name, contact.email, period_years)
        ref = self._ref("domain")
        self.registered[domain_name] = ref
        return ref


class MockAccountingGateway(_MockGateway, IAccountingGateway):
    provider = "moneybird"

    def __init__(self) -> None:
        super().__init__()
        self.invoices: Dict[str, Dict[str, Any]] = {}

    async def create_contact(self, profile: CustomerProfile) -> str:
        self._record("create_contact", profile.email)
        return self._ref("contact")

    async def create_invoice(self, contact_ref: str, lines: List[InvoiceLine], reference: str) -> str:
        self._record("create_invoice", contact_ref, reference)
        ref = self._ref("invoice")
        self.invoices[ref] = {"contact_ref": contact_ref, "reference": reference, "lines": list(lines)}
        return ref


class MockPaymentGateway(_MockGateway, IPaymentGateway):
    provider = "mollie"

    def __init__(self) -> None:
        super().__init__()
        self.payments: Dict[str, Dict[str, Any]] = {}

    async def create_payment(
        self,
        amount: Decimal,
        currency: str,
        description: str,
        metadata: Dict[str, Any],
    ) -> PaymentCheckout:
        self._record("create_payment", amount, currency, description)
        ref = self._ref("payment")
        self.payments[ref] = {"amount": amount, "status": "open", "metadata": dict(metadata)}
        return PaymentCheckout(payment_ref=ref, checkout_url=f"https://checkout.example/{ref}", status="open")

    def set_status(self, payment_ref: str, status: str) -> None:
        """Simulate the customer completing (or abandoning) a payment."""
        self.payments[payment_ref]["status"] = status

    async def fetch_payment(self, payment_ref: str) -> PaymentEvent:
        self._record("fetch_payment", payment_ref)
        payment = self.payments.get(payment_ref)
        if payment is None:
            raise ProviderError(self.provider, f"payment {payment_ref} not found", 404)
        return PaymentEvent(payment_ref=payment_ref, status=payment["status"], metadata=payment["metadata"])
