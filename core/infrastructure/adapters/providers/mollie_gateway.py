"""Payment gateway backed by the Mollie payments API."""
import logging
from decimal import Decimal
from typing import Any, Dict

from core.application.dtos import PaymentCheckout, PaymentEvent
from core.application.interfaces import IPaymentGateway
from hostflow_sdk.mollie import MollieClient

from .errors import provider_errors


logger = logging.getLogger(__name__)

KNOWN_STATUSES = {"open", "pending", "authorized", "paid", "failed", "expired", "canceled"}


class MolliePaymentGateway(IPaymentGateway):
    """One-off Mollie payments."""

    PROVIDER = "mollie"

    def __init__(self, client: MollieClient, redirect_url: str, webhook_url: str):
        self._client = client
        self._redirect_url = redirect_url
        self._webhook_url = webhook_url

    async def create_payment(
        self,
        amount: Decimal,
        currency: str,
        description: str,
        metadata: Dict[str, Any],
    ) -> PaymentCheckout:
        async with provider_errors(self.PROVIDER, "create payment"):
            data = await self._client.create_payment(
                amount, currency, description, self._redirect_url, self._webhook_url, metadata
            )
        checkout_url = ((data.get("_links") or {}).get("checkout") or {}).get("href")
        return PaymentCheckout(
            payment_ref=data["id"],
            checkout_url=checkout_url,
            status=self.resolve_status(data),
        )

    async def fetch_payment(self, payment_ref: str) -> PaymentEvent:
        async with provider_errors(self.PROVIDER, "fetch payment"):
            data = await self._client.get_payment(payment_ref)
        return PaymentEvent(
            payment_ref=payment_ref,
            status=self.resolve_status(data),
            metadata=data.get("metadata") or {},
        )

    @staticmethod
    def resolve_status(data: Dict[str, Any]) -> str:
        """
        Provider status, except that a refunded or charged-back payment
        never counts as paid.
        """
        status = data.get("status", "open")
        if status not in KNOWN_STATUSES:
            logger.warning(f"Unknown Mollie payment status {status!r}, treating as open")
            return "open"
        if status == "paid" and (_positive(data.get("amountRefunded")) or _positive(data.get("amountChargedBack"))):
            return "failed"
        return status


def _positive(amount: Any) -> bool:
    if not isinstance(amount, dict):
        return False
    return Decimal(str(amount.get("value", "0"))) > 0
