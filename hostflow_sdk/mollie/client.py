"""Mollie payments API client (one-off payments only)."""

from decimal import Decimal
from typing import Any, Dict

from ..errors import ProviderAPIError
from ..http import JsonApiClient


class MollieClient(JsonApiClient):
    """Mollie v2 payments client."""

    provider_name = "mollie"

    def __init__(self, api_url: str, api_key: str, timeout_seconds: float = 30.0) -> None:
        super().__init__(f"{api_url.rstrip('/')}/v2", timeout_seconds)
        self._api_key = api_key

    async def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def create_payment(
        self,
        amount: Decimal,
        currency: str,
        description: str,
        redirect_url: str,
        webhook_url: str,
        metadata: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Create a payment.

        Returns:
            Raw payment resource (id, status, _links.checkout.href, ...)
        """
        payload = {
            "amount": {"currency": currency, "value": f"{amount:.2f}"},
            "description": description,
            "redirectUrl": redirect_url,
            "webhookUrl": webhook_url,
            "metadata": metadata,
        }
        data = await self.request("POST", "/payments", json=payload)
        if not isinstance(data, dict) or "id" not in data:
            raise ProviderAPIError(self.provider_name, "payment creation returned no id")
        return data

    async def get_payment(self, payment_id: str) -> Dict[str, Any]:
        """Fetch a payment resource by id."""
        return await self.request("GET", f"/payments/{payment_id}")
