"""Moneybird API v2 client."""

from typing import Any, Dict, List, Optional

from ..errors import ProviderAPIError
from ..http import JsonApiClient


class MoneybirdClient(JsonApiClient):
    """
    Moneybird accounting client scoped to one administration.

    Every path is prefixed with the administration id; authentication is a
    personal API token sent as a bearer token.
    """

    provider_name = "moneybird"

    def __init__(
        self,
        api_url: str,
        api_token: str,
        administration_id: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(f"{api_url.rstrip('/')}/{administration_id}", timeout_seconds)
        self._api_token = api_token

    async def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_token}"}

    async def create_contact(self, contact: Dict[str, Any]) -> str:
        """
        Create a contact.

        Args:
            contact: Contact attributes (company_name, firstname, lastname, ...)

        Returns:
            Moneybird contact id
        """
        data = await self.request("POST", "/contacts.json", json={"contact": contact})
        return self._require_id(data, "contact")

    async def create_sales_invoice(
        self,
        contact_id: str,
        details: List[Dict[str, Any]],
        reference: str,
        tax_rate_id: Optional[str] = None,
    ) -> str:
        """
        Create a draft sales invoice.

        Args:
            contact_id: Moneybird contact id
            details: Line items (description, price, amount)
            reference: Free-text reference shown on the invoice
            tax_rate_id: Tax rate applied to every line, if configured

        Returns:
            Moneybird sales invoice id
        """
        if tax_rate_id:
            details = [{**line, "tax_rate_id": tax_rate_id} for line in details]
        payload = {
            "sales_invoice": {
                "contact_id": contact_id,
                "reference": reference,
                "details_attributes": details,
            }
        }
        data = await self.request("POST", "/sales_invoices.json", json=payload)
        return self._require_id(data, "sales invoice")

    def _require_id(self, data: Any, kind: str) -> str:
        if not isinstance(data, dict) or not data.get("id"):
            raise ProviderAPIError(self.provider_name, f"{kind} creation returned no id")
        return str(data["id"])
