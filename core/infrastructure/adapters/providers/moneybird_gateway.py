"""Accounting gateway backed by the Moneybird API."""
import logging
from typing import List, Optional

from core.application.interfaces import IAccountingGateway
from core.domain.value_objects import CustomerProfile, InvoiceLine
from hostflow_sdk.moneybird import MoneybirdClient

from .errors import provider_errors


logger = logging.getLogger(__name__)


class MoneybirdAccountingGateway(IAccountingGateway):
    """Creates contacts and draft sales invoices in one Moneybird administration."""

    PROVIDER = "moneybird"

    def __init__(self, client: MoneybirdClient, tax_rate_id: Optional[str] = None):
        self._client = client
        self._tax_rate_id = tax_rate_id

    async def create_contact(self, profile: CustomerProfile) -> str:
        payload = {
            "company_name": profile.company or "",
            "firstname": profile.first_name,
            "lastname": profile.last_name,
            "address1": profile.address or "",
            "zipcode": profile.postal_code or "",
            "city": profile.city or "",
            "country": profile.country,
            "phone": profile.phone or "",
            "send_invoices_to_email": profile.email,
            "tax_number": profile.vat_number or "",
        }
        async with provider_errors(self.PROVIDER, "create contact"):
            contact_id = await self._client.create_contact(payload)
        logger.info(f"Moneybird contact {contact_id} created for {profile.email}")
        return contact_id

    async def create_invoice(self, contact_ref: str, lines: List[InvoiceLine], reference: str) -> str:
        details = [
            {"description": line.description, "price": f"{line.price:.2f}", "amount": str(line.quantity)}
            for line in lines
        ]
        async with provider_errors(self.PROVIDER, "create invoice"):
            invoice_id = await self._client.create_sales_invoice(
                contact_ref, details, reference, tax_rate_id=self._tax_rate_id
            )
        logger.info(f"Moneybird invoice {invoice_id} created for {reference} ({len(details)} line(s))")
        return invoice_id
