"""Registrar gateway backed by the OpenProvider REST API."""
import logging

from core.application.interfaces import IRegistrarGateway
from core.domain.value_objects import CustomerProfile
from hostflow_sdk.openprovider import OpenProviderClient

from .errors import provider_errors


logger = logging.getLogger(__name__)


class OpenProviderRegistrarGateway(IRegistrarGateway):
    """Checks and registers domains; the customer becomes every contact role."""

    PROVIDER = "openprovider"

    def __init__(self, client: OpenProviderClient):
        self._client = client

    async def check_availability(self, domain_name: str) -> bool:
        async with provider_errors(self.PROVIDER, "check availability"):
            return await self._client.check_domain(domain_name)

    async def register_domain(self, domain_name: str, contact: CustomerProfile, period_years: int) -> str:
        async with provider_errors(self.PROVIDER, "register domain"):
            handle = await self._client.create_contact(self.contact_payload(contact))
            registration_id = await self._client.register_domain(domain_name, handle, period_years)
        logger.info(f"OpenProvider registered {domain_name} ({registration_id}) for {contact.email}")
        return registration_id

    @staticmethod
    def contact_payload(contact: CustomerProfile) -> dict:
        return {
            "name": {"first_name": contact.first_name, "last_name": contact.last_name},
            "company_name": contact.company or "",
            "email": contact.email,
            "phone": {"subscriber_number": contact.phone or ""},
            "address": {
                "street": contact.address or "",
                "zipcode": contact.postal_code or "",
                "city": contact.city or "",
                "country": contact.country,
            },
            "vat": contact.vat_number or "",
        }
