"""Hosting gateway backed by the Plesk REST API."""
import logging
import re
import secrets

from core.application.interfaces import IHostingGateway
from core.domain.value_objects import CustomerProfile
from hostflow_sdk.plesk import PleskClient

from .errors import provider_errors


logger = logging.getLogger(__name__)


class PleskHostingGateway(IHostingGateway):
    """Creates Plesk customers and webspace subscriptions."""

    PROVIDER = "plesk"

    def __init__(self, client: PleskClient):
        self._client = client

    @staticmethod
    def login_for(email: str) -> str:
        """Plesk login derived from the e-mail's local part."""
        local = re.sub(r"[^a-z0-9_.-]", "", email.split("@", 1)[0].lower())
        return f"{local or 'customer'}{secrets.randbelow(10_000):04d}"

    async def create_customer_account(self, profile: CustomerProfile) -> str:
        payload = {
            "name": profile.full_name,
            "company": profile.company or "",
            "login": self.login_for(profile.email),
            "password": secrets.token_urlsafe(16),
            "email": profile.email,
        }
        async with provider_errors(self.PROVIDER, "create customer"):
            client_id = await self._client.create_client(payload)
        logger.info(f"Plesk customer {client_id} created for {profile.email}")
        return str(client_id)

    async def create_subscription(self, account_ref: str, domain_name: str, plan_name: str) -> str:
        async with provider_errors(self.PROVIDER, "create subscription"):
            domain_id = await self._client.create_domain(domain_name, int(account_ref), plan_name)
        logger.info(f"Plesk subscription {domain_id} created for {domain_name} ({plan_name})")
        return str(domain_id)

    async def suspend_subscription(self, subscription_ref: str) -> None:
        async with provider_errors(self.PROVIDER, "suspend subscription"):
            await self._client.set_domain_status(int(subscription_ref), "suspended")

    async def reactivate_subscription(self, subscription_ref: str) -> None:
        async with provider_errors(self.PROVIDER, "reactivate subscription"):
            await self._client.set_domain_status(int(subscription_ref), "active")
