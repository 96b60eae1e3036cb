"""OpenProvider REST API client."""

from typing import Any, Dict, Optional

from ..errors import ProviderAPIError
from ..http import JsonApiClient


class OpenProviderClient(JsonApiClient):
    """
    OpenProvider registrar client.

    Logs in with username/password and caches the bearer token for the
    lifetime of the client instance.
    """

    provider_name = "openprovider"

    def __init__(
        self,
        api_url: str,
        username: str,
        password: str,
        ns_group: str = "dns-openprovider",
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(f"{api_url.rstrip('/')}/v1beta", timeout_seconds)
        self._username = username
        self._password = password
        self.ns_group = ns_group
        self._token: Optional[str] = None

    async def _auth_headers(self) -> Dict[str, str]:
        if self._token is None:
            await self.login()
        return {"Authorization": f"Bearer {self._token}"}

    async def login(self) -> str:
        """Obtain and cache an API token."""
        data = await self.request(
            "POST",
            "/auth/login",
            json={"username": self._username, "password": self._password},
            authenticate=False,
        )
        token = (data or {}).get("data", {}).get("token")
        if not token:
            raise ProviderAPIError(self.provider_name, "login returned no token")
        self._token = token
        return token

    @staticmethod
    def split_domain(domain_name: str) -> Dict[str, str]:
        name, _, extension = domain_name.partition(".")
        return {"name": name, "extension": extension}

    async def check_domain(self, domain_name: str) -> bool:
        """
        Check whether a domain is free to register.

        Returns:
            True if the registrar reports status `free`
        """
        data = await self.request(
            "POST",
            "/domains/check",
            json={"domains": [self.split_domain(domain_name)]},
        )
        results = (data or {}).get("data", {}).get("results", [])
        if not results:
            raise ProviderAPIError(self.provider_name, f"empty availability result for {domain_name}")
        return results[0].get("status") == "free"

    async def create_contact(self, contact: Dict[str, Any]) -> str:
        """Create a customer contact and return its handle."""
        data = await self.request("POST", "/customers", json=contact)
        handle = (data or {}).get("data", {}).get("handle")
        if not handle:
            raise ProviderAPIError(self.provider_name, "contact creation returned no handle")
        return handle

    async def register_domain(self, domain_name: str, handle: str, period_years: int) -> str:
        """
        Register a domain for the given contact handle.

        Returns:
            OpenProvider domain id (as string)
        """
        payload = {
            "domain": self.split_domain(domain_name),
            "period": period_years,
            "owner_handle": handle,
            "admin_handle": handle,
            "tech_handle": handle,
            "billing_handle": handle,
            "ns_group": self.ns_group,
            "autorenew": "default",
        }
        data = await self.request("POST", "/domains", json=payload)
        domain_id = (data or {}).get("data", {}).get("id")
        if domain_id is None:
            raise ProviderAPIError(self.provider_name, f"registration of {domain_name} returned no id")
        return str(domain_id)
