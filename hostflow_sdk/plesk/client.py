"""Plesk REST API v2 client."""

from typing import Any, Dict, Optional

import aiohttp

from ..errors import ProviderAPIError
from ..http import JsonApiClient


class PleskClient(JsonApiClient):
    """
    Plesk hosting panel client.

    Authenticates with HTTP basic auth against
    `{protocol}://{host}:{port}/api/v2`.
    """

    provider_name = "plesk"

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int = 8443,
        protocol: str = "https",
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(f"{protocol}://{host}:{port}/api/v2", timeout_seconds)
        self._username = username
        self._password = password

    def _basic_auth(self) -> Optional[aiohttp.BasicAuth]:
        return aiohttp.BasicAuth(self._username, self._password)

    async def create_client(self, client: Dict[str, Any]) -> int:
        """
        Create a Plesk customer account.

        Args:
            client: Payload with name, login, password, email, company, ...

        Returns:
            Plesk client id
        """
        payload = {"type": "customer", **client}
        data = await self.request("POST", "/clients", json=payload)
        return self._require_id(data, "client")

    async def create_domain(self, name: str, owner_client_id: int, plan_name: str) -> int:
        """
        Create a hosted domain (webspace subscription) for a client.

        Returns:
            Plesk domain id
        """
        payload = {
            "name": name,
            "hosting_type": "virtual",
            "owner_client": {"id": owner_client_id},
            "plan": {"name": plan_name},
        }
        data = await self.request("POST", "/domains", json=payload)
        return self._require_id(data, "domain")

    async def set_domain_status(self, domain_id: int, status: str) -> None:
        """Set a domain to `active` or `suspended`."""
        await self.request("PUT", f"/domains/{domain_id}/status", json={"status": status})

    async def get_domain(self, domain_id: int) -> Dict[str, Any]:
        return await self.request("GET", f"/domains/{domain_id}")

    def _require_id(self, data: Any, kind: str) -> int:
        if not isinstance(data, dict) or "id" not in data:
            raise ProviderAPIError(self.provider_name, f"{kind} creation returned no id: {data!r}")
        return int(data["id"])
