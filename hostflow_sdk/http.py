"""Minimal JSON-over-HTTP client shared by the provider SDKs."""

from typing import Any, Dict, Optional

import aiohttp

from .errors import ProviderAPIError
from .logging import get_logger


class JsonApiClient:
    """
    Base class for the provider REST clients.

    Opens a short-lived aiohttp session per request, sends/receives JSON and
    raises ProviderAPIError on any non-2xx response. Subclasses supply
    authentication through `_auth_headers()` or `_basic_auth()`.
    """

    provider_name = "provider"

    def __init__(self, base_url: str, timeout_seconds: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._logger = get_logger(f"hostflow_sdk.{self.provider_name}")

    async def _auth_headers(self) -> Dict[str, str]:
        return {}

    def _basic_auth(self) -> Optional[aiohttp.BasicAuth]:
        return None

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticate: bool = True,
    ) -> Any:
        """
        Send a request and decode the JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url (leading slash optional)
            json: Optional JSON body
            params: Optional query parameters
            authenticate: Attach provider credentials (False for login calls)

        Returns:
            Decoded JSON payload (None for empty bodies)

        Raises:
            ProviderAPIError: On non-2xx responses
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        if authenticate:
            headers.update(await self._auth_headers())

        self._logger.debug(f"→ {method} {url}")
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                auth=self._basic_auth() if authenticate else None,
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    self._logger.error(
                        f"{self.provider_name} API error: {response.status} - {body[:500]}"
                    )
                    raise ProviderAPIError(self.provider_name, body or response.reason or "", response.status)

                if response.status == 204:
                    return None
                return await response.json(content_type=None)
