"""Errors raised by the provider SDK clients."""

from typing import Optional


class ProviderAPIError(Exception):
    """
    Upstream provider call failed.

    Raised for non-2xx responses and for payloads that are missing the
    fields a client needs. Transport errors (aiohttp.ClientError) are
    left to propagate unchanged.
    """

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        self.provider = provider
        self.message = message
        self.status = status
        super().__init__(f"{provider}: {message}" + (f" (HTTP {status})" if status else ""))
