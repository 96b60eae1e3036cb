"""
Hostflow SDK.

Thin asynchronous clients for the external providers the order
fulfillment workflow talks to:

- Plesk (hosting control panel)
- OpenProvider (domain registrar)
- Moneybird (accounting / invoicing)
- Mollie (payments)
"""

from .errors import ProviderAPIError
from .logging import get_logger

__all__ = ["ProviderAPIError", "get_logger"]
