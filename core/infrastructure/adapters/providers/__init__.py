"""Provider gateway adapters (real and in-memory)."""

from .mock_gateways import (
    MockAccountingGateway,
    MockHostingGateway,
    MockPaymentGateway,
    MockRegistrarGateway,
)
from .mollie_gateway import MolliePaymentGateway
from .moneybird_gateway import MoneybirdAccountingGateway
from .openprovider_gateway import OpenProviderRegistrarGateway
from .plesk_gateway import PleskHostingGateway

__all__ = [
    "MockAccountingGateway",
    "MockHostingGateway",
    "MockPaymentGateway",
    "MockRegistrarGateway",
    "MolliePaymentGateway",
    "MoneybirdAccountingGateway",
    "OpenProviderRegistrarGateway",
    "PleskHostingGateway",
]
