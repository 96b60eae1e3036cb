"""Provider credentials. Loaded from environment / .env."""
from pydantic import Field

from core.settings.base import HostflowBaseSettings, section_config


class PleskSettings(HostflowBaseSettings):
    """Plesk hosting panel (PLESK_*)."""

    host: str = "localhost"
    username: str = "admin"
    password: str = ""
    port: int = 8443
    protocol: str = "https"
    timeout_seconds: float = 30.0

    model_config = section_config("PLESK_")


class OpenProviderSettings(HostflowBaseSettings):
    """OpenProvider registrar (OPENPROVIDER_*)."""

    api_url: str = "https://api.openprovider.eu"
    username: str = ""
    password: str = ""
    ns_group: str = "dns-openprovider"
    timeout_seconds: float = 30.0

    model_config = section_config("OPENPROVIDER_")


class MoneybirdSettings(HostflowBaseSettings):
    """Moneybird accounting (MONEYBIRD_*)."""

    api_url: str = "https://moneybird.com/api/v2"
    api_token: str = ""
    administration_id: str = ""
    default_tax_rate_id: str | None = None
    timeout_seconds: float = 30.0

    model_config = section_config("MONEYBIRD_")


class MollieSettings(HostflowBaseSettings):
    """Mollie payments (MOLLIE_*)."""

    api_url: str = "https://api.mollie.com"
    api_key: str = ""
    redirect_url: str = Field(default="http://localhost:8000/orders/thanks")
    webhook_url: str = Field(default="http://localhost:8000/api/v1/webhooks/payments")
    timeout_seconds: float = 30.0

    model_config = section_config("MOLLIE_")
