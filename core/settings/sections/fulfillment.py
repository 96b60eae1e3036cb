"""Order pricing and fulfillment tuning (HOSTFLOW_*)."""
from decimal import Decimal

from pydantic import Field

from core.settings.base import HostflowBaseSettings, section_config


class FulfillmentSettings(HostflowBaseSettings):
    """
    Pricing constants, retry policies and worker sizing.

    Retry backoffs are fixed delays in seconds between attempts.
    """

    currency: str = "EUR"
    tax_rate: Decimal = Decimal("0.21")
    domain_fee: Decimal = Decimal("9.99")
    domain_invoice_price: Decimal = Decimal("15.00")
    # Must match the PREFIX part of PREFIX-YYYYMMDD-XXXXXX order numbers
    order_number_prefix: str = Field(default="HF", pattern=r"^[A-Z]{1,8}$")
    order_number_attempts: int = 10
    registration_period_years: int = 1

    # Retry policies
    max_attempts: int = 3
    sync_backoff_seconds: int = 30
    provisioning_backoff_seconds: int = 60
    registration_backoff_seconds: int = 120
    invoicing_backoff_seconds: int = 60
    hosting_status_backoff_seconds: int = 60

    # Worker
    concurrency: int = 4
    poll_interval_seconds: float = 5.0
    batch_size: int = 20
    stale_task_seconds: int = 900
    run_worker: bool = False

    auto_approve_paid_orders: bool = True
    use_mock_providers: bool = True
    seed_catalog: bool = True

    model_config = section_config("HOSTFLOW_")
