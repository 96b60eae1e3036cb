"""Tests for the provider gateways over stubbed SDK clients."""

from decimal import Decimal
from unittest.mock import AsyncMock

import aiohttp
import pytest

from core.domain.exceptions import ProviderError
from core.domain.value_objects import CustomerProfile, InvoiceLine
from core.infrastructure.adapters.providers import (
    MockHostingGateway,
    MoneybirdAccountingGateway,
    MolliePaymentGateway,
    OpenProviderRegistrarGateway,
    PleskHostingGateway,
)
from hostflow_sdk.errors import ProviderAPIError


PROFILE = CustomerProfile(
    email="jane.doe@example.com",
    first_name="Jane",
    last_name="Doe",
    company="Doe Webdesign",
    city="Amsterdam",
)


@pytest.mark.asyncio
async def test_plesk_creates_customer_and_subscription():
    client = AsyncMock()
    client.create_client.return_value = 42
    client.create_domain.return_value = 7
    gateway = PleskHostingGateway(client)

    account = await gateway.create_customer_account(PROFILE)
    subscription = await gateway.create_subscription(account, "janedoe.nl", "Startup")

    assert (account, subscription) == ("42", "7")
    payload = client.create_client.await_args.args[0]
    assert payload["name"] == "Jane Doe"
    assert payload["login"].startswith("jane.doe")
    client.create_domain.assert_awaited_once_with("janedoe.nl", 42, "Startup")


@pytest.mark.asyncio
async def test_plesk_api_error_becomes_provider_error():
    client = AsyncMock()
    client.set_domain_status.side_effect = ProviderAPIError("plesk", "locked", 409)
    gateway = PleskHostingGateway(client)

    with pytest.raises(ProviderError) as exc_info:
        await gateway.suspend_subscription("7")

    assert exc_info.value.provider == "plesk"
    assert exc_info.value.status == 409


@pytest.mark.asyncio
async def test_transport_error_becomes_provider_error():
    client = AsyncMock()
    client.check_domain.side_effect = aiohttp.ClientConnectionError("connection reset")
    gateway = OpenProviderRegistrarGateway(client)

    with pytest.raises(ProviderError) as exc_info:
        await gateway.check_availability("janedoe.nl")

    assert exc_info.value.provider == "openprovider"
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_openprovider_registers_with_customer_contact():
    client = AsyncMock()
    client.create_contact.return_value = "JD000001-NL"
    client.register_domain.return_value = "12345"
    gateway = OpenProviderRegistrarGateway(client)

    ref = await gateway.register_domain("janedoe.nl", PROFILE, 1)

    assert ref == "12345"
    contact = client.create_contact.await_args.args[0]
    assert contact["name"] == {"first_name": "Jane", "last_name": "Doe"}
    assert contact["address"]["country"] == "NL"
    client.register_domain.assert_awaited_once_with("janedoe.nl", "JD000001-NL", 1)


@pytest.mark.asyncio
async def test_moneybird_invoice_details():
    client = AsyncMock()
    client.create_sales_invoice.return_value = "inv-1"
    gateway = MoneybirdAccountingGateway(client, tax_rate_id="tax-21")

    ref = await gateway.create_invoice(
        "contact-1",
        [
            InvoiceLine("Startup hosting (monthly)", Decimal("19.99")),
            InvoiceLine("Domain registration: janedoe.nl", Decimal("15")),
        ],
        "HF-20240315-ABC123",
    )

    assert ref == "inv-1"
    client.create_sales_invoice.assert_awaited_once_with(
        "contact-1",
        [
            {"description": "Startup hosting (monthly)", "price": "19.99", "amount": "1"},
            {"description": "Domain registration: janedoe.nl", "price": "15.00", "amount": "1"},
        ],
        "HF-20240315-ABC123",
        tax_rate_id="tax-21",
    )


@pytest.mark.asyncio
async def test_mollie_checkout_and_status():
    client = AsyncMock()
    client.create_payment.return_value = {
        "id": "tr_abc",
        "status": "open",
        "_links": {"checkout": {"href": "https://www.mollie.com/checkout/tr_abc"}},
    }
    client.get_payment.return_value = {"id": "tr_abc", "status": "paid", "metadata": {"order_id": 3}}
    gateway = MolliePaymentGateway(client, "https://shop.example/thanks", "https://shop.example/hook")

    checkout = await gateway.create_payment(Decimal("36.28"), "EUR", "Order 1", {"order_id": 3})
    event = await gateway.fetch_payment("tr_abc")

    assert checkout.checkout_url == "https://www.mollie.com/checkout/tr_abc"
    assert event.status == "paid"
    assert event.order_id == 3


@pytest.mark.parametrize(
    "data, expected",
    [
        ({"status": "paid"}, "paid"),
        ({"status": "paid", "amountRefunded": {"value": "36.28", "currency": "EUR"}}, "failed"),
        ({"status": "paid", "amountChargedBack": {"value": "10.00", "currency": "EUR"}}, "failed"),
        ({"status": "paid", "amountRefunded": {"value": "0.00", "currency": "EUR"}}, "paid"),
        ({"status": "something-new"}, "open"),
        ({}, "open"),
    ],
)
def test_mollie_status_resolution(data, expected):
    assert MolliePaymentGateway.resolve_status(data) == expected


@pytest.mark.asyncio
async def test_mock_gateway_failure_injection():
    hosting = MockHostingGateway()
    hosting.fail_next("create_subscription", times=2)

    for _ in range(2):
        with pytest.raises(ProviderError):
            await hosting.create_subscription("plesk-client-1", "janedoe.nl", "Startup")
    ref = await hosting.create_subscription("plesk-client-1", "janedoe.nl", "Startup")

    assert ref == "plesk-subscription-1"
    assert len(hosting.calls_to("create_subscription")) == 3
