"""HTTP-level tests: FastAPI app wired to the in-memory database and mock providers."""

import httpx
import pytest
import pytest_asyncio

from api import dependencies
from api.main import app


ORDER_BODY = {
    "customer": {
        "email": "jane.doe@example.com",
        "first_name": "Jane",
        "last_name": "Doe",
    },
    "hosting_package_id": 1,
    "billing_cycle": "monthly",
    "domains": [{"name": "janedoe.nl"}],
}


@pytest_asyncio.fixture
async def client(
    session_factory,
    order_service,
    lifecycle_service,
    payment_service,
    customer_service,
    coordinator,
    registrar,
):
    app.dependency_overrides.update({
        dependencies.get_session_factory: lambda: session_factory,
        dependencies.get_order_service: lambda: order_service,
        dependencies.get_lifecycle_service: lambda: lifecycle_service,
        dependencies.get_payment_service: lambda: payment_service,
        dependencies.get_customer_service: lambda: customer_service,
        dependencies.get_coordinator: lambda: coordinator,
        dependencies.get_registrar_gateway: lambda: registrar,
    })
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client):
    assert (await client.get("/health")).json()["status"] == "healthy"

    ready = await client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "ok"


@pytest.mark.asyncio
async def test_packages_listed(client):
    response = await client.get("/api/v1/packages")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["Startup", "Plus", "Premium"]


@pytest.mark.asyncio
async def test_create_and_fetch_order(client):
    created = await client.post("/api/v1/orders", json=ORDER_BODY)

    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"
    assert body["total"] == "36.28"
    assert body["customer"]["email"] == "jane.doe@example.com"

    fetched = await client.get(f"/api/v1/orders/{body['order_number']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == body["id"]

    listed = await client.get("/api/v1/orders", params={"status": "pending"})
    assert listed.json()["total"] == 1


@pytest.mark.asyncio
async def test_invalid_requests(client):
    bad_domain = await client.post("/api/v1/orders", json={**ORDER_BODY, "domains": [{"name": "not a domain"}]})
    assert bad_domain.status_code == 422
    assert bad_domain.json()["error"] == "ValidationError"

    unknown_package = await client.post("/api/v1/orders", json={**ORDER_BODY, "hosting_package_id": 99})
    assert unknown_package.status_code == 422
    assert unknown_package.json()["error"] == "InvalidPackage"

    assert (await client.get("/api/v1/orders/HF-20240315-NOPE00")).status_code == 404


@pytest.mark.asyncio
async def test_admin_approval_flow(client):
    number = (await client.post("/api/v1/orders", json=ORDER_BODY)).json()["order_number"]

    approved = await client.post(f"/api/v1/admin/orders/{number}/approve")
    assert approved.status_code == 200
    assert approved.json()["status"] == "processing"

    again = await client.post(f"/api/v1/admin/orders/{number}/approve")
    assert again.status_code == 409
    assert again.json()["error"] == "IllegalTransition"

    tasks = await client.get(f"/api/v1/admin/orders/{number}/tasks")
    assert len(tasks.json()) == 4

    retry = await client.post(f"/api/v1/admin/tasks/{tasks.json()[0]['id']}/retry")
    assert retry.status_code == 409

    cancelled = await client.post(f"/api/v1/admin/orders/{number}/cancel", json={"reason": "test"})
    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["domains"][0]["status"] == "cancelled"


@pytest.mark.asyncio
async def test_payment_webhook(client, payments):
    number = (await client.post("/api/v1/orders", json=ORDER_BODY)).json()["order_number"]
    checkout = await client.post(f"/api/v1/orders/{number}/payments")
    assert checkout.status_code == 201
    payment_ref = checkout.json()["payment_ref"]

    payments.set_status(payment_ref, "paid")
    first = await client.post("/api/v1/webhooks/payments", json={"id": payment_ref})
    second = await client.post("/api/v1/webhooks/payments", json={"id": payment_ref})

    assert first.json()["applied"] is True
    assert first.json()["new_status"] == "processing"
    assert second.status_code == 200
    assert second.json()["applied"] is False


@pytest.mark.asyncio
async def test_domain_check(client):
    free = await client.get("/api/v1/domains/check", params={"domain": "JaneDoe.nl"})
    taken = await client.get("/api/v1/domains/check", params={"domain": "taken.com"})

    assert free.json() == {"domain": "janedoe.nl", "tld": "nl", "available": True}
    assert taken.json()["available"] is False


@pytest.mark.asyncio
async def test_customer_approval(client):
    customer_id = (await client.post("/api/v1/orders", json=ORDER_BODY)).json()["customer"]["id"]

    response = await client.post(f"/api/v1/admin/customers/{customer_id}/approve")

    assert response.status_code == 200
    assert response.json()["status"] == "approved"
