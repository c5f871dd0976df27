"""End-to-end tests: gateway routes against the mock bookkeeping API"""

import httpx
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from bookkeeping_gateway.api.dependencies import bearer_token, get_bookkeeping_client
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient
from mock_upstream.bookkeeping_server.main import TOKEN, app as mock_app

pytestmark = pytest.mark.integration


@pytest.fixture
def upstream_app(app):
    """Gateway wired to the in-process mock API"""

    def client_for(request: Request) -> BookkeepingClient:
        return BookkeepingClient(
            base_url="http://upstream",
            token=bearer_token(request.headers.get("Authorization")),
            transport=httpx.ASGITransport(app=mock_app),
        )

    app.dependency_overrides[get_bookkeeping_client] = client_for
    return app


@pytest.fixture
def gateway(upstream_app) -> TestClient:
    return TestClient(upstream_app, headers={"Authorization": f"Bearer {TOKEN}"})


def test_login_returns_token(upstream_app):
    client = TestClient(upstream_app)

    response = client.post("/v1/auth/login", json={"email": "owner@example.com", "password": "secret"})

    assert response.status_code == 200
    data = response.json()
    assert data["token"] == TOKEN
    assert data["user"]["email"] == "owner@example.com"


def test_login_with_wrong_password(upstream_app):
    client = TestClient(upstream_app)

    response = client.post("/v1/auth/login", json={"email": "owner@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_missing_token_is_rejected(upstream_app):
    client = TestClient(upstream_app)

    response = client.get("/v1/customers")

    assert response.status_code == 401


def test_customers_list(gateway: TestClient):
    response = gateway.get("/v1/customers")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    by_id = {c["id"]: c for c in data["customers"]}
    assert by_id[1]["balance"]["status"] == "DEBT"
    assert by_id[2]["balance"]["status"] == "CREDIT"
    assert by_id[3]["total_debt"] == 300


def test_customers_search_by_phone(gateway: TestClient):
    response = gateway.get("/v1/customers", params={"search": "0733"})

    assert [c["name"] for c in response.json()["customers"]] == ["Cynthia Mwangi"]


def test_unknown_customer_passes_not_found(gateway: TestClient):
    response = gateway.get("/v1/customers/99")

    assert response.status_code == 404
    assert response.json()["detail"] == "Customer not found"


def test_overdue_debts_filter(gateway: TestClient):
    response = gateway.get("/v1/debts", params={"status": "OVERDUE"})

    assert response.status_code == 200
    data = response.json()
    assert sorted(v["debt"]["id"] for v in data["debts"]) == [11, 14]
    assert data["totals"]["total_outstanding"] == 1800
    assert data["totals"]["overdue_count"] == 2


def test_dashboard(gateway: TestClient, nairobi_time):
    """Customer 3's payments fail upstream; the dashboard still renders"""
    response = gateway.get("/v1/dashboard")

    assert response.status_code == 200
    data = response.json()
    stats = data["dashboard"]["stats"]
    assert stats["total_customers"] == 3
    assert stats["customers_with_debts"] == 2
    assert stats["total_outstanding_debt"] == 1800
    assert stats["overdue_debts"] == 2
    assert stats["payments_today"] == 1
    assert [p["id"] for p in data["dashboard"]["recent_payments"]] == [21, 22]
    assert data["formatted_outstanding"] == "Ksh 1,800.00"


def test_credit_preview_uses_live_balance(gateway: TestClient):
    response = gateway.post("/v1/previews/debt", json={"amount": 1500, "customer_id": 2})

    assert response.status_code == 200
    preview = response.json()["preview"]
    assert preview["credit_applied"] == 400
    assert preview["final_amount"] == 1100
