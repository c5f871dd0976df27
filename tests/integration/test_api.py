"""Integration tests for API endpoints"""

from unittest.mock import AsyncMock, patch
from datetime import date
from fastapi.testclient import TestClient
from bookkeeping_gateway.api.dependencies import bearer_token
from bookkeeping_gateway.domain.exceptions import BookkeepingAPIError
from bookkeeping_gateway.domain.models import (
    AuthResult,
    CustomerDebtSummary,
    CustomerDetails,
    PaymentReceipt,
    PaymentSummary,
    RecordedPayment,
    Service,
)
from conftest import make_customer, make_debt

CLIENT = "bookkeeping_gateway.infrastructure.clients.bookkeeping.BookkeepingClient"


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/previews/debt", json={"amount": 100, "credit_balance": 50})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "bookkeeping_preview_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("bearer  abc ") == "abc"
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token(None) is None


def test_client_dependency_forwards_token(app, client: TestClient):
    captured = {}

    async def fake_list(self):
        captured["token"] = self.token
        return []

    with patch(f"{CLIENT}.list_customers", fake_list):
        response = client.get("/v1/customers")

    assert response.status_code == 200
    assert captured["token"] == "test-token"


def test_debt_preview_with_given_credit(client: TestClient):
    """Test POST /v1/previews/debt with an explicit credit balance"""
    response = client.post("/v1/previews/debt", json={"amount": 1500, "credit_balance": 400})

    assert response.status_code == 200
    data = response.json()
    assert data["preview"]["credit_applied"] == 400
    assert data["preview"]["final_amount"] == 1100
    assert data["formatted"]["final_amount"] == "Ksh 1,100.00"


@patch(f"{CLIENT}.get_customer")
def test_debt_preview_looks_up_customer_credit(mock_get: AsyncMock, client: TestClient):
    """Test the credit balance is fetched when only customer_id is given"""
    mock_get.return_value = CustomerDetails(customer=make_customer(2, "Brian", credit_balance=400))

    response = client.post("/v1/previews/debt", json={"amount": 300, "customer_id": 2})

    assert response.status_code == 200
    preview = response.json()["preview"]
    assert preview["credit_applied"] == 300
    assert preview["final_amount"] == 0
    assert preview["remaining_credit"] == 100
    mock_get.assert_awaited_once_with(2)


def test_debt_preview_needs_credit_or_customer(client: TestClient):
    response = client.post("/v1/previews/debt", json={"amount": 300})

    assert response.status_code == 422
    assert "credit_balance" in response.json()["detail"]


def test_debt_preview_rejects_non_positive_amount(client: TestClient):
    response = client.post("/v1/previews/debt", json={"amount": 0, "credit_balance": 10})
    assert response.status_code == 422


def test_payment_preview_overpayment(client: TestClient):
    response = client.post(
        "/v1/previews/payment",
        json={"amount": 1200, "outstanding_debt": 800, "credit_balance": 0},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_overpayment"] is True
    assert data["preview"]["credit_added"] == 400
    assert data["preview"]["new_credit_balance"] == 400


@patch(f"{CLIENT}.get_customer_unpaid_debts")
def test_credit_application_preview_fetches_debts(mock_debts: AsyncMock, client: TestClient):
    mock_debts.return_value = [
        make_debt(11, 1000, due=date(2024, 6, 1)),
        make_debt(12, 500, due=date(2024, 7, 1)),
    ]

    response = client.post(
        "/v1/previews/credit-application",
        json={"customer_id": 1, "credit_balance": 1200},
    )

    assert response.status_code == 200
    preview = response.json()["preview"]
    assert [d["debt_id"] for d in preview["debts_paid"]] == [11, 12]
    assert preview["debts_paid"][1]["partial"] is True
    assert preview["remaining_debt"] == 300


def test_credit_application_preview_with_supplied_debts(client: TestClient):
    response = client.post(
        "/v1/previews/credit-application",
        json={
            "customer_id": 1,
            "credit_balance": 100,
            "debts": [{"id": 1, "amount": 300, "remaining_amount": 80, "due_date": "2024-05-01"}],
        },
    )

    assert response.status_code == 200
    preview = response.json()["preview"]
    assert preview["credit_applied"] == 80
    assert preview["new_credit_balance"] == 20


def test_sale_preview(client: TestClient):
    response = client.post(
        "/v1/previews/sale",
        json={
            "items": [{"type": "PRODUCT", "product_id": 1, "quantity": 2, "unit_price": 150}],
            "discount_amount": 50,
            "payment_amount": 100,
        },
    )

    assert response.status_code == 200
    totals = response.json()["totals"]
    assert totals["total"] == 250
    assert totals["amount_due"] == 150


@patch(f"{CLIENT}.list_customers")
def test_list_customers_filters(mock_list: AsyncMock, client: TestClient):
    mock_list.return_value = [
        make_customer(1, "Amina Wanjiru", phone="0712"),
        make_customer(2, "Brian Otieno", phone="0722", status="INACTIVE"),
    ]

    response = client.get("/v1/customers", params={"search": "brian", "status": "INACTIVE"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["customers"][0]["name"] == "Brian Otieno"
    assert data["customers"][0]["balance"]["status"] == "BALANCED"


def test_list_customers_rejects_unknown_status(client: TestClient):
    response = client.get("/v1/customers", params={"status": "GONE"})
    assert response.status_code == 422


def test_create_customer_validation(client: TestClient):
    """Test blank name is rejected before reaching the API"""
    response = client.post("/v1/customers", json={"name": "   ", "phone": "0712"})
    assert response.status_code == 422


@patch(f"{CLIENT}.list_debts")
def test_list_debts_overdue_filter(mock_list: AsyncMock, client: TestClient, sample_debts):
    mock_list.return_value = sample_debts

    response = client.get("/v1/debts", params={"status": "OVERDUE"})

    assert response.status_code == 200
    data = response.json()
    assert [v["debt"]["id"] for v in data["debts"]] == [1, 4]
    assert all(v["overdue"] for v in data["debts"])
    assert data["totals"]["overdue_count"] == 2
    assert data["totals"]["total_outstanding"] == 1550


@patch(f"{CLIENT}.add_debt")
def test_add_debt_sends_payload(mock_add: AsyncMock, client: TestClient):
    mock_add.return_value = make_debt(20, 750, due=date(2024, 7, 15))

    response = client.post(
        "/v1/debts",
        json={"customer_id": 1, "amount": 750, "description": "Rice", "due_date": "2024-07-15"},
    )

    assert response.status_code == 201
    assert response.json()["due_date"] == "2024-07-15"
    mock_add.assert_awaited_once_with(
        {"customer_id": 1, "amount": 750.0, "description": "Rice", "due_date": "2024-07-15"}
    )


def test_add_debt_requires_description(client: TestClient):
    response = client.post(
        "/v1/debts",
        json={"customer_id": 1, "amount": 100, "description": "", "due_date": "2024-07-15"},
    )
    assert response.status_code == 422


@patch(f"{CLIENT}.record_payment")
def test_record_general_payment_gets_description(mock_record: AsyncMock, client: TestClient):
    mock_record.return_value = PaymentReceipt(
        success=True,
        message="Payment recorded",
        payment=RecordedPayment(id=1, amount=500, applied_to_debt=0, credit_amount=500, payment_method="CASH"),
        summary=PaymentSummary(total_paid=500, applied_to_debt=0, credit_added=500, previous_credit=0,
                               new_credit_balance=500, remaining_debt=0),
    )

    response = client.post("/v1/payments", json={"customer_id": 3, "amount": 500})

    assert response.status_code == 201
    payload = mock_record.await_args.args[0]
    assert payload["description"] == "General payment"
    assert response.json()["summary"]["credit_added"] == 500


@patch(f"{CLIENT}.apply_credit")
def test_upstream_client_error_passes_through(mock_apply: AsyncMock, client: TestClient):
    """Test a 4xx from the API keeps its status and message"""
    mock_apply.side_effect = BookkeepingAPIError("Customer has no credit balance", 400)

    response = client.post("/v1/payments/apply-credit/5", json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "Customer has no credit balance"


@patch(f"{CLIENT}.list_debts")
def test_upstream_outage_is_bad_gateway(mock_list: AsyncMock, client: TestClient):
    mock_list.side_effect = BookkeepingAPIError("Failed to load customers with debts", 500)

    response = client.get("/v1/debts")

    assert response.status_code == 502


@patch(f"{CLIENT}.list_customers")
def test_upstream_unavailable(mock_list: AsyncMock, client: TestClient):
    mock_list.side_effect = BookkeepingAPIError("Failed to load customers: bookkeeping API unavailable", 503)

    response = client.get("/v1/customers")

    assert response.status_code == 503


@patch(f"{CLIENT}.create_sale")
def test_create_sale_rejects_overpayment(mock_create: AsyncMock, client: TestClient):
    response = client.post(
        "/v1/sales",
        json={"items": [{"type": "SERVICE", "service_id": 3, "quantity": 1, "unit_price": 500}], "payment_amount": 600},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == {"payment_amount": "Payment amount cannot exceed total amount"}
    mock_create.assert_not_awaited()


@patch(f"{CLIENT}.create_sale")
def test_create_sale_requires_items(mock_create: AsyncMock, client: TestClient):
    response = client.post("/v1/sales", json={"items": [], "payment_amount": 0})

    assert response.status_code == 422
    mock_create.assert_not_awaited()


@patch(f"{CLIENT}.login")
def test_login_failure_is_unauthorized(mock_login: AsyncMock, client: TestClient):
    mock_login.return_value = AuthResult(success=False, message="Invalid email or password")

    response = client.post("/v1/auth/login", json={"email": "x@y.z", "password": "nope"})

    assert response.status_code == 401


@patch(f"{CLIENT}.get_customer_payments")
@patch(f"{CLIENT}.customers_with_debts")
@patch(f"{CLIENT}.list_customers")
def test_dashboard_aggregation(
    mock_customers: AsyncMock,
    mock_with_debts: AsyncMock,
    mock_payments: AsyncMock,
    client: TestClient,
):
    """Test GET /v1/dashboard survives one customer's payments failing"""
    mock_customers.return_value = [make_customer(1, "Amina"), make_customer(2, "Brian")]
    mock_with_debts.return_value = [
        CustomerDebtSummary(
            id=1, name="Amina", phone="", total_debt=1300,
            unpaid_debts=[make_debt(11, 1000, due=date(2024, 6, 1)), make_debt(12, 300, due=date(2024, 7, 1))],
        )
    ]
    mock_payments.side_effect = [[], BookkeepingAPIError("Failed to load payments", 500)]

    response = client.get("/v1/dashboard")

    assert response.status_code == 200
    data = response.json()
    stats = data["dashboard"]["stats"]
    assert stats["total_customers"] == 2
    assert stats["customers_with_debts"] == 1
    assert stats["total_outstanding_debt"] == 1300
    assert stats["overdue_debts"] == 1
    assert data["formatted_outstanding"] == "Ksh 1,300.00"


@patch(f"{CLIENT}.list_services")
def test_list_services_searches_locally(mock_list: AsyncMock, client: TestClient):
    mock_list.return_value = {
        "services": [
            Service(id=1, name="Haircut", category="Grooming", price=300, cost_estimate=50, duration=30),
            Service(id=2, name="Phone repair", category="Electronics", price=1500, cost_estimate=600, duration=90),
        ],
        "summary": {"total_services": 2},
    }

    response = client.get("/v1/services", params={"search": "groom"})

    assert response.status_code == 200
    assert [s["name"] for s in response.json()["services"]] == ["Haircut"]
    mock_list.assert_awaited_once_with(category=None, requires_booking=None)
