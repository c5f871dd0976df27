"""Pytest fixtures for testing"""

import time

import pytest
from datetime import date, datetime, timezone
from fastapi.testclient import TestClient
from bookkeeping_gateway.api.main import create_app
from bookkeeping_gateway.api.dependencies import get_today
from bookkeeping_gateway.domain.balances import resolve_balance
from bookkeeping_gateway.domain.models import Customer, Debt, Payment


TODAY = date(2024, 6, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def nairobi_time(monkeypatch):
    """Run with the shop's local time zone (UTC+3)"""
    monkeypatch.setenv("TZ", "EAT-3")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def app():
    """Gateway app with a fixed reference date"""
    app = create_app()
    app.dependency_overrides[get_today] = lambda: TODAY
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client"""
    return TestClient(app, headers={"Authorization": "Bearer test-token"})


def make_debt(
    id: int,
    amount: float,
    remaining: float | None = None,
    due: date | None = None,
    status: str = "PENDING",
    description: str = "Goods on credit",
    customer_id: int = 1,
    customer_name: str | None = None,
) -> Debt:
    return Debt(
        id=id,
        customer_id=customer_id,
        customer_name=customer_name,
        amount=amount,
        remaining_amount=amount if remaining is None else remaining,
        description=description,
        status=status,
        due_date=due,
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        is_paid=status == "PAID",
    )


def make_customer(id: int, name: str, phone: str = "0700000000", total_debt: float = 0.0,
                  credit_balance: float = 0.0, status: str = "ACTIVE") -> Customer:
    return Customer(
        id=id,
        name=name,
        phone=phone,
        status=status,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        total_debt=total_debt,
        credit_balance=credit_balance,
        balance=resolve_balance(total_debt, credit_balance),
    )


def make_payment(id: int, amount: float, created_at: datetime | None, customer_id: int = 1) -> Payment:
    return Payment(
        id=id,
        customer_id=customer_id,
        amount=amount,
        method="CASH",
        description="Payment",
        created_at=created_at,
    )


@pytest.fixture
def sample_debts() -> list[Debt]:
    """Mix of overdue, upcoming and settled debts relative to TODAY"""
    return [
        make_debt(1, 1000, due=date(2024, 6, 1), description="Maize flour", customer_name="Amina"),
        make_debt(2, 500, remaining=250, due=date(2024, 7, 1), description="Cooking oil", customer_name="Amina"),
        make_debt(3, 800, remaining=0, due=date(2024, 4, 1), status="PAID", description="Sugar", customer_name="Brian"),
        make_debt(4, 300, due=date(2024, 5, 30), description="Airtime", customer_name="Cynthia"),
    ]
