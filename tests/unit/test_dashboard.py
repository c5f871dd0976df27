"""Unit tests for dashboard aggregation"""

from datetime import datetime, timezone
from bookkeeping_gateway.domain.dashboard import build_dashboard, latest_payments
from bookkeeping_gateway.domain.models import CustomerDebtSummary
from conftest import TODAY, make_customer, make_debt, make_payment


def _at(day: int, hour: int = 9) -> datetime:
    return datetime(2024, 6, day, hour, tzinfo=timezone.utc)


def test_latest_payments_newest_first_and_capped():
    payments = [make_payment(i, 100, _at(i)) for i in range(1, 8)] + [make_payment(99, 5, None)]

    latest = latest_payments(payments, limit=5)

    assert [p.id for p in latest] == [7, 6, 5, 4, 3]


def test_latest_payments_undated_last():
    payments = [make_payment(1, 10, None), make_payment(2, 10, _at(1))]

    assert [p.id for p in latest_payments(payments, limit=5)] == [2, 1]


def test_build_dashboard_stats(nairobi_time):
    customers = [make_customer(1, "Amina"), make_customer(2, "Brian"), make_customer(3, "Cynthia")]
    with_debts = [
        CustomerDebtSummary(id=1, name="Amina", phone="", total_debt=1500),
        CustomerDebtSummary(id=3, name="Cynthia", phone="", total_debt=300.25),
    ]
    overdue = [make_debt(i, 100) for i in range(1, 8)]
    payments = [make_payment(1, 200, _at(15)), make_payment(2, 100, _at(15, 17)), make_payment(3, 50, _at(10))]

    view = build_dashboard(customers, with_debts, overdue, payments, TODAY, limit=5)

    assert view.stats.total_customers == 3
    assert view.stats.customers_with_debts == 2
    assert view.stats.total_outstanding_debt == 1800.25
    assert view.stats.overdue_debts == 7
    assert view.stats.payments_today == 2
    assert len(view.top_overdue) == 5
    assert [p.id for p in view.recent_payments] == [2, 1, 3]


def test_build_dashboard_empty():
    view = build_dashboard([], [], [], [], TODAY)

    assert view.stats.total_customers == 0
    assert view.stats.total_outstanding_debt == 0
    assert view.recent_payments == []


def test_payments_today_uses_local_day(nairobi_time):
    """Counts by the shop's calendar day, not the UTC one"""
    payments = [
        make_payment(1, 100, datetime(2024, 6, 14, 22, 30, tzinfo=timezone.utc)),  # 01:30 on the 15th locally
        make_payment(2, 100, datetime(2024, 6, 15, 22, 0, tzinfo=timezone.utc)),  # already the 16th locally
        make_payment(3, 100, datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)),
    ]

    view = build_dashboard([], [], [], payments, TODAY)

    assert view.stats.payments_today == 2
