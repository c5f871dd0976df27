"""Dashboard home aggregation"""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from bookkeeping_gateway.domain.formatting import round_money
from bookkeeping_gateway.domain.models import Customer, CustomerDebtSummary, Debt, Payment
from bookkeeping_gateway.utils.date_utils import is_same_day


@dataclass
class DashboardStats:
    total_customers: int
    customers_with_debts: int
    total_outstanding_debt: float
    overdue_debts: int
    payments_today: int


@dataclass
class DashboardView:
    stats: DashboardStats
    recent_payments: List[Payment] = field(default_factory=list)
    top_overdue: List[Debt] = field(default_factory=list)


def latest_payments(payments: List[Payment], limit: int) -> List[Payment]:
    """Newest first; payments without a timestamp sort last"""
    dated = [p for p in payments if p.created_at is not None]
    undated = [p for p in payments if p.created_at is None]
    dated.sort(key=lambda p: p.created_at.timestamp(), reverse=True)
    return (dated + undated)[:limit]


def build_dashboard(
    customers: List[Customer],
    customers_with_debts: List[CustomerDebtSummary],
    overdue: List[Debt],
    payments: List[Payment],
    today: date,
    limit: int = 5,
) -> DashboardView:
    """
    Assemble the dashboard home view.

    payments_today is counted over the recent payments only, which is all
    the dashboard samples.
    """
    recent = latest_payments(payments, limit)

    stats = DashboardStats(
        total_customers=len(customers),
        customers_with_debts=len(customers_with_debts),
        total_outstanding_debt=round_money(sum(c.total_debt for c in customers_with_debts)),
        overdue_debts=len(overdue),
        payments_today=sum(1 for p in recent if is_same_day(p.created_at, today)),
    )

    return DashboardView(stats=stats, recent_payments=recent, top_overdue=overdue[:limit])
