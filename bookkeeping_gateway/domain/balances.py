"""Customer balances, debt reshaping and list filtering"""

from dataclasses import dataclass, field
from datetime import date
from math import ceil
from typing import Iterable, List, Optional

from bookkeeping_gateway.domain.formatting import round_money
from bookkeeping_gateway.domain.models import Customer, CustomerBalance, CustomerDebtSummary, Debt, Payment

ALL = "ALL"
OVERDUE = "OVERDUE"


@dataclass
class DebtTotals:
    total_outstanding: float
    paid_count: int
    pending_count: int
    overdue_count: int


@dataclass
class CustomerOverview:
    total_paid: float
    active_debts: List[Debt] = field(default_factory=list)
    paid_debts: List[Debt] = field(default_factory=list)


@dataclass
class QuickPayOption:
    label: str
    amount: float


def resolve_balance(
    total_debt: Optional[float],
    credit_balance: Optional[float],
    balance: Optional[CustomerBalance] = None,
) -> CustomerBalance:
    """
    Prefer the balance the API sent; otherwise derive one from the totals.

    Missing totals count as 0. Net balance is credit minus debt.
    """
    if balance is not None:
        return balance

    total_debt = total_debt or 0.0
    credit_balance = credit_balance or 0.0

    if credit_balance > total_debt:
        status = "CREDIT"
    elif total_debt > credit_balance:
        status = "DEBT"
    else:
        status = "BALANCED"

    return CustomerBalance(
        total_debt=round_money(total_debt),
        credit_balance=round_money(credit_balance),
        net_balance=round_money(credit_balance - total_debt),
        status=status,
    )


def summarize_customer_debts(customer_id: int, name: str, phone: str, debts: Iterable[Debt]) -> CustomerDebtSummary:
    """Keep only unpaid debts, tag them with the customer name and total them"""
    unpaid = []
    for debt in debts:
        if debt.is_paid:
            continue
        if debt.customer_id is None:
            debt.customer_id = customer_id
        debt.customer_name = debt.customer_name or name
        unpaid.append(debt)

    return CustomerDebtSummary(
        id=customer_id,
        name=name,
        phone=phone,
        total_debt=round_money(sum(d.remaining_amount for d in unpaid)),
        unpaid_debts=unpaid,
    )


def filter_customers(customers: Iterable[Customer], search: str = "", status: str = ALL) -> List[Customer]:
    """Case-insensitive name match or phone substring, then optional status"""
    term = search.strip().lower()
    result = []
    for customer in customers:
        if term and term not in customer.name.lower() and term not in customer.phone:
            continue
        if status != ALL and customer.status != status:
            continue
        result.append(customer)
    return result


def is_overdue(debt: Debt, today: date) -> bool:
    """A pending debt whose due date has passed"""
    return debt.status == "PENDING" and debt.due_date is not None and debt.due_date < today


def filter_debts(debts: Iterable[Debt], today: date, search: str = "", status: str = ALL) -> List[Debt]:
    term = search.strip().lower()
    result = []
    for debt in debts:
        if term:
            in_description = term in debt.description.lower()
            in_customer = bool(debt.customer_name) and term in debt.customer_name.lower()
            if not (in_description or in_customer):
                continue
        if status == OVERDUE:
            if not is_overdue(debt, today):
                continue
        elif status != ALL and debt.status != status:
            continue
        result.append(debt)
    return result


def debt_totals(debts: List[Debt], today: date) -> DebtTotals:
    return DebtTotals(
        total_outstanding=round_money(sum(d.remaining_amount for d in debts)),
        paid_count=sum(1 for d in debts if d.status == "PAID"),
        pending_count=sum(1 for d in debts if d.status == "PENDING"),
        overdue_count=sum(1 for d in debts if is_overdue(d, today)),
    )


def customer_overview(debts: List[Debt], payments: List[Payment]) -> CustomerOverview:
    """Split a customer's debts into active and settled, and total what they paid"""
    active = [d for d in debts if not d.is_paid and d.remaining_amount > 0]
    paid = [d for d in debts if d.is_paid or d.remaining_amount <= 0]
    return CustomerOverview(
        total_paid=round_money(sum(p.amount for p in payments)),
        active_debts=active,
        paid_debts=paid,
    )


def payment_progress(debt: Debt) -> int:
    """Percent of a debt already paid off"""
    if debt.amount <= 0:
        return 0
    return round((debt.amount - debt.remaining_amount) / debt.amount * 100)


def quick_pay_options(debt: Debt) -> List[QuickPayOption]:
    """Suggested payment amounts: full, half, and rounded up to the next 100"""
    remaining = debt.remaining_amount
    return [
        QuickPayOption(label="full", amount=round_money(remaining)),
        QuickPayOption(label="half", amount=round_money(remaining / 2)),
        QuickPayOption(label="rounded", amount=float(ceil(remaining / 100) * 100)),
    ]
