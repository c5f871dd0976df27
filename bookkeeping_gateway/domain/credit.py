"""Credit/debt reconciliation previews - client-side arithmetic shown before submission.

Nothing here is authoritative: the bookkeeping API owns the real ledger and
may settle differently. Results are never persisted.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from bookkeeping_gateway.domain.formatting import clamp_non_negative, round_money
from bookkeeping_gateway.domain.models import Debt, DebtSettlement


@dataclass
class DebtPreview:
    """How a new debt is offset by existing credit"""

    amount: float
    credit_balance: float
    credit_applied: float
    final_amount: float
    remaining_credit: float


@dataclass
class PaymentPreview:
    """How a payment splits between outstanding debt and new credit"""

    amount: float
    outstanding_debt: float
    previous_credit: float
    applied_to_debt: float
    credit_added: float
    remaining_debt: float
    new_credit_balance: float

    @property
    def is_overpayment(self) -> bool:
        return self.credit_added > 0


@dataclass
class CreditApplicationPreview:
    """Credit balance applied across a customer's unpaid debts"""

    credit_applied: float
    previous_credit_balance: float
    new_credit_balance: float
    remaining_debt: float
    debts_paid: List[DebtSettlement] = field(default_factory=list)


def max_applicable_credit(remaining_due: float, credit_balance: float) -> float:
    """
    Maximum credit that can be applied right now:
      = min(remaining_due >= 0, credit_balance >= 0)
    """
    return round_money(min(clamp_non_negative(remaining_due), clamp_non_negative(credit_balance)))


def preview_new_debt(amount: float, credit_balance: float) -> DebtPreview:
    """
    Preview a new debt against the customer's credit balance.

    Formulas:
    - credit_applied   = min(amount, credit_balance)
    - final_amount     = max(0, amount - credit_balance)
    - remaining_credit = max(0, credit_balance - amount)

    Example:
        amount 1500, credit 400 -> 400 applied, 1100 still owed, 0 credit left
    """
    amount = clamp_non_negative(amount)
    credit_balance = clamp_non_negative(credit_balance)

    return DebtPreview(
        amount=round_money(amount),
        credit_balance=round_money(credit_balance),
        credit_applied=max_applicable_credit(amount, credit_balance),
        final_amount=round_money(max(0.0, amount - credit_balance)),
        remaining_credit=round_money(max(0.0, credit_balance - amount)),
    )


def preview_payment(amount: float, outstanding_debt: float, credit_balance: float = 0.0) -> PaymentPreview:
    """
    Preview a payment against outstanding debt.

    Overpayment is allowed: whatever exceeds the outstanding debt is added
    to the customer's credit balance.

    Formulas:
    - applied_to_debt    = min(amount, outstanding_debt)
    - credit_added       = max(0, amount - outstanding_debt)
    - remaining_debt     = max(0, outstanding_debt - amount)
    - new_credit_balance = credit_balance + credit_added
    """
    amount = clamp_non_negative(amount)
    outstanding_debt = clamp_non_negative(outstanding_debt)
    credit_balance = clamp_non_negative(credit_balance)

    credit_added = max(0.0, amount - outstanding_debt)

    return PaymentPreview(
        amount=round_money(amount),
        outstanding_debt=round_money(outstanding_debt),
        previous_credit=round_money(credit_balance),
        applied_to_debt=round_money(min(amount, outstanding_debt)),
        credit_added=round_money(credit_added),
        remaining_debt=round_money(max(0.0, outstanding_debt - amount)),
        new_credit_balance=round_money(credit_balance + credit_added),
    )


def _settlement_order(debt: Debt) -> tuple:
    # Debts without a due date go last
    return (debt.due_date is None, debt.due_date or date.max, debt.id)


def preview_credit_application(
    credit_balance: float,
    unpaid_debts: Iterable[Debt],
    credit_amount: Optional[float] = None,
) -> CreditApplicationPreview:
    """
    Preview applying credit to unpaid debts, oldest due date first.

    Requirements:
    - Usable credit is min(credit_amount, credit_balance); all of it when
      credit_amount is not given
    - Paid debts and debts with nothing remaining are skipped
    - A debt only partly covered is reported with partial=True and ends
      the run
    """
    credit_balance = clamp_non_negative(credit_balance)
    usable = credit_balance if credit_amount is None else min(clamp_non_negative(credit_amount), credit_balance)

    open_debts = sorted(
        (d for d in unpaid_debts if not d.is_paid and d.remaining_amount > 0),
        key=_settlement_order,
    )

    available = usable
    settlements: List[DebtSettlement] = []
    for debt in open_debts:
        if available <= 0:
            break
        settled = min(available, debt.remaining_amount)
        available -= settled
        settlements.append(
            DebtSettlement(
                debt_id=debt.id,
                amount=round_money(settled),
                description=debt.description,
                partial=settled < debt.remaining_amount,
            )
        )

    applied = usable - available
    total_debt = sum(d.remaining_amount for d in open_debts)

    return CreditApplicationPreview(
        credit_applied=round_money(applied),
        previous_credit_balance=round_money(credit_balance),
        new_credit_balance=round_money(credit_balance - applied),
        remaining_debt=round_money(max(0.0, total_debt - applied)),
        debts_paid=settlements,
    )
