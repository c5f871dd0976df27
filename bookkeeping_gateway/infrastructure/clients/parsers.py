"""Reshape upstream JSON payloads into domain models.

The API is not consistent about which fields it sends, so every optional
field falls back to a default here rather than in the callers.
"""

from dataclasses import fields
from typing import Any, Dict, List, Optional, Type, TypeVar

from bookkeeping_gateway.domain.balances import resolve_balance, summarize_customer_debts
from bookkeeping_gateway.domain.models import (
    AuthResult,
    CreditApplication,
    Customer,
    CustomerBalance,
    CustomerDebtSummary,
    CustomerDetails,
    Debt,
    DebtSettlement,
    Payment,
    PaymentReceipt,
    PaymentSummary,
    Product,
    RecordedPayment,
    Sale,
    SaleItem,
    Service,
    ServiceMaterial,
    User,
)
from bookkeeping_gateway.utils.casing import snake_keys
from bookkeeping_gateway.utils.date_utils import parse_date, parse_datetime

T = TypeVar("T")


def _build(cls: Type[T], data: Dict[str, Any], **overrides: Any) -> T:
    """Instantiate a flat dataclass from snake_cased data, ignoring unknown keys"""
    known = {f.name for f in fields(cls)}
    values = {k: v for k, v in data.items() if k in known and v is not None}
    values.update(overrides)
    return cls(**values)


def _money(value: Any) -> float:
    return float(value) if value is not None else 0.0


def parse_list(value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return value


def parse_user(raw: Optional[Dict[str, Any]]) -> Optional[User]:
    if not raw:
        return None
    return User(id=raw["id"], name=raw.get("name", ""), email=raw.get("email", ""))


def parse_auth(raw: Dict[str, Any]) -> AuthResult:
    return AuthResult(
        success=bool(raw.get("success", False)),
        message=raw.get("message", ""),
        token=raw.get("token"),
        user=parse_user(raw.get("user")),
    )


def parse_balance(raw: Optional[Dict[str, Any]]) -> Optional[CustomerBalance]:
    if not raw:
        return None
    data = snake_keys(raw)
    return CustomerBalance(
        total_debt=_money(data.get("total_debt")),
        credit_balance=_money(data.get("credit_balance")),
        net_balance=_money(data.get("net_balance")),
        status=data.get("status", "BALANCED"),
    )


def parse_customer(raw: Dict[str, Any]) -> Customer:
    """Customer with totals defaulted to 0 and a balance always present"""
    data = snake_keys(raw)
    total_debt = _money(data.get("total_debt"))
    credit_balance = _money(data.get("credit_balance"))
    return Customer(
        id=data["id"],
        name=data.get("name", ""),
        phone=data.get("phone", ""),
        status=data.get("status", "ACTIVE"),
        created_at=parse_datetime(data.get("created_at")),
        last_payment_date=parse_datetime(data.get("last_payment_date")),
        total_debt=total_debt,
        credit_balance=credit_balance,
        balance=resolve_balance(total_debt, credit_balance, parse_balance(raw.get("balance"))),
    )


def parse_debt(raw: Dict[str, Any]) -> Debt:
    data = snake_keys(raw)
    amount = _money(data.get("amount"))
    status = data.get("status", "PENDING")
    is_paid = data.get("is_paid")
    remaining = data.get("remaining_amount")
    return Debt(
        id=data["id"],
        customer_id=data.get("customer_id"),
        customer_name=data.get("customer_name"),
        amount=amount,
        remaining_amount=_money(remaining) if remaining is not None else amount,
        description=data.get("description", ""),
        status=status,
        due_date=parse_date(data.get("due_date")),
        created_at=parse_datetime(data.get("created_at")),
        is_paid=bool(is_paid) if is_paid is not None else status == "PAID",
    )


def parse_payment(raw: Dict[str, Any]) -> Payment:
    data = snake_keys(raw)
    return Payment(
        id=data["id"],
        customer_id=data.get("customer_id"),
        debt_id=data.get("debt_id") or None,
        customer_name=data.get("customer_name"),
        amount=_money(data.get("amount")),
        applied_to_debt=data.get("applied_to_debt"),
        credit_amount=data.get("credit_amount"),
        method=data.get("method") or data.get("payment_method") or "CASH",
        description=data.get("description") or "",
        created_at=parse_datetime(data.get("created_at")),
    )


def parse_customer_details(raw: Dict[str, Any]) -> CustomerDetails:
    return CustomerDetails(
        customer=parse_customer(raw),
        debts=[parse_debt(d) for d in raw.get("debts", [])],
        payments=[parse_payment(p) for p in raw.get("payments", [])],
    )


def parse_customers_with_debts(raw_customers: List[Dict[str, Any]]) -> List[CustomerDebtSummary]:
    """Customers that still owe something, each with only their unpaid debts"""
    summaries = [
        summarize_customer_debts(
            customer_id=c["id"],
            name=c.get("name", ""),
            phone=c.get("phone", ""),
            debts=[parse_debt(d) for d in c.get("debts", [])],
        )
        for c in raw_customers
    ]
    return [s for s in summaries if s.unpaid_debts]


def parse_payment_receipt(raw: Dict[str, Any]) -> PaymentReceipt:
    data = snake_keys(raw)
    payment = data.get("payment", {})
    summary = data.get("summary", {})
    return PaymentReceipt(
        success=bool(data.get("success", True)),
        message=data.get("message", ""),
        payment=RecordedPayment(
            id=payment["id"],
            amount=_money(payment.get("amount")),
            applied_to_debt=_money(payment.get("applied_to_debt")),
            credit_amount=_money(payment.get("credit_amount")),
            payment_method=payment.get("payment_method") or payment.get("method") or "CASH",
        ),
        summary=PaymentSummary(
            total_paid=_money(summary.get("total_paid")),
            applied_to_debt=_money(summary.get("applied_to_debt")),
            credit_added=_money(summary.get("credit_added")),
            previous_credit=_money(summary.get("previous_credit")),
            new_credit_balance=_money(summary.get("new_credit_balance")),
            remaining_debt=_money(summary.get("remaining_debt")),
        ),
    )


def parse_credit_application(raw: Dict[str, Any]) -> CreditApplication:
    data = snake_keys(raw)
    summary = data.get("summary", {})
    return CreditApplication(
        success=bool(data.get("success", True)),
        message=data.get("message", ""),
        credit_applied=_money(summary.get("credit_applied")),
        previous_credit_balance=_money(summary.get("previous_credit_balance")),
        new_credit_balance=_money(summary.get("new_credit_balance")),
        remaining_debt=_money(summary.get("remaining_debt")),
        debts_paid=[
            DebtSettlement(
                debt_id=d["debt_id"],
                amount=_money(d.get("amount")),
                description=d.get("description", ""),
                partial=bool(d.get("partial", False)),
            )
            for d in summary.get("debts_paid", [])
        ],
    )


def parse_product(raw: Dict[str, Any]) -> Product:
    return _build(Product, snake_keys(raw))


def parse_service(raw: Dict[str, Any]) -> Service:
    data = snake_keys(raw)
    materials = [_build(ServiceMaterial, m) for m in data.get("materials") or []]
    return _build(Service, data, materials=materials)


def parse_sale(raw: Dict[str, Any]) -> Sale:
    data = snake_keys(raw)
    items = [_build(SaleItem, i) for i in data.get("items") or []]
    return _build(Sale, data, items=items)


def parse_sale_payment(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Payment added to a sale, the updated sale when sent, and what is still owed"""
    sale = raw.get("sale")
    return {
        "payment": snake_keys(raw.get("payment", {})),
        "sale": parse_sale(sale) if sale else None,
        "remaining_balance": _money(raw.get("remainingBalance")),
    }
