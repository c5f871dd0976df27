"""Sale totals and pre-submission checks"""

from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence, TypeVar

from bookkeeping_gateway.domain.exceptions import ValidationFailed
from bookkeeping_gateway.domain.formatting import round_money


class PricedLine(Protocol):
    unit_price: float
    quantity: float


class CatalogEntry(Protocol):
    name: str
    category: str


C = TypeVar("C", bound=CatalogEntry)


@dataclass
class SaleTotals:
    subtotal: float
    discount_amount: float
    tax_amount: float
    total: float
    amount_due: float


def line_total(unit_price: float, quantity: float) -> float:
    return round_money(unit_price * quantity)


def sale_subtotal(items: Iterable[PricedLine]) -> float:
    return round_money(sum(line_total(i.unit_price, i.quantity) for i in items))


def sale_totals(
    items: Sequence[PricedLine],
    discount_amount: float = 0.0,
    tax_amount: float = 0.0,
    payment_amount: float = 0.0,
) -> SaleTotals:
    """Subtotal less discount plus tax; amount due is what the payment leaves open"""
    subtotal = sale_subtotal(items)
    total = round_money(subtotal - (discount_amount or 0.0) + (tax_amount or 0.0))
    return SaleTotals(
        subtotal=subtotal,
        discount_amount=round_money(discount_amount or 0.0),
        tax_amount=round_money(tax_amount or 0.0),
        total=total,
        amount_due=round_money(max(0.0, total - (payment_amount or 0.0))),
    )


def validate_sale(
    items: Sequence[PricedLine],
    payment_amount: float,
    discount_amount: float = 0.0,
    tax_amount: float = 0.0,
) -> SaleTotals:
    """
    Reject a sale before it is sent upstream.

    Raises:
        ValidationFailed: no items, or payment above the sale total
    """
    if not items:
        raise ValidationFailed({"items": "Please add at least one item to the sale"})

    totals = sale_totals(items, discount_amount, tax_amount, payment_amount)
    if payment_amount > totals.total:
        raise ValidationFailed({"payment_amount": "Payment amount cannot exceed total amount"})
    return totals


def search_catalog(entries: Iterable[C], query: str) -> List[C]:
    """Name or category substring match, case-insensitive"""
    term = query.strip().lower()
    if not term:
        return list(entries)
    return [e for e in entries if term in e.name.lower() or term in e.category.lower()]
