"""POST /v1/previews/* - credit/debt reconciliation previews shown before submission"""

from fastapi import APIRouter, Depends, Request

from bookkeeping_gateway.api.v1.schemas import (
    CreditApplicationPreviewRequest,
    CreditApplicationPreviewResponse,
    DebtPreviewRequest,
    DebtPreviewResponse,
    PaymentPreviewRequest,
    PaymentPreviewResponse,
    SaleCreateRequest,
    SalePreviewResponse,
)
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client, get_request_id
from bookkeeping_gateway.domain.credit import preview_credit_application, preview_new_debt, preview_payment
from bookkeeping_gateway.domain.exceptions import ValidationFailed
from bookkeeping_gateway.domain.formatting import format_currency
from bookkeeping_gateway.domain.models import CustomerBalance, Debt
from bookkeeping_gateway.domain.sales import sale_totals
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient
from bookkeeping_gateway.infrastructure.observability.logging import log_preview
from bookkeeping_gateway.infrastructure.observability.metrics import record_preview

router = APIRouter()


async def _customer_balance(client: BookkeepingClient, customer_id: int | None, field: str) -> CustomerBalance:
    if customer_id is None:
        raise ValidationFailed({field: f"Provide {field} or customer_id"})
    details = await client.get_customer(customer_id)
    return details.customer.balance


def _formatted(figures: dict) -> dict:
    return {name: format_currency(value) for name, value in figures.items()}


@router.post("/previews/debt", response_model=DebtPreviewResponse)
async def preview_debt(
    body: DebtPreviewRequest,
    request: Request,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    """
    How much of a new debt the customer's credit will absorb.

    The credit balance is taken from the body or, when omitted, from the
    customer's current balance.
    """
    credit_balance = body.credit_balance
    if credit_balance is None:
        credit_balance = (await _customer_balance(client, body.customer_id, "credit_balance")).credit_balance

    preview = preview_new_debt(body.amount, credit_balance)

    record_preview("debt")
    log_preview(
        get_request_id(request),
        "debt",
        credit_applied=preview.credit_applied,
        final_amount=preview.final_amount,
    )
    return DebtPreviewResponse(
        preview=preview,
        formatted=_formatted(
            {
                "credit_applied": preview.credit_applied,
                "final_amount": preview.final_amount,
                "remaining_credit": preview.remaining_credit,
            }
        ),
    )


@router.post("/previews/payment", response_model=PaymentPreviewResponse)
async def preview_payment_split(
    body: PaymentPreviewRequest,
    request: Request,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    """How a payment splits between outstanding debt and new credit"""
    outstanding_debt = body.outstanding_debt
    credit_balance = body.credit_balance
    if outstanding_debt is None or credit_balance is None:
        balance = await _customer_balance(client, body.customer_id, "outstanding_debt")
        if outstanding_debt is None:
            outstanding_debt = balance.total_debt
        if credit_balance is None:
            credit_balance = balance.credit_balance

    preview = preview_payment(body.amount, outstanding_debt, credit_balance)

    record_preview("payment")
    log_preview(
        get_request_id(request),
        "payment",
        applied_to_debt=preview.applied_to_debt,
        credit_added=preview.credit_added,
    )
    return PaymentPreviewResponse(
        preview=preview,
        is_overpayment=preview.is_overpayment,
        formatted=_formatted(
            {
                "applied_to_debt": preview.applied_to_debt,
                "credit_added": preview.credit_added,
                "remaining_debt": preview.remaining_debt,
                "new_credit_balance": preview.new_credit_balance,
            }
        ),
    )


@router.post("/previews/credit-application", response_model=CreditApplicationPreviewResponse)
async def preview_credit(
    body: CreditApplicationPreviewRequest,
    request: Request,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    """
    Which debts applying the customer's credit would settle.

    Unpaid debts and the credit balance are fetched when the body does
    not supply them.
    """
    credit_balance = body.credit_balance
    if credit_balance is None:
        credit_balance = (await _customer_balance(client, body.customer_id, "credit_balance")).credit_balance

    if body.debts is None:
        debts = await client.get_customer_unpaid_debts(body.customer_id)
    else:
        debts = [
            Debt(
                id=d.id,
                customer_id=body.customer_id,
                amount=d.amount,
                remaining_amount=d.remaining_amount if d.remaining_amount is not None else d.amount,
                description=d.description,
                status="PENDING",
                due_date=d.due_date,
                created_at=None,
            )
            for d in body.debts
        ]

    preview = preview_credit_application(credit_balance, debts, body.credit_amount)

    record_preview("credit_application")
    log_preview(
        get_request_id(request),
        "credit_application",
        credit_applied=preview.credit_applied,
        remaining_debt=preview.remaining_debt,
    )
    return CreditApplicationPreviewResponse(
        preview=preview,
        formatted=_formatted(
            {
                "credit_applied": preview.credit_applied,
                "new_credit_balance": preview.new_credit_balance,
                "remaining_debt": preview.remaining_debt,
            }
        ),
    )


@router.post("/previews/sale", response_model=SalePreviewResponse)
def preview_sale(body: SaleCreateRequest, request: Request):
    """Sale subtotal, total and amount still due for the basket as entered"""
    totals = sale_totals(body.items, body.discount_amount, body.tax_amount, body.payment_amount)

    record_preview("sale")
    log_preview(get_request_id(request), "sale", total=totals.total, amount_due=totals.amount_due)
    return SalePreviewResponse(
        totals=totals,
        formatted=_formatted({"subtotal": totals.subtotal, "total": totals.total, "amount_due": totals.amount_due}),
    )
