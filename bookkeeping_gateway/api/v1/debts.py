"""/v1/debts - debt listing, creation and settlement"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from bookkeeping_gateway.api.v1.schemas import (
    DebtCreateRequest,
    DebtListResponse,
    DebtUpdateRequest,
    DebtView,
    MessageResponse,
)
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client, get_today
from bookkeeping_gateway.domain.balances import (
    debt_totals,
    filter_debts,
    is_overdue,
    payment_progress,
    quick_pay_options,
)
from bookkeeping_gateway.domain.formatting import format_currency
from bookkeeping_gateway.domain.models import Debt
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


def to_view(debt: Debt, today: date) -> DebtView:
    return DebtView(
        debt=debt,
        overdue=is_overdue(debt, today),
        progress_percent=payment_progress(debt),
        quick_pay=quick_pay_options(debt),
        formatted_remaining=format_currency(debt.remaining_amount),
    )


@router.get("/debts", response_model=DebtListResponse)
async def list_debts(
    search: str = Query("", description="Matches description or customer name"),
    status: str = Query("ALL", pattern="^(ALL|PENDING|PAID|OVERDUE)$"),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
    today: date = Depends(get_today),
):
    """
    Unpaid debts across all customers.

    Totals cover every debt returned by the API; the search and status
    filters only narrow the listed debts.
    """
    debts = await client.list_debts()
    filtered = filter_debts(debts, today, search=search, status=status)
    return DebtListResponse(
        debts=[to_view(d, today) for d in filtered],
        totals=debt_totals(debts, today),
    )


@router.get("/debts/overdue", response_model=List[DebtView])
async def overdue_debts(
    client: BookkeepingClient = Depends(get_bookkeeping_client),
    today: date = Depends(get_today),
):
    return [to_view(d, today) for d in await client.overdue_debts(today)]


@router.get("/debts/analytics", response_model=Dict[str, Any])
async def debt_analytics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    customer_id: Optional[int] = None,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.debt_analytics(start_date, end_date, customer_id)


@router.get("/debts/customer/{customer_id}", response_model=List[DebtView])
async def customer_debts(
    customer_id: int,
    unpaid_only: bool = False,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
    today: date = Depends(get_today),
):
    if unpaid_only:
        debts = await client.get_customer_unpaid_debts(customer_id)
    else:
        debts = await client.get_customer_debts(customer_id)
    return [to_view(d, today) for d in debts]


@router.post("/debts", response_model=Debt, status_code=201)
async def add_debt(body: DebtCreateRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.add_debt(body.model_dump(mode="json"))


@router.put("/debts/{debt_id}", response_model=MessageResponse)
async def update_debt(
    debt_id: int,
    body: DebtUpdateRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    await client.update_debt(debt_id, body.model_dump(mode="json", exclude_none=True))
    return MessageResponse(message="Debt updated")


@router.put("/debts/{debt_id}/mark-paid", response_model=MessageResponse)
async def mark_debt_paid(debt_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    await client.mark_debt_paid(debt_id)
    return MessageResponse(message="Debt marked as paid")


@router.delete("/debts/{debt_id}", response_model=MessageResponse)
async def delete_debt(debt_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    await client.delete_debt(debt_id)
    return MessageResponse(message="Debt deleted")
