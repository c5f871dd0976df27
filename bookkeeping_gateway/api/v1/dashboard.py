"""GET /v1/dashboard - dashboard home and sales dashboard"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from bookkeeping_gateway.api.v1.schemas import DashboardResponse
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client, get_request_id, get_today
from bookkeeping_gateway.config import settings
from bookkeeping_gateway.domain.balances import is_overdue
from bookkeeping_gateway.domain.dashboard import build_dashboard
from bookkeeping_gateway.domain.exceptions import BookkeepingAPIError
from bookkeeping_gateway.domain.formatting import format_currency
from bookkeeping_gateway.domain.models import Customer, Payment
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


async def _sample_payments(client: BookkeepingClient, customers: List[Customer], request_id: str) -> List[Payment]:
    """
    Payments of the first few customers, standing in for a recent-activity feed.

    A customer whose payments cannot be loaded contributes none; the
    dashboard still renders.
    """
    sampled = customers[: settings.recent_payments_customers]
    results = await asyncio.gather(
        *(client.get_customer_payments(c.id) for c in sampled),
        return_exceptions=True,
    )

    payments: List[Payment] = []
    for customer, result in zip(sampled, results):
        if isinstance(result, BookkeepingAPIError):
            logging.warning(
                f"Could not fetch payments for customer {customer.id}: {result}",
                extra={"request_id": request_id},
            )
            continue
        if isinstance(result, BaseException):
            raise result
        payments.extend(result)
    return payments


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    request: Request,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
    today: date = Depends(get_today),
):
    """
    Dashboard home: customer and debt counts, outstanding debt, overdue
    debts, recent payments and how many of them were made today.
    """
    request_id = get_request_id(request)

    customers, customers_with_debts = await asyncio.gather(
        client.list_customers(),
        client.customers_with_debts(),
    )
    overdue = [
        debt
        for summary in customers_with_debts
        for debt in summary.unpaid_debts
        if is_overdue(debt, today)
    ]
    payments = await _sample_payments(client, customers, request_id)

    view = build_dashboard(
        customers,
        customers_with_debts,
        overdue,
        payments,
        today,
        limit=settings.dashboard_list_limit,
    )
    return DashboardResponse(
        dashboard=view,
        formatted_outstanding=format_currency(view.stats.total_outstanding_debt),
    )


@router.get("/dashboard/sales", response_model=Dict[str, Any])
async def sales_dashboard(client: BookkeepingClient = Depends(get_bookkeeping_client)):
    """Today's sales, this month, quick stats, recent sales and stock alerts"""
    return await client.sales_dashboard()
