"""/v1/sales - sales, partial payments and sales analytics"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from bookkeeping_gateway.api.v1.schemas import SaleCreateRequest, SalePaymentRequest
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client
from bookkeeping_gateway.domain.models import Sale
from bookkeeping_gateway.domain.sales import validate_sale
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


def _iso(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day else None


@router.post("/sales", response_model=Dict[str, Any], status_code=201)
async def create_sale(body: SaleCreateRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    """
    Create a sale after checking the basket.

    Rejected with 422 when there are no items or the payment exceeds the
    sale total.
    """
    validate_sale(body.items, body.payment_amount, body.discount_amount, body.tax_amount)
    return await client.create_sale(body.model_dump(mode="json", exclude_none=True))


@router.get("/sales", response_model=Dict[str, Any])
async def list_sales(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    customer_id: Optional[int] = None,
    status: Optional[str] = None,
    payment_method: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.list_sales(
        start_date=_iso(start_date),
        end_date=_iso(end_date),
        customer_id=customer_id,
        status=status,
        payment_method=payment_method,
        page=page,
        limit=limit,
    )


@router.get("/sales/analytics/daily", response_model=Dict[str, Any])
async def daily_summary(
    day: Optional[date] = Query(None, alias="date"),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.daily_sales_summary(day)


@router.get("/sales/analytics/overview", response_model=Dict[str, Any])
async def sales_analytics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_by: Optional[Literal["hour", "day", "week", "month", "year"]] = None,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.sales_analytics(start_date=_iso(start_date), end_date=_iso(end_date), group_by=group_by)


@router.get("/sales/analytics/profit-loss", response_model=Dict[str, Any])
async def profit_loss(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_by: Optional[Literal["day", "week", "month", "year"]] = None,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.profit_loss(start_date=_iso(start_date), end_date=_iso(end_date), group_by=group_by)


@router.get("/sales/analytics/top-products", response_model=List[Dict[str, Any]])
async def top_products(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = Query(None, ge=1),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.top_products(start_date=_iso(start_date), end_date=_iso(end_date), limit=limit)


@router.get("/sales/{sale_id}", response_model=Sale)
async def get_sale(sale_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.get_sale(sale_id)


@router.post("/sales/{sale_id}/payment", response_model=Dict[str, Any])
async def add_sale_payment(
    sale_id: int,
    body: SalePaymentRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    """Additional payment toward a partially paid sale"""
    return await client.add_sale_payment(sale_id, body.model_dump(mode="json", exclude_none=True))
