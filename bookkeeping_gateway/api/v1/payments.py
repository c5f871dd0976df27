"""/v1/payments - recording payments and applying credit"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from bookkeeping_gateway.api.v1.schemas import (
    ApplyCreditRequest,
    MessageResponse,
    PaymentCreateRequest,
    PaymentUpdateRequest,
)
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client
from bookkeeping_gateway.domain.models import CreditApplication, Payment, PaymentReceipt
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


@router.post("/payments", response_model=PaymentReceipt, status_code=201)
async def record_payment(body: PaymentCreateRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    """
    Record a payment, optionally against one debt.

    Paying more than is owed is allowed; the API turns the surplus into
    credit and reports the split in the receipt summary.
    """
    payload = body.model_dump(mode="json", exclude_none=True)
    if not payload.get("description") and body.debt_id is None:
        payload["description"] = "General payment"
    return await client.record_payment(payload)


@router.post("/payments/apply-credit/{customer_id}", response_model=CreditApplication)
async def apply_credit(
    customer_id: int,
    body: Optional[ApplyCreditRequest] = None,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    credit_amount = body.credit_amount if body else None
    return await client.apply_credit(customer_id, credit_amount)


@router.get("/payments/analytics", response_model=Dict[str, Any])
async def payment_analytics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    customer_id: Optional[int] = None,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.payment_analytics(start_date, end_date, customer_id)


@router.get("/payments/customer/{customer_id}", response_model=List[Payment])
async def customer_payments(customer_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.get_customer_payments(customer_id)


@router.get("/payments/{payment_id}", response_model=Payment)
async def get_payment(payment_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.get_payment(payment_id)


@router.put("/payments/{payment_id}", response_model=MessageResponse)
async def update_payment(
    payment_id: int,
    body: PaymentUpdateRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    await client.update_payment(payment_id, body.model_dump(mode="json", exclude_none=True))
    return MessageResponse(message="Payment updated")


@router.delete("/payments/{payment_id}", response_model=MessageResponse)
async def delete_payment(payment_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    await client.delete_payment(payment_id)
    return MessageResponse(message="Payment deleted")
