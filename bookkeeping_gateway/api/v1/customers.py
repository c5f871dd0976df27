"""/v1/customers - customer list, details and maintenance"""

import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from bookkeeping_gateway.api.v1.schemas import (
    CustomerCreateRequest,
    CustomerDetailsResponse,
    CustomerListResponse,
    CustomerUpdateRequest,
    MessageResponse,
)
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client
from bookkeeping_gateway.domain.balances import customer_overview, filter_customers
from bookkeeping_gateway.domain.models import Customer, CustomerDebtSummary
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


@router.get("/customers", response_model=CustomerListResponse)
async def list_customers(
    search: str = Query("", description="Name (case-insensitive) or phone fragment"),
    status: str = Query("ALL", pattern="^(ALL|ACTIVE|INACTIVE)$"),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    customers = filter_customers(await client.list_customers(), search=search, status=status)
    return CustomerListResponse(customers=customers, total=len(customers))


@router.get("/customers/with-debts", response_model=List[CustomerDebtSummary])
async def customers_with_debts(client: BookkeepingClient = Depends(get_bookkeeping_client)):
    """Customers that still owe money, with their unpaid debts"""
    return await client.customers_with_debts()


@router.get("/customers/{customer_id}", response_model=CustomerDetailsResponse)
async def get_customer(customer_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    """
    Customer profile with debts, payments and an overview.

    Debts and payments come from their own endpoints, which carry
    remaining amounts and credit splits the customer payload lacks.
    """
    details, debts, payments = await asyncio.gather(
        client.get_customer(customer_id),
        client.get_customer_debts(customer_id),
        client.get_customer_payments(customer_id),
    )
    return CustomerDetailsResponse(
        customer=details.customer,
        debts=debts,
        payments=payments,
        overview=customer_overview(debts, payments),
    )


@router.post("/customers", response_model=Customer, status_code=201)
async def create_customer(body: CustomerCreateRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.create_customer(body.model_dump(mode="json"))


@router.put("/customers/{customer_id}", response_model=MessageResponse)
async def update_customer(
    customer_id: int,
    body: CustomerUpdateRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    await client.update_customer(customer_id, body.model_dump(mode="json", exclude_none=True))
    return MessageResponse(message="Customer updated")


@router.delete("/customers/{customer_id}", response_model=MessageResponse)
async def delete_customer(customer_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    await client.delete_customer(customer_id)
    return MessageResponse(message="Customer deleted")


@router.get("/customers/{customer_id}/history", response_model=List[Dict[str, Any]])
async def customer_history(customer_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.get_customer_history(customer_id)
