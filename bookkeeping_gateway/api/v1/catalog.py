"""/v1/products and /v1/services - catalog maintenance"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from bookkeeping_gateway.api.v1.schemas import (
    MessageResponse,
    ProductCreateRequest,
    ProductUpdateRequest,
    ServiceCreateRequest,
    ServiceUpdateRequest,
    StockStatus,
    StockUpdateRequest,
)
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client
from bookkeeping_gateway.domain.models import Product, Service
from bookkeeping_gateway.domain.sales import search_catalog
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


# Products


@router.get("/products", response_model=Dict[str, Any])
async def list_products(
    category: Optional[str] = None,
    stock_status: Optional[StockStatus] = None,
    search: Optional[str] = Query(None, description="Free-text search, handled by the API"),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    """Products with the inventory summary (totals, stock counts, inventory value)"""
    return await client.list_products(category=category or None, stock_status=stock_status, search=search or None)


@router.get("/products/alerts/low-stock", response_model=Dict[str, Any])
async def low_stock_alerts(client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.low_stock_alerts()


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.get_product(product_id)


@router.post("/products", response_model=Product, status_code=201)
async def create_product(body: ProductCreateRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.create_product(body.model_dump(mode="json", exclude_none=True))


@router.put("/products/{product_id}", response_model=Product)
async def update_product(
    product_id: int,
    body: ProductUpdateRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.update_product(product_id, body.model_dump(mode="json", exclude_none=True))


@router.post("/products/{product_id}/stock", response_model=Dict[str, Any])
async def update_stock(
    product_id: int,
    body: StockUpdateRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.update_stock(product_id, body.model_dump(mode="json", exclude_none=True))


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    await client.delete_product(product_id)
    return MessageResponse(message="Product deleted")


# Services


@router.get("/services", response_model=Dict[str, Any])
async def list_services(
    category: Optional[str] = None,
    requires_booking: Optional[bool] = None,
    search: str = Query("", description="Name or category fragment"),
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    result = await client.list_services(category=category or None, requires_booking=requires_booking)
    if search.strip():
        result["services"] = search_catalog(result["services"], search)
    return result


@router.get("/services/categories", response_model=List[str])
async def service_categories(client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.service_categories()


@router.get("/services/{service_id}", response_model=Service)
async def get_service(service_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.get_service(service_id)


@router.post("/services", response_model=Service, status_code=201)
async def create_service(body: ServiceCreateRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    return await client.create_service(body.model_dump(mode="json", exclude_none=True))


@router.put("/services/{service_id}", response_model=Service)
async def update_service(
    service_id: int,
    body: ServiceUpdateRequest,
    client: BookkeepingClient = Depends(get_bookkeeping_client),
):
    return await client.update_service(service_id, body.model_dump(mode="json", exclude_none=True))


@router.delete("/services/{service_id}", response_model=MessageResponse)
async def delete_service(service_id: int, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    await client.delete_service(service_id)
    return MessageResponse(message="Service deleted")
