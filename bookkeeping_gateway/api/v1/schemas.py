"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from bookkeeping_gateway.domain.balances import CustomerOverview, DebtTotals, QuickPayOption
from bookkeeping_gateway.domain.credit import CreditApplicationPreview, DebtPreview, PaymentPreview
from bookkeeping_gateway.domain.dashboard import DashboardView
from bookkeeping_gateway.domain.models import Customer, Debt, Payment
from bookkeeping_gateway.domain.sales import SaleTotals

CustomerStatus = Literal["ACTIVE", "INACTIVE"]
PaymentMethod = Literal["CASH", "MOBILE_MONEY"]
SalePaymentMethod = Literal["CASH", "MPESA", "BANK_TRANSFER", "CARD"]
SaleType = Literal["CASH", "CREDIT", "PARTIAL_PAYMENT"]
ItemType = Literal["PRODUCT", "SERVICE"]
StockStatus = Literal["IN_STOCK", "LOW_STOCK", "OUT_OF_STOCK"]


class RequestModel(BaseModel):
    """Base for request bodies: surrounding whitespace never counts as input"""

    model_config = ConfigDict(str_strip_whitespace=True)


# Auth


class LoginRequest(RequestModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(RequestModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# Customers


class CustomerCreateRequest(RequestModel):
    name: str = Field(..., min_length=1, description="Customer name")
    phone: str = Field(..., min_length=1, description="Phone number")
    status: CustomerStatus = "ACTIVE"


class CustomerUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    status: Optional[CustomerStatus] = None


class CustomerListResponse(BaseModel):
    customers: List[Customer]
    total: int


class CustomerDetailsResponse(BaseModel):
    customer: Customer
    debts: List[Debt]
    payments: List[Payment]
    overview: CustomerOverview


# Debts


class DebtCreateRequest(RequestModel):
    customer_id: int = Field(..., gt=0, description="Customer the debt belongs to")
    amount: float = Field(..., gt=0, description="Amount owed")
    description: str = Field(..., min_length=1)
    due_date: date


class DebtUpdateRequest(RequestModel):
    amount: Optional[float] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1)
    due_date: Optional[date] = None


class DebtView(BaseModel):
    """A debt with its display helpers"""

    debt: Debt
    overdue: bool
    progress_percent: int
    quick_pay: List[QuickPayOption]
    formatted_remaining: str


class DebtListResponse(BaseModel):
    debts: List[DebtView]
    totals: DebtTotals


# Payments


class PaymentCreateRequest(RequestModel):
    customer_id: int = Field(..., gt=0)
    debt_id: Optional[int] = Field(None, gt=0, description="Omit for a general payment")
    amount: float = Field(..., gt=0, description="Overpayment is allowed and becomes credit")
    method: PaymentMethod = "CASH"
    description: Optional[str] = None


class PaymentUpdateRequest(RequestModel):
    amount: Optional[float] = Field(None, gt=0)
    method: Optional[PaymentMethod] = None
    description: Optional[str] = None


class ApplyCreditRequest(RequestModel):
    credit_amount: Optional[float] = Field(None, gt=0, description="Apply at most this much; default all credit")


# Previews


class DebtPreviewRequest(RequestModel):
    amount: float = Field(..., gt=0)
    credit_balance: Optional[float] = Field(None, ge=0, description="Looked up from customer_id when omitted")
    customer_id: Optional[int] = Field(None, gt=0)


class PaymentPreviewRequest(RequestModel):
    amount: float = Field(..., gt=0)
    outstanding_debt: Optional[float] = Field(None, ge=0)
    credit_balance: Optional[float] = Field(None, ge=0)
    customer_id: Optional[int] = Field(None, gt=0)


class PreviewDebt(RequestModel):
    id: int
    amount: float = Field(..., ge=0)
    remaining_amount: Optional[float] = Field(None, ge=0)
    description: str = ""
    due_date: Optional[date] = None


class CreditApplicationPreviewRequest(RequestModel):
    customer_id: int = Field(..., gt=0)
    credit_amount: Optional[float] = Field(None, gt=0)
    credit_balance: Optional[float] = Field(None, ge=0)
    debts: Optional[List[PreviewDebt]] = Field(None, description="Fetched from the API when omitted")


class DebtPreviewResponse(BaseModel):
    preview: DebtPreview
    formatted: Dict[str, str]


class PaymentPreviewResponse(BaseModel):
    preview: PaymentPreview
    is_overpayment: bool
    formatted: Dict[str, str]


class CreditApplicationPreviewResponse(BaseModel):
    preview: CreditApplicationPreview
    formatted: Dict[str, str]


# Catalog


class ProductCreateRequest(RequestModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    selling_price: float = Field(..., ge=0)
    cost_price: float = Field(..., ge=0)
    sku: Optional[str] = None
    unit: str = Field(..., min_length=1)
    track_inventory: bool = True
    initial_stock: Optional[float] = Field(None, ge=0)
    reorder_level: Optional[float] = Field(None, ge=0)


class ProductUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    selling_price: Optional[float] = Field(None, ge=0)
    cost_price: Optional[float] = Field(None, ge=0)
    sku: Optional[str] = None
    unit: Optional[str] = Field(None, min_length=1)
    track_inventory: Optional[bool] = None
    reorder_level: Optional[float] = Field(None, ge=0)


class StockUpdateRequest(RequestModel):
    new_stock: float = Field(..., ge=0)
    reason: str = Field(..., min_length=1)
    notes: Optional[str] = None


class MaterialRequest(RequestModel):
    product_id: int = Field(..., gt=0)
    quantity: float = Field(..., gt=0)


class ServiceCreateRequest(RequestModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    cost_estimate: float = Field(..., ge=0)
    duration: int = Field(..., gt=0, description="Minutes")
    requires_booking: bool = False
    requires_materials: bool = False
    materials: Optional[List[MaterialRequest]] = None


class ServiceUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    cost_estimate: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0)
    requires_booking: Optional[bool] = None
    requires_materials: Optional[bool] = None
    status: Optional[Literal["active", "inactive"]] = None


# Sales


class SaleItemRequest(RequestModel):
    type: ItemType
    product_id: Optional[int] = Field(None, gt=0)
    service_id: Optional[int] = Field(None, gt=0)
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    scheduled_for: Optional[str] = None


class SaleCreateRequest(RequestModel):
    customer_id: Optional[int] = Field(None, gt=0, description="Omit for a walk-in customer")
    items: List[SaleItemRequest]
    sale_type: SaleType = "CASH"
    discount_amount: float = Field(0.0, ge=0)
    tax_amount: float = Field(0.0, ge=0)
    payment_amount: float = Field(0.0, ge=0)
    payment_method: SalePaymentMethod = "CASH"
    notes: Optional[str] = None


class SalePaymentRequest(RequestModel):
    payment_amount: float = Field(..., gt=0)
    payment_method: SalePaymentMethod = "CASH"
    notes: Optional[str] = None


class SalePreviewResponse(BaseModel):
    totals: SaleTotals
    formatted: Dict[str, str]


# Dashboard


class DashboardResponse(BaseModel):
    dashboard: DashboardView
    formatted_outstanding: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None
