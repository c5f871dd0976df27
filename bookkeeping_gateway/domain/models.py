"""Domain models - pure Python dataclasses representing bookkeeping entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass
class User:
    """Authenticated dashboard user"""

    id: int
    name: str
    email: str


@dataclass
class AuthResult:
    """Outcome of a login or registration"""

    success: bool
    message: str
    token: Optional[str] = None
    user: Optional[User] = None


@dataclass
class CustomerBalance:
    """Debt vs credit position of a customer"""

    total_debt: float
    credit_balance: float
    net_balance: float
    status: str  # "DEBT" | "CREDIT" | "BALANCED"


@dataclass
class Customer:
    id: int
    name: str
    phone: str
    status: str  # "ACTIVE" | "INACTIVE"
    created_at: Optional[datetime]
    balance: CustomerBalance
    total_debt: float = 0.0
    credit_balance: float = 0.0
    last_payment_date: Optional[datetime] = None


@dataclass
class Debt:
    """Money owed by a customer"""

    id: int
    customer_id: Optional[int]
    amount: float
    remaining_amount: float
    description: str
    status: str  # "PENDING" | "PAID" | "OVERDUE"
    due_date: Optional[date]
    created_at: Optional[datetime]
    is_paid: bool = False
    customer_name: Optional[str] = None


@dataclass
class Payment:
    """Money received from a customer"""

    id: int
    customer_id: Optional[int]
    amount: float
    method: str  # "CASH" | "MOBILE_MONEY"
    description: str
    created_at: Optional[datetime]
    debt_id: Optional[int] = None
    customer_name: Optional[str] = None
    applied_to_debt: Optional[float] = None
    credit_amount: Optional[float] = None


@dataclass
class CustomerDetails:
    """Customer together with its debts and payments"""

    customer: Customer
    debts: List[Debt] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)


@dataclass
class CustomerDebtSummary:
    """Customer with the unpaid debts still owed"""

    id: int
    name: str
    phone: str
    total_debt: float
    unpaid_debts: List[Debt] = field(default_factory=list)


@dataclass
class RecordedPayment:
    id: int
    amount: float
    applied_to_debt: float
    credit_amount: float
    payment_method: str


@dataclass
class PaymentSummary:
    total_paid: float
    applied_to_debt: float
    credit_added: float
    previous_credit: float
    new_credit_balance: float
    remaining_debt: float


@dataclass
class PaymentReceipt:
    """Upstream confirmation of a recorded payment"""

    success: bool
    message: str
    payment: RecordedPayment
    summary: PaymentSummary


@dataclass
class DebtSettlement:
    """A debt (fully or partially) settled out of credit"""

    debt_id: int
    amount: float
    description: str
    partial: bool


@dataclass
class CreditApplication:
    """Upstream confirmation of credit applied to debts"""

    success: bool
    message: str
    credit_applied: float
    previous_credit_balance: float
    new_credit_balance: float
    remaining_debt: float
    debts_paid: List[DebtSettlement] = field(default_factory=list)


@dataclass
class Product:
    id: int
    name: str
    category: str
    selling_price: float
    cost_price: float
    unit: str
    track_inventory: bool = True
    current_stock: float = 0
    reorder_level: float = 0
    stock_status: str = "IN_STOCK"  # "IN_STOCK" | "LOW_STOCK" | "OUT_OF_STOCK"
    profit_margin: float = 0.0
    description: Optional[str] = None
    sku: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class ServiceMaterial:
    product_id: int
    quantity: float
    product_name: Optional[str] = None


@dataclass
class Service:
    id: int
    name: str
    category: str
    price: float
    cost_estimate: float
    duration: int  # minutes
    requires_booking: bool = False
    requires_materials: bool = False
    profit_margin: float = 0.0
    status: Optional[str] = None
    description: Optional[str] = None
    materials: List[ServiceMaterial] = field(default_factory=list)
    created_at: Optional[str] = None


@dataclass
class SaleItem:
    type: str  # "PRODUCT" | "SERVICE"
    name: str
    quantity: float
    unit_price: float
    total_amount: float
    profit: float = 0.0
    id: Optional[int] = None
    product_id: Optional[int] = None
    service_id: Optional[int] = None
    scheduled_for: Optional[str] = None


@dataclass
class Sale:
    id: int
    sale_number: str
    sale_type: str  # "CASH" | "CREDIT" | "PARTIAL_PAYMENT"
    status: str
    subtotal: float
    total_amount: float
    paid_amount: float
    amount_due: float
    payment_method: str
    items: List[SaleItem] = field(default_factory=list)
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    total_profit: float = 0.0
    profit_margin: float = 0.0
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
