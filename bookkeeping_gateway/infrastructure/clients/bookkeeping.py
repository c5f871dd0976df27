"""Bookkeeping API HTTP client - one coroutine per upstream endpoint"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx

from bookkeeping_gateway.config import settings
from bookkeeping_gateway.domain.balances import is_overdue
from bookkeeping_gateway.domain.exceptions import BookkeepingAPIError
from bookkeeping_gateway.domain.models import (
    AuthResult,
    CreditApplication,
    Customer,
    CustomerDebtSummary,
    CustomerDetails,
    Debt,
    Payment,
    PaymentReceipt,
    Product,
    Sale,
    Service,
)
from bookkeeping_gateway.infrastructure.clients import parsers
from bookkeeping_gateway.infrastructure.observability.metrics import (
    upstream_failure_counter,
    upstream_latency_histogram,
)
from bookkeeping_gateway.utils.casing import camel_keys, snake_keys

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _upstream_message(response: httpx.Response) -> Optional[str]:
    """The API's own error message, when the body carries one"""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class BookkeepingClient:
    """Client for the bookkeeping REST API, authenticated with a bearer token"""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.bookkeeping_api_base
        self.token = token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Call the API and return the decoded JSON body ({} for empty bodies).

        Raises:
            BookkeepingAPIError: On timeout, network failure, non-2xx status,
                or a body that is not a JSON object. The API's own message is
                used when it sends one, otherwise ``fallback``.
        """
        endpoint = path.strip("/").split("/")[0]
        query = camel_keys(params) if params else None

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self.transport,
        ) as client:
            try:
                with upstream_latency_histogram.labels(method=method, endpoint=endpoint).time():
                    response = await client.request(method, path, params=query, json=json)
                response.raise_for_status()

                if not response.content:
                    return {}
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError(f"expected a JSON object, got {type(data).__name__}")
                return data

            except httpx.TimeoutException as e:
                upstream_failure_counter.labels(endpoint=endpoint, reason="timeout").inc()
                logger.error(f"Bookkeeping API timeout on {method} {path}", extra={"upstream_path": path})
                raise BookkeepingAPIError(f"{fallback}: bookkeeping API timeout after {self.timeout}s", 503) from e
            except httpx.HTTPStatusError as e:
                upstream_failure_counter.labels(endpoint=endpoint, reason="status").inc()
                status = e.response.status_code
                message = _upstream_message(e.response) or fallback
                log = logger.warning if status < 500 else logger.error
                log(
                    f"Bookkeeping API error {status} on {method} {path}: {message}",
                    extra={"upstream_path": path, "upstream_status": status},
                )
                raise BookkeepingAPIError(message, status) from e
            except httpx.RequestError as e:
                upstream_failure_counter.labels(endpoint=endpoint, reason="network").inc()
                logger.error(f"Bookkeeping API unreachable on {method} {path}: {e}", extra={"upstream_path": path})
                raise BookkeepingAPIError(f"{fallback}: bookkeeping API unavailable", 503) from e
            except ValueError as e:
                upstream_failure_counter.labels(endpoint=endpoint, reason="payload").inc()
                logger.error(f"Invalid payload from {method} {path}: {e}", extra={"upstream_path": path})
                raise BookkeepingAPIError(f"{fallback}: invalid response from bookkeeping API", 502) from e

    async def _get(self, path: str, fallback: str, **params: Any) -> Dict[str, Any]:
        return await self._request("GET", path, fallback, params={k: v for k, v in params.items() if v is not None})

    @staticmethod
    def _field(data: Dict[str, Any], key: str, fallback: str) -> Any:
        try:
            return data[key]
        except KeyError as e:
            raise BookkeepingAPIError(f"{fallback}: response is missing '{key}'", 502) from e

    def _parse(self, fallback: str, parser: Callable[[Any], T], raw: Any) -> T:
        """
        Run ``parser`` over an upstream payload.

        Raises:
            BookkeepingAPIError: 502 when the payload does not have the shape
                the parser expects (missing ids, bad dates, nulls for lists)
        """
        try:
            return parser(raw)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            name = getattr(parser, "__name__", "payload")
            upstream_failure_counter.labels(endpoint=name.removeprefix("parse_"), reason="payload").inc()
            logger.error(f"Invalid payload for {name}: {e!r}", extra={"parser": name})
            raise BookkeepingAPIError(f"{fallback}: invalid response from bookkeeping API", 502) from e

    def _parse_each(self, fallback: str, parser: Callable[[Any], T], items: Any) -> List[T]:
        items = self._parse(fallback, parsers.parse_list, items)
        return [self._parse(fallback, parser, item) for item in items]

    # Auth

    async def login(self, email: str, password: str) -> AuthResult:
        fallback = "Login failed"
        data = await self._request("POST", "/auth/login", fallback, json={"email": email, "password": password})
        return self._parse(fallback, parsers.parse_auth, data)

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        fallback = "Registration failed"
        data = await self._request(
            "POST",
            "/auth/register",
            fallback,
            json={"name": name, "email": email, "password": password},
        )
        return self._parse(fallback, parsers.parse_auth, data)

    # Customers

    async def list_customers(self) -> List[Customer]:
        fallback = "Failed to load customers"
        data = await self._get("/customers/all", fallback)
        return self._parse_each(fallback, parsers.parse_customer, self._field(data, "customers", fallback))

    async def get_customer(self, customer_id: int) -> CustomerDetails:
        fallback = "Failed to load customer"
        data = await self._get(f"/customers/{customer_id}", fallback)
        return self._parse(fallback, parsers.parse_customer_details, self._field(data, "customer", fallback))

    async def create_customer(self, payload: Dict[str, Any]) -> Customer:
        fallback = "Failed to create customer"
        data = await self._request("POST", "/customers/create", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_customer, self._field(data, "customer", fallback))

    async def update_customer(self, customer_id: int, payload: Dict[str, Any]) -> None:
        await self._request("PUT", f"/customers/{customer_id}", "Failed to update customer", json=camel_keys(payload))

    async def delete_customer(self, customer_id: int) -> None:
        await self._request("DELETE", f"/customers/{customer_id}", "Failed to delete customer")

    async def get_customer_history(self, customer_id: int) -> List[Dict[str, Any]]:
        fallback = "Failed to load customer history"
        data = await self._get(f"/customers/{customer_id}/history", fallback)
        return snake_keys(self._field(data, "history", fallback))

    async def customers_with_debts(self) -> List[CustomerDebtSummary]:
        fallback = "Failed to load customers with debts"
        data = await self._get("/debts/customers-with-debts", fallback)
        return self._parse(fallback, parsers.parse_customers_with_debts, self._field(data, "customers", fallback))

    # Debts

    async def add_debt(self, payload: Dict[str, Any]) -> Debt:
        fallback = "Failed to create debt"
        data = await self._request("POST", "/debts/add", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_debt, self._field(data, "debt", fallback))

    async def get_customer_debts(self, customer_id: int) -> List[Debt]:
        fallback = "Failed to load debts"
        data = await self._get(f"/debts/customer/{customer_id}", fallback)
        return self._parse_each(fallback, parsers.parse_debt, self._field(data, "debts", fallback))

    async def get_customer_unpaid_debts(self, customer_id: int) -> List[Debt]:
        fallback = "Failed to load unpaid debts"
        data = await self._get(f"/debts/customer/{customer_id}/unpaid", fallback)
        return self._parse_each(fallback, parsers.parse_debt, self._field(data, "debts", fallback))

    async def mark_debt_paid(self, debt_id: int) -> None:
        await self._request("PUT", f"/debts/{debt_id}/mark-paid", "Failed to mark debt as paid")

    async def update_debt(self, debt_id: int, payload: Dict[str, Any]) -> None:
        await self._request("PUT", f"/debts/{debt_id}", "Failed to update debt", json=camel_keys(payload))

    async def delete_debt(self, debt_id: int) -> None:
        await self._request("DELETE", f"/debts/{debt_id}", "Failed to delete debt")

    async def debt_analytics(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        customer_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        fallback = "Failed to load debt analytics"
        data = await self._get(
            "/debts/analytics",
            fallback,
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None,
            customer_id=customer_id,
        )
        return snake_keys(self._field(data, "analytics", fallback))

    async def list_debts(self) -> List[Debt]:
        """
        All unpaid debts, each tagged with its customer's name.

        The API has no endpoint listing every debt, so this flattens the
        customers-with-debts view.
        """
        summaries = await self.customers_with_debts()
        return [debt for summary in summaries for debt in summary.unpaid_debts]

    async def overdue_debts(self, today: Optional[date] = None) -> List[Debt]:
        today = today or date.today()
        return [d for d in await self.list_debts() if is_overdue(d, today)]

    # Payments

    async def record_payment(self, payload: Dict[str, Any]) -> PaymentReceipt:
        fallback = "Failed to record payment"
        data = await self._request("POST", "/payments/record", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_payment_receipt, data)

    async def apply_credit(self, customer_id: int, credit_amount: Optional[float] = None) -> CreditApplication:
        body = {"creditAmount": credit_amount} if credit_amount is not None else {}
        fallback = "Failed to apply credit"
        data = await self._request("POST", f"/payments/apply-credit/{customer_id}", fallback, json=body)
        return self._parse(fallback, parsers.parse_credit_application, data)

    async def get_customer_payments(self, customer_id: int) -> List[Payment]:
        fallback = "Failed to load payments"
        data = await self._get(f"/payments/customer/{customer_id}", fallback)
        return self._parse_each(fallback, parsers.parse_payment, self._field(data, "payments", fallback))

    async def get_payment(self, payment_id: int) -> Payment:
        fallback = "Failed to load payment"
        data = await self._get(f"/payments/{payment_id}", fallback)
        return self._parse(fallback, parsers.parse_payment, self._field(data, "payment", fallback))

    async def update_payment(self, payment_id: int, payload: Dict[str, Any]) -> None:
        await self._request("PUT", f"/payments/{payment_id}", "Failed to update payment", json=camel_keys(payload))

    async def delete_payment(self, payment_id: int) -> None:
        await self._request("DELETE", f"/payments/{payment_id}", "Failed to delete payment")

    async def payment_analytics(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        customer_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        fallback = "Failed to load payment analytics"
        data = await self._get(
            "/payments/analytics",
            fallback,
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None,
            customer_id=customer_id,
        )
        return snake_keys(self._field(data, "analytics", fallback))

    # Products

    async def create_product(self, payload: Dict[str, Any]) -> Product:
        fallback = "Failed to create product"
        data = await self._request("POST", "/products", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_product, self._field(data, "product", fallback))

    async def list_products(
        self,
        category: Optional[str] = None,
        stock_status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Products plus the API's inventory summary"""
        fallback = "Failed to load products"
        data = await self._get("/products", fallback, category=category, stock_status=stock_status, search=search)
        return {
            "products": self._parse_each(fallback, parsers.parse_product, self._field(data, "products", fallback)),
            "summary": snake_keys(data.get("summary", {})),
        }

    async def get_product(self, product_id: int) -> Product:
        fallback = "Failed to load product"
        data = await self._get(f"/products/{product_id}", fallback)
        return self._parse(fallback, parsers.parse_product, self._field(data, "product", fallback))

    async def update_product(self, product_id: int, payload: Dict[str, Any]) -> Product:
        fallback = "Failed to update product"
        data = await self._request("PUT", f"/products/{product_id}", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_product, self._field(data, "product", fallback))

    async def delete_product(self, product_id: int) -> None:
        await self._request("DELETE", f"/products/{product_id}", "Failed to delete product")

    async def low_stock_alerts(self) -> Dict[str, Any]:
        return snake_keys(await self._get("/sales/alerts/low-stock", "Failed to load stock alerts"))

    async def update_stock(self, product_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        fallback = "Failed to update stock"
        data = await self._request("POST", f"/products/{product_id}/stock", fallback, json=camel_keys(payload))
        return {
            "product": self._parse(fallback, parsers.parse_product, self._field(data, "product", fallback)),
            "stock_change": snake_keys(data.get("stockChange", {})),
        }

    # Services

    async def create_service(self, payload: Dict[str, Any]) -> Service:
        fallback = "Failed to create service"
        data = await self._request("POST", "/services", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_service, self._field(data, "service", fallback))

    async def list_services(
        self,
        category: Optional[str] = None,
        requires_booking: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        fallback = "Failed to load services"
        data = await self._get(
            "/services",
            fallback,
            category=category,
            requires_booking=requires_booking,
            search=search,
        )
        return {
            "services": self._parse_each(fallback, parsers.parse_service, self._field(data, "services", fallback)),
            "summary": snake_keys(data.get("summary", {})),
        }

    async def get_service(self, service_id: int) -> Service:
        fallback = "Failed to load service"
        data = await self._get(f"/services/{service_id}", fallback)
        return self._parse(fallback, parsers.parse_service, self._field(data, "service", fallback))

    async def update_service(self, service_id: int, payload: Dict[str, Any]) -> Service:
        fallback = "Failed to update service"
        data = await self._request("PUT", f"/services/{service_id}", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_service, self._field(data, "service", fallback))

    async def delete_service(self, service_id: int) -> None:
        await self._request("DELETE", f"/services/{service_id}", "Failed to delete service")

    async def service_categories(self) -> List[str]:
        fallback = "Failed to load service categories"
        data = await self._get("/services/categories", fallback)
        return self._parse(fallback, list, self._field(data, "categories", fallback))

    # Sales

    async def create_sale(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        fallback = "Failed to create sale"
        data = await self._request("POST", "/sales", fallback, json=camel_keys(payload))
        return {
            "sale": self._parse(fallback, parsers.parse_sale, self._field(data, "sale", fallback)),
            "inventory_updates": snake_keys(data.get("inventoryUpdates", [])),
        }

    async def get_sale(self, sale_id: int) -> Sale:
        fallback = "Failed to load sale"
        data = await self._get(f"/sales/{sale_id}", fallback)
        return self._parse(fallback, parsers.parse_sale, self._field(data, "sale", fallback))

    async def list_sales(self, **filters: Any) -> Dict[str, Any]:
        """Sales history; filters: start_date, end_date, customer_id, status, payment_method, page, limit"""
        fallback = "Failed to load sales"
        data = await self._get("/sales", fallback, **filters)
        return {
            "sales": self._parse_each(fallback, parsers.parse_sale, self._field(data, "sales", fallback)),
            "pagination": snake_keys(data.get("pagination", {})),
            "summary": snake_keys(data.get("summary", {})),
        }

    async def add_sale_payment(self, sale_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        fallback = "Failed to record sale payment"
        data = await self._request("POST", f"/sales/{sale_id}/payment", fallback, json=camel_keys(payload))
        return self._parse(fallback, parsers.parse_sale_payment, self._field(data, "result", fallback))

    async def daily_sales_summary(self, day: Optional[date] = None) -> Dict[str, Any]:
        data = await self._get(
            "/sales/analytics/daily",
            "Failed to load daily summary",
            date=day.isoformat() if day else None,
        )
        return snake_keys(data)

    async def sales_analytics(self, **filters: Any) -> Dict[str, Any]:
        """filters: start_date, end_date, group_by"""
        return snake_keys(await self._get("/sales/analytics/overview", "Failed to load sales analytics", **filters))

    async def profit_loss(self, **filters: Any) -> Dict[str, Any]:
        return snake_keys(await self._get("/sales/analytics/profit-loss", "Failed to load profit/loss report", **filters))

    async def top_products(self, **filters: Any) -> List[Dict[str, Any]]:
        fallback = "Failed to load top products"
        data = await self._get("/sales/analytics/top-products", fallback, **filters)
        return snake_keys(self._field(data, "products", fallback))

    async def sales_dashboard(self) -> Dict[str, Any]:
        fallback = "Failed to load dashboard"
        data = await self._get("/dashboard", fallback)
        return snake_keys(self._field(data, "dashboard", fallback))
