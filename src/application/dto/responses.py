"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from src.core.entities.customer import Customer
from src.core.entities.order import Order
from src.core.entities.product import Product, StockHistoryEntry
from src.core.entities.sale import Sale

# --- Products ---


class StockHistoryEntryResponse(BaseModel):
    """One stock ledger entry."""

    id: str
    date: datetime
    type: str
    quantity_change: int
    new_stock_level: int
    note: str | None = None

    @classmethod
    def from_entity(cls, entry: StockHistoryEntry) -> "StockHistoryEntryResponse":
        return cls(
            id=entry.id,
            date=entry.date,
            type=entry.type.value,
            quantity_change=entry.quantity_change,
            new_stock_level=entry.new_stock_level,
            note=entry.note,
        )


class ProductResponse(BaseModel):
    """Product in response."""

    id: str
    name: str
    brand: str
    type: str
    color: str
    model: str
    size: str
    cost_cfa: float
    exchange_rate: float
    cost_ghs_base: float
    service_charge: float
    misc_charge: float
    profit_margin: float
    tax_rate: float
    selling_price: float
    stock_quantity: int
    date_added: datetime
    history_count: int = 0

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.display_name,
            brand=product.brand,
            type=product.type.value,
            color=product.color,
            model=product.model,
            size=product.size,
            cost_cfa=product.cost_cfa,
            exchange_rate=product.exchange_rate,
            cost_ghs_base=product.cost_ghs_base,
            service_charge=product.service_charge,
            misc_charge=product.misc_charge,
            profit_margin=product.profit_margin,
            tax_rate=product.tax_rate,
            selling_price=product.selling_price,
            stock_quantity=product.stock_quantity,
            date_added=product.date_added,
            history_count=len(product.history),
        )


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int


class ProductHistoryResponse(BaseModel):
    product_id: str
    stock_quantity: int
    entries: list[StockHistoryEntryResponse]


class StockChangeResponse(BaseModel):
    """Outcome of a single stock edit."""

    product: ProductResponse
    changed: bool
    entry: StockHistoryEntryResponse | None = None


class BulkStockUpdateResponse(BaseModel):
    updated: list[StockChangeResponse]
    changed_count: int
    unchanged_count: int


class BulkRepriceResponse(BaseModel):
    products: list[ProductResponse]


class PriceQuoteResponse(BaseModel):
    """Every intermediate figure of a price calculation."""

    base_cost_ghs: float
    service_charge: float
    misc_charge: float
    total_cost: float
    price_pre_tax: float
    tax_amount: float
    final_price: float


# --- Sales / Orders ---


class SaleResponse(BaseModel):
    """Sale line in response."""

    id: str
    transaction_id: str | None = None
    order_key: str
    kind: str
    refund_of: str | None = None
    product_id: str
    product_name: str
    quantity: int
    total_price: float
    tax_amount: float
    salesman: str
    customer_id: str | None = None
    customer_name: str
    date: datetime
    returned_quantity: int
    payment_status: str
    payment_method: str | None = None
    payment_date: datetime | None = None
    cashier_name: str | None = None
    fulfillment_status: str

    @classmethod
    def from_entity(cls, sale: Sale) -> "SaleResponse":
        return cls(
            id=sale.id,
            transaction_id=sale.transaction_id,
            order_key=sale.group_key,
            kind=sale.kind.value,
            refund_of=sale.refund_of,
            product_id=sale.product_id,
            product_name=sale.product_name,
            quantity=sale.quantity,
            total_price=sale.total_price,
            tax_amount=sale.tax_amount,
            salesman=sale.salesman,
            customer_id=sale.customer_id,
            customer_name=sale.customer_name,
            date=sale.date,
            returned_quantity=sale.returned_quantity,
            payment_status=sale.payment_status.value,
            payment_method=sale.payment_method.value if sale.payment_method else None,
            payment_date=sale.payment_date,
            cashier_name=sale.cashier_name,
            fulfillment_status=sale.fulfillment_status.value,
        )


class SaleListResponse(BaseModel):
    sales: list[SaleResponse]
    total: int


class OrderResponse(BaseModel):
    """Sale lines of one order with their aggregate figures."""

    key: str
    short_code: str
    date: datetime
    payment_status: str
    fulfillment_status: str
    customer_id: str | None = None
    customer_name: str
    salesman: str
    item_count: int
    gross_total: float
    net_total: float
    tax_total: float
    lines: list[SaleResponse]

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            key=order.key,
            short_code=order.short_code,
            date=order.date,
            payment_status=order.payment_status.value,
            fulfillment_status=order.fulfillment_status.value,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            salesman=order.salesman,
            item_count=order.item_count,
            gross_total=order.gross_total,
            net_total=order.net_total,
            tax_total=order.tax_total,
            lines=[SaleResponse.from_entity(line) for line in order.lines],
        )


class OrderListResponse(BaseModel):
    view: str
    orders: list[OrderResponse]
    total: int


class CheckoutResponse(BaseModel):
    """Booked order and the products whose stock was reserved."""

    order: OrderResponse
    products: list[ProductResponse]


class ReturnResponse(BaseModel):
    """Original line after the return plus the compensating refund line."""

    original: SaleResponse
    refund: SaleResponse
    product: ProductResponse


# --- Customers ---


class CustomerResponse(BaseModel):
    id: str
    name: str
    phone: str
    email: str | None = None
    total_spent: float
    last_purchase_date: datetime | None = None
    preferences: list[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerResponse":
        return cls(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            total_spent=customer.total_spent,
            last_purchase_date=customer.last_purchase_date,
            preferences=list(customer.preferences),
        )


class CustomerListResponse(BaseModel):
    customers: list[CustomerResponse]
    total: int


# --- Reports ---


class SalesmanRevenueResponse(BaseModel):
    salesman: str
    revenue: float


class DailySummaryResponse(BaseModel):
    """Paid business of one day."""

    day: date
    total_revenue: float
    transaction_count: int
    line_count: int
    by_method: dict[str, float]
    by_salesman: list[SalesmanRevenueResponse]


class StockReportResponse(BaseModel):
    threshold: int
    low_stock: list[ProductResponse]
    out_of_stock: list[ProductResponse]


# --- Sync ---


class SyncFailureResponse(BaseModel):
    operation: str
    error: str
    attempts: int
    occurred_at: datetime


class SyncStatusResponse(BaseModel):
    """Queued persistence writes awaiting a retry."""

    backend: str
    pending_count: int
    pending_operations: list[str]
    last_failure: SyncFailureResponse | None = None


class SyncRetryResponse(BaseModel):
    succeeded: int
    still_pending: int


# --- Health / Errors ---


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
