"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from src.core.entities.product import ProductType
from src.core.entities.sale import FulfillmentStatus, PaymentMethod

# --- Products ---


class AddProductRequest(BaseModel):
    """Register a product with its costing inputs and opening stock.

    Rates left unset fall back to the pricing defaults in settings.
    """

    brand: str = Field(..., min_length=1, examples=["Levi's"])
    type: ProductType = Field(..., examples=["Jeans"])
    color: str = Field(default="", examples=["Indigo"])
    model: str = Field(default="", examples=["501"])
    size: str = Field(default="", examples=["32"])

    cost_cfa: float = Field(..., ge=0, description="Unit cost in CFA", allow_inf_nan=False)
    exchange_rate: float = Field(..., ge=0, description="GHS per 1000 CFA", allow_inf_nan=False)
    service_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    misc_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    profit_margin: float = Field(default=0.0, description="Flat GHS margin", allow_inf_nan=False)
    tax_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    initial_quantity: int = Field(default=0, ge=0)


class AdjustStockRequest(BaseModel):
    """Manual stock correction to an absolute level."""

    product_id: str
    new_quantity: int
    note: str | None = None


class BulkStockUpdateRequest(BaseModel):
    """Set or shift the stock of several products at once."""

    product_ids: list[str] = Field(..., min_length=1)
    mode: Literal["SET", "ADD"] = "SET"
    value: float = Field(..., allow_inf_nan=False, description="Absolute level (SET) or delta (ADD)")
    note: str | None = None


class RestockRequest(BaseModel):
    """Goods received for an existing product."""

    product_id: str
    quantity: int
    note: str | None = None


class BulkRepriceRequest(BaseModel):
    """New margin and/or tax rate for several products."""

    product_ids: list[str] = Field(..., min_length=1)
    profit_margin: float | None = Field(default=None, allow_inf_nan=False)
    tax_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class PriceQuoteRequest(BaseModel):
    """Inputs of a standalone price calculation."""

    cost_cfa: float = Field(..., ge=0, allow_inf_nan=False)
    exchange_rate: float = Field(..., ge=0, allow_inf_nan=False)
    service_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    misc_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    profit_margin: float = Field(default=0.0, allow_inf_nan=False)
    tax_rate_pct: float | None = Field(default=None, ge=0, allow_inf_nan=False)


# --- Customers ---


class RegisterCustomerRequest(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = ""
    email: str | None = None


# --- Orders ---


class CartItemRequest(BaseModel):
    product_id: str
    quantity: int


class CheckoutRequest(BaseModel):
    """A cart booked as one order; stock is reserved immediately."""

    items: list[CartItemRequest] = Field(default_factory=list)
    salesman: str = ""
    customer_id: str | None = None


class ConfirmPaymentRequest(BaseModel):
    """Settle a pending order.

    Also used by salesmen verifying a remote mobile-money payment; the
    verifier's name is recorded as the cashier.
    """

    order_key: str
    payment_method: PaymentMethod
    cashier_name: str = Field(..., min_length=1)


class AdvanceFulfillmentRequest(BaseModel):
    order_key: str
    target: FulfillmentStatus


class ProcessReturnRequest(BaseModel):
    """Return part of a single sale line."""

    sale_id: str
    quantity: int


# --- Reports ---


class DailySummaryRequest(BaseModel):
    day: date


# --- Path-scoped bodies (id comes from the URL) ---


class SetStockBody(BaseModel):
    new_quantity: int
    note: str | None = None


class RestockBody(BaseModel):
    quantity: int
    note: str | None = None


class PaymentBody(BaseModel):
    payment_method: PaymentMethod
    cashier_name: str = Field(..., min_length=1)


class ReturnBody(BaseModel):
    quantity: int
