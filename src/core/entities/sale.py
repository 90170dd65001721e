"""Sale line domain entities."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from src.core.entities.product import new_id, utcnow


class PaymentStatus(str, Enum):
    """Payment state of an order."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    """How an order was settled."""

    CASH = "CASH"
    MOMO = "MOMO"
    CARD = "CARD"
    UNKNOWN = "UNKNOWN"


class FulfillmentStatus(str, Enum):
    """Post-payment handover state."""

    NEW = "NEW"
    PROCESSING = "PROCESSING"
    READY = "READY"
    COMPLETED = "COMPLETED"


class LineKind(str, Enum):
    """Regular sale line or compensating refund line."""

    SALE = "sale"
    REFUND = "refund"


class TransactionRef(BaseModel):
    """Line booked as part of a checkout."""

    kind: Literal["transaction"] = "transaction"
    transaction_id: str


class StandaloneRef(BaseModel):
    """Line that belongs to no checkout; it is its own order."""

    kind: Literal["standalone"] = "standalone"


OrderRef = Annotated[TransactionRef | StandaloneRef, Field(discriminator="kind")]


class Sale(BaseModel):
    """A single product line of an order.

    ``quantity``, ``total_price`` and ``tax_amount`` are positive for sale
    lines and negative for refund lines.
    """

    id: str = Field(default_factory=new_id)
    order: OrderRef = Field(default_factory=StandaloneRef)
    kind: LineKind = LineKind.SALE
    refund_of: str | None = None  # original sale id, refund lines only

    product_id: str
    product_name: str  # snapshot at sale time
    quantity: int
    total_price: float
    tax_amount: float = 0.0

    salesman: str = ""
    customer_id: str | None = None
    customer_name: str = "Walk-in Customer"
    date: datetime = Field(default_factory=utcnow)

    returned_quantity: int = Field(default=0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod | None = None
    payment_date: datetime | None = None
    cashier_name: str | None = None
    fulfillment_status: FulfillmentStatus = FulfillmentStatus.NEW

    @model_validator(mode="after")
    def check_sign_convention(self) -> "Sale":
        """Sale lines carry positive quantities, refund lines negative ones."""
        if self.kind == LineKind.SALE:
            if self.quantity <= 0:
                raise ValueError("sale line quantity must be positive")
            if self.returned_quantity > self.quantity:
                raise ValueError("returned_quantity cannot exceed quantity")
        else:
            if self.quantity >= 0:
                raise ValueError("refund line quantity must be negative")
            if not self.refund_of:
                raise ValueError("refund line must reference the original sale")
        return self

    @property
    def transaction_id(self) -> str | None:
        if isinstance(self.order, TransactionRef):
            return self.order.transaction_id
        return None

    @property
    def group_key(self) -> str:
        """Key of the order this line belongs to."""
        return self.transaction_id or self.id

    @property
    def is_refund(self) -> bool:
        return self.kind == LineKind.REFUND

    @property
    def returnable_quantity(self) -> int:
        if self.is_refund:
            return 0
        return self.quantity - self.returned_quantity
