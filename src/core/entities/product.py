"""Product and stock history domain entities."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Opaque unique identifier for records."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class ProductType(str, Enum):
    """Clothing categories carried by the shop."""

    KARKI = "Karki"
    MATERIAL = "Material"
    JOGGERS = "Joggers"
    JEANS = "Jeans"
    CHINOS = "Chinos"
    OTHER = "Other"


class StockHistoryType(str, Enum):
    """Reasons a product's stock level changed."""

    INITIAL = "INITIAL"
    SALE = "SALE"
    RETURN = "RETURN"
    MANUAL_EDIT = "MANUAL_EDIT"
    BULK_EDIT = "BULK_EDIT"
    RESTOCK = "RESTOCK"
    CANCELLATION = "CANCELLATION"


class StockHistoryEntry(BaseModel):
    """One immutable line of a product's stock audit trail."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    date: datetime = Field(default_factory=utcnow)
    type: StockHistoryType
    quantity_change: int  # signed
    new_stock_level: int  # absolute level after the change
    note: str | None = None


class Product(BaseModel):
    """A sellable item with its costing breakdown and stock ledger."""

    id: str = Field(default_factory=new_id)
    brand: str
    type: ProductType = ProductType.OTHER
    color: str = ""
    model: str = ""
    size: str = ""

    # Costing
    cost_cfa: float = 0.0
    exchange_rate: float = 0.0  # GHS per 1000 CFA
    cost_ghs_base: float = 0.0
    service_charge: float = 0.0  # GHS amount
    misc_charge: float = 0.0  # GHS amount
    profit_margin: float = 0.0  # flat GHS
    tax_rate: float = 0.0  # percent
    selling_price: float = 0.0

    stock_quantity: int = Field(default=0, ge=0)
    date_added: datetime = Field(default_factory=utcnow)
    history: list[StockHistoryEntry] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Name snapshot copied onto sale lines."""
        return f"{self.brand} {self.type.value} ({self.color})"

    @property
    def preference_token(self) -> str:
        """Token merged into a buyer's preferences."""
        return f"{self.type.value} {self.size}"

    @property
    def total_cost(self) -> float:
        return self.cost_ghs_base + self.service_charge + self.misc_charge

    @property
    def history_balance(self) -> int:
        """Stock level implied by replaying the history."""
        return sum(entry.quantity_change for entry in self.history)

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_quantity == 0

    @property
    def stock_value(self) -> float:
        return self.selling_price * self.stock_quantity
