"""Core domain entities."""

from src.core.entities.customer import Customer
from src.core.entities.order import Order
from src.core.entities.product import (
    Product,
    ProductType,
    StockHistoryEntry,
    StockHistoryType,
    new_id,
    utcnow,
)
from src.core.entities.sale import (
    FulfillmentStatus,
    LineKind,
    OrderRef,
    PaymentMethod,
    PaymentStatus,
    Sale,
    StandaloneRef,
    TransactionRef,
)

__all__ = [
    # Product entities
    "Product",
    "ProductType",
    "StockHistoryEntry",
    "StockHistoryType",
    # Sale entities
    "Sale",
    "LineKind",
    "OrderRef",
    "TransactionRef",
    "StandaloneRef",
    "PaymentStatus",
    "PaymentMethod",
    "FulfillmentStatus",
    # Aggregates
    "Order",
    # Customer entities
    "Customer",
    # Helpers
    "new_id",
    "utcnow",
]
