"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/exceptions.py

NO infrastructure imports. Collections are handed in by the caller.
"""

from src.core.services.customer_spend import apply_spend
from src.core.services.inventory_ledger import InventoryLedger
from src.core.services.order_grouping import (
    awaiting_pickup,
    filter_orders,
    group_by_transaction,
    in_fulfillment,
    pending_payment,
    search_by_code,
)
from src.core.services.order_lifecycle import (
    FULFILLMENT_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    apply_fulfillment_transition,
    apply_payment_transition,
    validate_fulfillment_transition,
    validate_payment_transition,
)
from src.core.services.pricing import (
    PriceBreakdown,
    TaxSplit,
    calculate_price,
    price_from_cost,
    round_up_price,
    split_tax,
)
from src.core.services.sales_summary import (
    DailySummary,
    StockReport,
    stock_report,
    summarize_day,
)

__all__ = [
    # Inventory
    "InventoryLedger",
    # Pricing
    "PriceBreakdown",
    "TaxSplit",
    "calculate_price",
    "price_from_cost",
    "round_up_price",
    "split_tax",
    # Orders
    "group_by_transaction",
    "filter_orders",
    "pending_payment",
    "awaiting_pickup",
    "in_fulfillment",
    "search_by_code",
    # Lifecycle
    "PAYMENT_TRANSITIONS",
    "FULFILLMENT_TRANSITIONS",
    "apply_payment_transition",
    "apply_fulfillment_transition",
    "validate_payment_transition",
    "validate_fulfillment_transition",
    # Customers
    "apply_spend",
    # Reports
    "DailySummary",
    "StockReport",
    "summarize_day",
    "stock_report",
]
