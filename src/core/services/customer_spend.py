"""Customer spend bookkeeping applied when orders are paid or refunded."""

from collections.abc import Iterable
from datetime import datetime

from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.product import Product, utcnow

logger = get_logger(__name__)


def apply_spend(
    customer: Customer,
    amount: float,
    purchased: Iterable[Product] = (),
    at: datetime | None = None,
) -> Customer:
    """Add ``amount`` (negative for refunds) to the customer's running spend.

    Merges a "type size" preference token for every purchased product,
    keeping existing tokens first and skipping duplicates.
    """
    customer.total_spent += amount
    customer.last_purchase_date = at or utcnow()

    for product in purchased:
        token = product.preference_token
        if token not in customer.preferences:
            customer.preferences.append(token)

    logger.info(
        "customer_spend_applied",
        customer_id=customer.id,
        amount=round(amount, 2),
        total_spent=round(customer.total_spent, 2),
    )
    return customer
