"""
Order grouping.

The single algorithm every queue, board and ledger view uses to turn flat
sale lines into orders, so they all agree on membership and ordering.
"""

from collections.abc import Callable, Iterable

from src.core.entities.order import Order
from src.core.entities.sale import FulfillmentStatus, PaymentStatus, Sale


def group_by_transaction(sales: Iterable[Sale]) -> list[Order]:
    """Group sale lines by order key.

    Lines keep their relative input order inside a group. Groups are sorted
    newest first by the date of their earliest line; ties keep the order in
    which groups first appeared.
    """
    groups: dict[str, list[Sale]] = {}
    for sale in sales:
        groups.setdefault(sale.group_key, []).append(sale)

    orders = [Order(key=key, lines=lines) for key, lines in groups.items()]
    orders.sort(key=lambda order: order.date, reverse=True)
    return orders


def filter_orders(
    sales: Iterable[Sale],
    predicate: Callable[[Sale], bool],
) -> list[Order]:
    """Group only the lines matching ``predicate``."""
    return group_by_transaction(s for s in sales if predicate(s))


def pending_payment(sale: Sale) -> bool:
    return not sale.is_refund and sale.payment_status == PaymentStatus.PENDING


def awaiting_pickup(sale: Sale) -> bool:
    return (
        not sale.is_refund
        and sale.payment_status == PaymentStatus.PAID
        and sale.fulfillment_status != FulfillmentStatus.COMPLETED
    )


def in_fulfillment(status: FulfillmentStatus) -> Callable[[Sale], bool]:
    """Predicate for paid sale lines at a given fulfillment stage."""

    def _match(sale: Sale) -> bool:
        return (
            not sale.is_refund
            and sale.payment_status == PaymentStatus.PAID
            and sale.fulfillment_status == status
        )

    return _match


def search_by_code(orders: Iterable[Order], code: str) -> list[Order]:
    """Case-insensitive substring match on the order key."""
    needle = code.strip().upper()
    if not needle:
        return list(orders)
    return [order for order in orders if needle in order.key.upper()]
