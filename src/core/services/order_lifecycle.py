"""
Order lifecycle rules.

The only place payment and fulfillment statuses are changed. Transitions
act on a whole order: every sale line of the group moves together. Refund
lines are born PAID/COMPLETED and are never transitioned.

    payment:      PENDING -> PAID | CANCELLED       (CANCELLED is terminal)
    fulfillment:  NEW -> PROCESSING                 (only as part of PAID)
                  PROCESSING -> READY -> COMPLETED  (COMPLETED is terminal)

No stock mutation here; callers pair transitions with ledger calls.
"""

from datetime import datetime

from src.core.entities.order import Order
from src.core.entities.product import utcnow
from src.core.entities.sale import (
    FulfillmentStatus,
    PaymentMethod,
    PaymentStatus,
    Sale,
)
from src.core.exceptions import InvalidTransitionError, ValidationError

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.CANCELLED}),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}

# Transitions exposed to the fulfillment board
FULFILLMENT_TRANSITIONS: dict[FulfillmentStatus, frozenset[FulfillmentStatus]] = {
    FulfillmentStatus.NEW: frozenset(),
    FulfillmentStatus.PROCESSING: frozenset({FulfillmentStatus.READY}),
    FulfillmentStatus.READY: frozenset({FulfillmentStatus.COMPLETED}),
    FulfillmentStatus.COMPLETED: frozenset(),
}

ACCEPTED_PAYMENT_METHODS = frozenset(
    {PaymentMethod.CASH, PaymentMethod.MOMO, PaymentMethod.CARD}
)


def can_transition_payment(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in PAYMENT_TRANSITIONS.get(current, frozenset())


def can_transition_fulfillment(
    current: FulfillmentStatus, target: FulfillmentStatus
) -> bool:
    return target in FULFILLMENT_TRANSITIONS.get(current, frozenset())


def _require_consistent(order: Order, target: str) -> None:
    if not order.sale_lines:
        raise InvalidTransitionError(
            order.key, "REFUND_ONLY", target, "order has no sale lines"
        )
    if not order.is_consistent:
        raise InvalidTransitionError(
            order.key, "MIXED", target, "sale lines disagree on status"
        )


def validate_payment_transition(order: Order, target: PaymentStatus) -> None:
    """Raise unless the whole order may move to ``target``."""
    _require_consistent(order, target.value)
    current = order.payment_status
    if not can_transition_payment(current, target):
        raise InvalidTransitionError(order.key, current.value, target.value)


def validate_fulfillment_transition(order: Order, target: FulfillmentStatus) -> None:
    """Raise unless the paid order may advance to ``target``."""
    _require_consistent(order, target.value)
    if order.payment_status != PaymentStatus.PAID:
        raise InvalidTransitionError(
            order.key,
            order.payment_status.value,
            target.value,
            "fulfillment requires a paid order",
        )
    current = order.fulfillment_status
    if not can_transition_fulfillment(current, target):
        raise InvalidTransitionError(order.key, current.value, target.value)


def apply_payment_transition(
    order: Order,
    target: PaymentStatus,
    method: PaymentMethod | None = None,
    cashier_name: str | None = None,
    paid_at: datetime | None = None,
) -> list[Sale]:
    """Move every sale line of ``order`` to payment status ``target``.

    PENDING -> PAID records method, cashier and payment date and starts
    fulfillment (NEW -> PROCESSING). PENDING -> CANCELLED only flips the
    status; restoring stock is the caller's job.
    """
    if target == PaymentStatus.PAID and method not in ACCEPTED_PAYMENT_METHODS:
        raise ValidationError(
            "payment_method", "a settled payment method is required", method
        )
    validate_payment_transition(order, target)

    lines = order.sale_lines
    if target == PaymentStatus.PAID:
        paid_at = paid_at or utcnow()
        for line in lines:
            line.payment_status = PaymentStatus.PAID
            line.payment_method = method
            line.payment_date = paid_at
            line.cashier_name = cashier_name
            line.fulfillment_status = FulfillmentStatus.PROCESSING
    else:
        for line in lines:
            line.payment_status = target
    return lines


def apply_fulfillment_transition(order: Order, target: FulfillmentStatus) -> list[Sale]:
    """PROCESSING -> READY or READY -> COMPLETED for every sale line."""
    validate_fulfillment_transition(order, target)
    lines = order.sale_lines
    for line in lines:
        line.fulfillment_status = target
    return lines
