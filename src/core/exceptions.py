"""
Domain exceptions for the point-of-sale core.

Every error raised by an inventory or order operation is raised before any
state is touched, so callers can rely on collections being unchanged.
"""

from typing import Any


class PosError(Exception):
    """Base exception for all point-of-sale errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(PosError):
    """Base exception for missing records."""

    pass


class ProductNotFoundError(NotFoundError):
    """Product not found in the catalog."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class SaleNotFoundError(NotFoundError):
    """Sale line not found."""

    def __init__(self, sale_id: str):
        super().__init__(
            f"Sale not found: {sale_id}",
            code="SALE_NOT_FOUND",
            details={"sale_id": sale_id},
        )


class OrderNotFoundError(NotFoundError):
    """No sale lines share the requested order key."""

    def __init__(self, order_key: str):
        super().__init__(
            f"Order not found: {order_key}",
            code="ORDER_NOT_FOUND",
            details={"order_key": order_key},
        )


class CustomerNotFoundError(NotFoundError):
    """Customer not found."""

    def __init__(self, customer_id: str):
        super().__init__(
            f"Customer not found: {customer_id}",
            code="CUSTOMER_NOT_FOUND",
            details={"customer_id": customer_id},
        )


# Inventory Exceptions
class InventoryError(PosError):
    """Base exception for stock operations."""

    pass


class InsufficientStockError(InventoryError):
    """Requested deduction exceeds available stock."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {product_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )


class EmptyOperationError(InventoryError):
    """Zero-line or zero-quantity operation."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Nothing to do for {operation}: {reason}",
            code="EMPTY_OPERATION",
            details={"operation": operation, "reason": reason},
        )


# Order Lifecycle Exceptions
class OrderError(PosError):
    """Base exception for order lifecycle operations."""

    pass


class InvalidTransitionError(OrderError):
    """Status change not permitted from the current state."""

    def __init__(self, order_key: str, current: str, target: str, reason: str | None = None):
        message = f"Order {order_key} cannot move from {current} to {target}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            code="INVALID_TRANSITION",
            details={
                "order_key": order_key,
                "current": current,
                "target": target,
                "reason": reason,
            },
        )


class OverReturnError(OrderError):
    """Return quantity exceeds what is still returnable on the line."""

    def __init__(self, sale_id: str, requested: int, remaining: int):
        super().__init__(
            f"Cannot return {requested} unit(s) of sale {sale_id}: "
            f"only {remaining} remaining",
            code="OVER_RETURN",
            details={
                "sale_id": sale_id,
                "requested": requested,
                "remaining": remaining,
            },
        )


# Validation Exceptions
class ValidationError(PosError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Storage Exceptions
class StorageError(PosError):
    """Base exception for persistence operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(PosError):
    """Configuration error."""

    pass
