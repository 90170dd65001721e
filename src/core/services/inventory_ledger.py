"""
Inventory ledger.

Sole owner of ``Product.stock_quantity`` and ``Product.history``. Every
mutation appends exactly one history entry and updates the quantity in the
same synchronous step, so for any product:

    stock_quantity == sum(entry.quantity_change for entry in history)

Pure service: operates on the product mapping it is handed.
"""

from collections.abc import Mapping

from src.config import get_logger
from src.core.entities.product import Product, StockHistoryEntry, StockHistoryType
from src.core.exceptions import (
    EmptyOperationError,
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)

logger = get_logger(__name__)

DEDUCT_REASONS = frozenset({StockHistoryType.SALE})
RESTORE_REASONS = frozenset(
    {
        StockHistoryType.RETURN,
        StockHistoryType.CANCELLATION,
        StockHistoryType.RESTOCK,
    }
)
SET_REASONS = frozenset({StockHistoryType.MANUAL_EDIT, StockHistoryType.BULK_EDIT})


class InventoryLedger:
    """Stock mutation primitives over a product collection."""

    def __init__(self, products: Mapping[str, Product]) -> None:
        self._products = products

    def get(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def check_available(self, demand: Mapping[str, int]) -> None:
        """Validate a whole batch of deductions before any is applied.

        Raises on the first product that is unknown or short.
        """
        for product_id, qty in demand.items():
            product = self.get(product_id)
            if qty > product.stock_quantity:
                raise InsufficientStockError(
                    product_id=product_id,
                    requested=qty,
                    available=product.stock_quantity,
                )

    def deduct(
        self,
        product_id: str,
        qty: int,
        reason: StockHistoryType = StockHistoryType.SALE,
        note: str | None = None,
    ) -> StockHistoryEntry:
        """Take ``qty`` units out of stock."""
        if reason not in DEDUCT_REASONS:
            raise ValidationError("reason", "not a deduction reason", reason.value)
        self._require_positive("deduct", qty)
        product = self.get(product_id)
        if qty > product.stock_quantity:
            raise InsufficientStockError(
                product_id=product_id,
                requested=qty,
                available=product.stock_quantity,
            )

        entry = self._append(product, -qty, reason, note)
        logger.info(
            "stock_deducted",
            product_id=product_id,
            qty=qty,
            reason=reason.value,
            new_level=entry.new_stock_level,
        )
        return entry

    def restore(
        self,
        product_id: str,
        qty: int,
        reason: StockHistoryType,
        note: str | None = None,
    ) -> StockHistoryEntry:
        """Put ``qty`` units back into stock.

        No upper bound is enforced.
        """
        if reason not in RESTORE_REASONS:
            raise ValidationError("reason", "not a restore reason", reason.value)
        self._require_positive("restore", qty)
        product = self.get(product_id)

        entry = self._append(product, qty, reason, note)
        logger.info(
            "stock_restored",
            product_id=product_id,
            qty=qty,
            reason=reason.value,
            new_level=entry.new_stock_level,
        )
        return entry

    def set_absolute(
        self,
        product_id: str,
        new_qty: int,
        reason: StockHistoryType = StockHistoryType.MANUAL_EDIT,
        note: str | None = None,
    ) -> StockHistoryEntry | None:
        """Set the stock level outright; negative targets clamp to 0.

        Returns ``None`` and leaves history untouched when nothing changes.
        """
        if reason not in SET_REASONS:
            raise ValidationError("reason", "not an edit reason", reason.value)
        product = self.get(product_id)
        target = max(0, int(new_qty))
        diff = target - product.stock_quantity
        if diff == 0:
            logger.debug("stock_edit_noop", product_id=product_id, level=target)
            return None

        entry = self._append(product, diff, reason, note)
        logger.info(
            "stock_set",
            product_id=product_id,
            diff=diff,
            reason=reason.value,
            new_level=entry.new_stock_level,
        )
        return entry

    def record_initial(self, product_id: str, qty: int) -> StockHistoryEntry:
        """Open the ledger of a freshly created product."""
        product = self.get(product_id)
        if product.history:
            raise ValidationError("history", "initial stock already recorded", product_id)
        if qty < 0:
            raise ValidationError("quantity", "initial stock must not be negative", qty)

        entry = StockHistoryEntry(
            type=StockHistoryType.INITIAL,
            quantity_change=qty,
            new_stock_level=qty,
            note="Initial Stock",
        )
        product.stock_quantity = qty
        product.history.append(entry)
        logger.info("stock_initialized", product_id=product_id, qty=qty)
        return entry

    @staticmethod
    def _require_positive(operation: str, qty: int) -> None:
        if qty <= 0:
            raise EmptyOperationError(operation, f"quantity must be positive, got {qty}")

    @staticmethod
    def _append(
        product: Product,
        change: int,
        reason: StockHistoryType,
        note: str | None,
    ) -> StockHistoryEntry:
        # Entry is fully built before either field is touched
        entry = StockHistoryEntry(
            type=reason,
            quantity_change=change,
            new_stock_level=product.stock_quantity + change,
            note=note,
        )
        product.stock_quantity = entry.new_stock_level
        product.history.append(entry)
        return entry
