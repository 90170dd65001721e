"""Tests for the inventory ledger."""

import pytest

from src.core.entities.product import StockHistoryType
from src.core.exceptions import (
    EmptyOperationError,
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)
from src.core.services.inventory_ledger import InventoryLedger
from tests.factories import make_product


@pytest.fixture
def products():
    return {
        "prod-a": make_product("prod-a", stock=5),
        "prod-b": make_product("prod-b", stock=1),
    }


@pytest.fixture
def ledger(products):
    return InventoryLedger(products)


def assert_balanced(product):
    assert product.stock_quantity == sum(e.quantity_change for e in product.history)


class TestDeduct:
    def test_deduct_appends_sale_entry(self, ledger, products):
        entry = ledger.deduct("prod-a", 3, note="Order X (Pending Payment)")
        product = products["prod-a"]
        assert product.stock_quantity == 2
        assert entry.type == StockHistoryType.SALE
        assert entry.quantity_change == -3
        assert entry.new_stock_level == 2
        assert product.history[-1] is entry
        assert_balanced(product)

    def test_deduct_to_zero(self, ledger, products):
        ledger.deduct("prod-b", 1)
        assert products["prod-b"].stock_quantity == 0

    def test_insufficient_stock_leaves_product_untouched(self, ledger, products):
        with pytest.raises(InsufficientStockError) as exc_info:
            ledger.deduct("prod-b", 2)
        assert exc_info.value.details == {
            "product_id": "prod-b",
            "requested": 2,
            "available": 1,
        }
        assert products["prod-b"].stock_quantity == 1
        assert len(products["prod-b"].history) == 1

    def test_zero_quantity_rejected(self, ledger):
        with pytest.raises(EmptyOperationError):
            ledger.deduct("prod-a", 0)

    def test_unknown_product(self, ledger):
        with pytest.raises(ProductNotFoundError):
            ledger.deduct("missing", 1)

    def test_wrong_reason_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.deduct("prod-a", 1, reason=StockHistoryType.RESTOCK)


class TestRestore:
    @pytest.mark.parametrize(
        "reason",
        [StockHistoryType.RETURN, StockHistoryType.CANCELLATION, StockHistoryType.RESTOCK],
    )
    def test_restore_reasons(self, ledger, products, reason):
        entry = ledger.restore("prod-a", 4, reason)
        assert entry.type == reason
        assert entry.quantity_change == 4
        assert products["prod-a"].stock_quantity == 9
        assert_balanced(products["prod-a"])

    def test_restore_has_no_ceiling(self, ledger, products):
        ledger.restore("prod-b", 1000, StockHistoryType.RETURN)
        assert products["prod-b"].stock_quantity == 1001

    def test_negative_quantity_rejected(self, ledger):
        with pytest.raises(EmptyOperationError):
            ledger.restore("prod-a", -2, StockHistoryType.RESTOCK)

    def test_sale_is_not_a_restore_reason(self, ledger):
        with pytest.raises(ValidationError):
            ledger.restore("prod-a", 1, StockHistoryType.SALE)


class TestSetAbsolute:
    def test_set_records_difference(self, ledger, products):
        entry = ledger.set_absolute("prod-a", 12)
        assert entry.type == StockHistoryType.MANUAL_EDIT
        assert entry.quantity_change == 7
        assert products["prod-a"].stock_quantity == 12
        assert_balanced(products["prod-a"])

    def test_set_down(self, ledger, products):
        entry = ledger.set_absolute("prod-a", 2, StockHistoryType.BULK_EDIT, "Bulk Update")
        assert entry.quantity_change == -3
        assert entry.note == "Bulk Update"

    def test_negative_target_clamps_to_zero(self, ledger, products):
        entry = ledger.set_absolute("prod-a", -4)
        assert entry.quantity_change == -5
        assert products["prod-a"].stock_quantity == 0

    def test_same_level_is_noop(self, ledger, products):
        assert ledger.set_absolute("prod-a", 5) is None
        assert len(products["prod-a"].history) == 1


class TestBatchAndInitial:
    def test_check_available_passes(self, ledger):
        ledger.check_available({"prod-a": 5, "prod-b": 1})

    def test_check_available_reports_short_product(self, ledger, products):
        with pytest.raises(InsufficientStockError) as exc_info:
            ledger.check_available({"prod-a": 2, "prod-b": 3})
        assert exc_info.value.details["product_id"] == "prod-b"
        assert products["prod-a"].stock_quantity == 5

    def test_record_initial(self, products):
        product = make_product("prod-new", stock=0, history=[])
        products[product.id] = product
        entry = InventoryLedger(products).record_initial(product.id, 20)
        assert entry.type == StockHistoryType.INITIAL
        assert entry.note == "Initial Stock"
        assert product.stock_quantity == 20
        assert_balanced(product)

    def test_record_initial_only_once(self, ledger):
        with pytest.raises(ValidationError):
            ledger.record_initial("prod-a", 3)

    def test_conservation_over_mixed_operations(self, ledger, products):
        ledger.deduct("prod-a", 2)
        ledger.restore("prod-a", 1, StockHistoryType.RETURN)
        ledger.set_absolute("prod-a", 9)
        ledger.restore("prod-a", 3, StockHistoryType.RESTOCK)
        ledger.deduct("prod-a", 12)
        product = products["prod-a"]
        assert product.stock_quantity == 0
        assert_balanced(product)
        levels = [e.new_stock_level for e in product.history]
        assert levels == [5, 3, 4, 9, 12, 0]
