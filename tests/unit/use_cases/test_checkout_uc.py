"""Tests for CheckoutUseCase."""

import asyncio

import pytest

from src.application.dto.requests import CartItemRequest, CheckoutRequest
from src.application.state import PosState
from src.application.use_cases.checkout import CheckoutUseCase
from src.core.entities.product import StockHistoryType
from src.core.entities.sale import FulfillmentStatus, PaymentStatus
from src.core.exceptions import (
    CustomerNotFoundError,
    EmptyOperationError,
    InsufficientStockError,
    ProductNotFoundError,
)
from tests.factories import make_product


@pytest.fixture
def use_case(state, sync):
    return CheckoutUseCase(state=state, sync=sync)


def cart(*items, **kwargs) -> CheckoutRequest:
    return CheckoutRequest(
        items=[CartItemRequest(product_id=p, quantity=q) for p, q in items],
        **kwargs,
    )


class TestCheckoutUseCase:
    async def test_single_line_checkout(self, sync, mock_persistence):
        """3 units at 100 incl. 10% tax leave 17 of 20 in stock."""
        state = PosState(products=[make_product("P", stock=20, selling_price=100, tax_rate=10)])
        use_case = CheckoutUseCase(state=state, sync=sync)

        result = await use_case.execute(cart(("P", 3), salesman="Kofi"))

        assert len(result.order.lines) == 1
        line = result.order.lines[0]
        assert line.quantity == 3
        assert line.total_price == 300.0
        assert line.tax_amount == pytest.approx(27.27, abs=0.01)
        assert line.payment_status == PaymentStatus.PENDING
        assert line.fulfillment_status == FulfillmentStatus.NEW
        assert line.salesman == "Kofi"
        assert line.customer_name == "Walk-in Customer"

        product = state.products["P"]
        assert product.stock_quantity == 17
        entry = product.history[-1]
        assert entry.type == StockHistoryType.SALE
        assert entry.quantity_change == -3
        assert entry.note == f"Order {result.order.key} (Pending Payment)"

        assert state.sales == result.order.lines
        mock_persistence.save_products.assert_awaited_once()
        mock_persistence.save_sales.assert_awaited_once()

    async def test_failing_line_leaves_every_product_untouched(
        self, use_case, state, mock_persistence
    ):
        """A(5) and B(1); cart 2xA + 3xB must fail without deducting A."""
        with pytest.raises(InsufficientStockError) as exc_info:
            await use_case.execute(cart(("prod-a", 2), ("prod-b", 3)))

        assert exc_info.value.details["product_id"] == "prod-b"
        assert state.products["prod-a"].stock_quantity == 5
        assert state.products["prod-b"].stock_quantity == 1
        assert len(state.products["prod-a"].history) == 1
        assert state.sales == []
        mock_persistence.save_products.assert_not_awaited()
        mock_persistence.save_sales.assert_not_awaited()

    async def test_lines_share_one_transaction_id(self, use_case, state):
        result = await use_case.execute(cart(("prod-a", 1), ("prod-b", 1)))

        keys = {line.group_key for line in result.order.lines}
        assert keys == {result.order.key}
        assert len(result.order.key) == 8
        assert result.order.key == result.order.key.upper()
        assert state.has_order(result.order.key)

    async def test_duplicate_cart_lines_are_merged(self, use_case, state):
        result = await use_case.execute(cart(("prod-a", 2), ("prod-a", 1)))

        assert len(result.order.lines) == 1
        assert result.order.lines[0].quantity == 3
        assert state.products["prod-a"].stock_quantity == 2

    async def test_merged_demand_checked_against_stock(self, use_case, state):
        with pytest.raises(InsufficientStockError):
            await use_case.execute(cart(("prod-a", 3), ("prod-a", 3)))
        assert state.products["prod-a"].stock_quantity == 5

    async def test_customer_snapshot(self, use_case, customer):
        result = await use_case.execute(cart(("prod-a", 1), customer_id=customer.id))
        line = result.order.lines[0]
        assert line.customer_id == "cust-1"
        assert line.customer_name == "Ama Mensah"
        # Spend is credited on payment, not at booking
        assert customer.total_spent == 0.0

    async def test_empty_cart(self, use_case):
        with pytest.raises(EmptyOperationError):
            await use_case.execute(cart())

    async def test_zero_quantity_line(self, use_case, state):
        with pytest.raises(EmptyOperationError):
            await use_case.execute(cart(("prod-a", 1), ("prod-b", 0)))
        assert state.products["prod-a"].stock_quantity == 5

    async def test_unknown_product(self, use_case, state):
        with pytest.raises(ProductNotFoundError):
            await use_case.execute(cart(("prod-a", 1), ("ghost", 1)))
        assert state.products["prod-a"].stock_quantity == 5

    async def test_unknown_customer(self, use_case, state):
        with pytest.raises(CustomerNotFoundError):
            await use_case.execute(cart(("prod-a", 1), customer_id="nobody"))
        assert state.products["prod-a"].stock_quantity == 5

    async def test_concurrent_checkouts_never_oversell(self, use_case, state):
        """Five single-unit carts race for prod-b which has one unit."""
        results = await asyncio.gather(
            *(use_case.execute(cart(("prod-b", 1))) for _ in range(5)),
            return_exceptions=True,
        )
        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, InsufficientStockError)]
        assert len(successes) == 1
        assert len(failures) == 4
        assert state.products["prod-b"].stock_quantity == 0

    async def test_persistence_failure_keeps_booking(self, use_case, state, sync, mock_persistence):
        mock_persistence.save_sales.side_effect = RuntimeError("disk full")

        result = await use_case.execute(cart(("prod-a", 1)))

        assert state.products["prod-a"].stock_quantity == 4
        assert result.order.lines[0] in state.sales
        assert sync.pending_operations == ["save_sales:1"]

    async def test_to_response(self, use_case):
        result = await use_case.execute(cart(("prod-a", 2)))
        response = use_case.to_response(result)
        assert response.order.key == result.order.key
        assert response.order.payment_status == "PENDING"
        assert response.order.gross_total == 200.0
        assert response.products[0].stock_quantity == 3
