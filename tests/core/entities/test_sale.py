"""Tests for sale line and order entities."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.core.entities import (
    FulfillmentStatus,
    LineKind,
    Order,
    PaymentStatus,
    Sale,
    StandaloneRef,
    TransactionRef,
)
from tests.factories import make_sale


class TestSale:
    """Tests for Sale entity."""

    def test_defaults(self):
        sale = Sale(product_id="p", product_name="P", quantity=1, total_price=10.0)
        assert isinstance(sale.order, StandaloneRef)
        assert sale.kind == LineKind.SALE
        assert sale.payment_status == PaymentStatus.PENDING
        assert sale.fulfillment_status == FulfillmentStatus.NEW
        assert sale.customer_name == "Walk-in Customer"
        assert sale.returned_quantity == 0

    def test_group_key_uses_transaction_id(self):
        sale = make_sale("s1", transaction_id="ABCD1234")
        assert sale.transaction_id == "ABCD1234"
        assert sale.group_key == "ABCD1234"

    def test_standalone_group_key_is_own_id(self):
        sale = make_sale("s1", transaction_id=None)
        assert sale.transaction_id is None
        assert sale.group_key == "s1"

    def test_order_ref_from_dict(self):
        sale = Sale.model_validate(
            {
                "product_id": "p",
                "product_name": "P",
                "quantity": 1,
                "total_price": 10.0,
                "order": {"kind": "transaction", "transaction_id": "T9"},
            }
        )
        assert isinstance(sale.order, TransactionRef)
        assert sale.group_key == "T9"

    def test_sale_line_quantity_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            make_sale("s1", quantity=0)

    def test_returned_cannot_exceed_quantity(self):
        with pytest.raises(PydanticValidationError):
            make_sale("s1", quantity=2, returned_quantity=3)

    def test_refund_line_must_be_negative(self):
        with pytest.raises(PydanticValidationError):
            make_sale("r1", kind=LineKind.REFUND, refund_of="s1", quantity=1)

    def test_refund_line_must_reference_original(self):
        with pytest.raises(PydanticValidationError):
            make_sale("r1", kind=LineKind.REFUND, quantity=-1, total_price=-10.0)

    def test_returnable_quantity(self):
        sale = make_sale("s1", quantity=10, returned_quantity=4)
        assert sale.returnable_quantity == 6

        refund = make_sale(
            "r1", kind=LineKind.REFUND, refund_of="s1", quantity=-4, total_price=-40.0
        )
        assert refund.is_refund
        assert refund.returnable_quantity == 0


class TestOrder:
    """Tests for the Order aggregate."""

    def test_totals_net_out_refunds(self):
        order = Order(
            key="T1",
            lines=[
                make_sale("s1", quantity=2, total_price=200.0, tax_amount=18.0),
                make_sale("s2", quantity=1, total_price=50.0),
                make_sale(
                    "r1",
                    kind=LineKind.REFUND,
                    refund_of="s1",
                    quantity=-1,
                    total_price=-100.0,
                    tax_amount=-9.0,
                ),
            ],
        )
        assert order.gross_total == 250.0
        assert order.net_total == 150.0
        assert order.tax_total == 9.0
        assert order.item_count == 3
        assert len(order.sale_lines) == 2
        assert len(order.refund_lines) == 1

    def test_status_comes_from_sale_lines(self):
        order = Order(
            key="T1",
            lines=[
                make_sale(
                    "r1",
                    kind=LineKind.REFUND,
                    refund_of="s1",
                    quantity=-1,
                    total_price=-10.0,
                    payment_status=PaymentStatus.PAID,
                ),
                make_sale("s1", payment_status=PaymentStatus.PENDING),
            ],
        )
        assert order.payment_status == PaymentStatus.PENDING

    def test_is_consistent(self):
        consistent = Order(key="T1", lines=[make_sale("s1"), make_sale("s2")])
        assert consistent.is_consistent

        mixed = Order(
            key="T1",
            lines=[make_sale("s1"), make_sale("s2", payment_status=PaymentStatus.PAID)],
        )
        assert not mixed.is_consistent

    def test_short_code_and_date(self):
        early = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
        order = Order(
            key="abcdef123456",
            lines=[make_sale("s1"), make_sale("s2", date=early)],
        )
        assert order.short_code == "ABCDEF12"
        assert order.date == early
