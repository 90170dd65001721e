"""Tests for customer spend bookkeeping."""

from datetime import UTC, datetime

import pytest

from src.core.entities.customer import Customer
from src.core.entities.product import ProductType
from src.core.services.customer_spend import apply_spend
from tests.factories import make_product


@pytest.fixture
def customer():
    return Customer(name="Ama", preferences=["Jeans 32"])


def test_spend_accumulates(customer):
    at = datetime(2024, 3, 1, tzinfo=UTC)
    apply_spend(customer, 300.0, at=at)
    apply_spend(customer, 50.0, at=at)
    assert customer.total_spent == 350.0
    assert customer.last_purchase_date == at


def test_refund_reduces_spend(customer):
    apply_spend(customer, 300.0)
    apply_spend(customer, -100.0)
    assert customer.total_spent == 200.0


def test_preferences_merge_without_duplicates(customer):
    purchased = [
        make_product("a", type=ProductType.JEANS, size="32"),
        make_product("b", type=ProductType.CHINOS, size="34"),
        make_product("c", type=ProductType.CHINOS, size="34"),
    ]
    apply_spend(customer, 10.0, purchased)
    assert customer.preferences == ["Jeans 32", "Chinos 34"]


def test_defaults_last_purchase_to_now(customer):
    apply_spend(customer, 1.0)
    assert customer.last_purchase_date is not None
