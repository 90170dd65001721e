"""Tests for the exception-to-response mapping."""

import json
from unittest.mock import MagicMock

import pytest

from src.api.middleware.error_handler import error_response_for
from src.core.exceptions import (
    DatabaseError,
    EmptyOperationError,
    InsufficientStockError,
    InvalidTransitionError,
    OrderNotFoundError,
    OverReturnError,
    ValidationError,
)


@pytest.fixture
def request_stub() -> MagicMock:
    request = MagicMock()
    request.url.path = "/api/orders"
    request.state.request_id = "req-1"
    return request


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (OrderNotFoundError("T1"), 404),
        (InsufficientStockError("prod-a", 2, 1), 409),
        (InvalidTransitionError("T1", "PAID", "CANCELLED"), 409),
        (OverReturnError("sale-1", 3, 1), 409),
        (EmptyOperationError("checkout", "cart has no lines"), 400),
        (ValidationError("payment_method", "required"), 400),
        (DatabaseError("save_sales", "database is locked"), 500),
        (RuntimeError("boom"), 500),
    ],
)
def test_status_mapping(request_stub: MagicMock, exc: Exception, status: int):
    response = error_response_for(request_stub, exc)

    assert response.status_code == status


def test_domain_error_body(request_stub: MagicMock):
    response = error_response_for(request_stub, InsufficientStockError("prod-a", 2, 1))

    body = json.loads(response.body)
    assert body["error_code"] == "INSUFFICIENT_STOCK"
    assert body["path"] == "/api/orders"
    assert body["hint"] == "Reduce the quantity or restock the product first."
    assert body["detail"] == "product_id=prod-a, requested=2, available=1"


def test_unexpected_error_hides_message(request_stub: MagicMock):
    response = error_response_for(request_stub, RuntimeError("secret detail"))

    body = json.loads(response.body)
    assert body["error_code"] == "RuntimeError"
    assert body["message"] == "Internal server error"
