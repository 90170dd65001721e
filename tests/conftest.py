"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_state, get_sync
from src.api.main import app
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.core.entities import (
    Customer,
    PaymentStatus,
    ProductType,
    StockHistoryEntry,
    StockHistoryType,
)
from tests.factories import make_product, make_sale


@pytest.fixture
def mock_persistence() -> AsyncMock:
    persistence = AsyncMock()
    persistence.load_products.return_value = []
    persistence.load_sales.return_value = []
    persistence.load_customers.return_value = []
    return persistence


@pytest.fixture
def sync(mock_persistence: AsyncMock) -> PersistenceSync:
    return PersistenceSync(mock_persistence)


@pytest.fixture
def customer() -> Customer:
    return Customer(id="cust-1", name="Ama Mensah", phone="0244000000")


@pytest.fixture
def state(customer: Customer) -> PosState:
    """Two products (A: 5 units, B: 1 unit) and one registered customer."""
    return PosState(
        products=[
            make_product("prod-a", stock=5, selling_price=100.0, tax_rate=10.0),
            make_product(
                "prod-b",
                stock=1,
                selling_price=250.0,
                type=ProductType.CHINOS,
                color="Khaki",
                size="34",
            ),
        ],
        customers=[customer],
    )


@pytest.fixture
def pending_order_state() -> PosState:
    """State holding one PENDING order T1 of 2 x prod-a (stock already deducted)."""
    product = make_product(
        "prod-a",
        stock=8,
        history=[
            StockHistoryEntry(
                type=StockHistoryType.INITIAL,
                quantity_change=10,
                new_stock_level=10,
                note="Initial Stock",
            ),
            StockHistoryEntry(
                type=StockHistoryType.SALE,
                quantity_change=-2,
                new_stock_level=8,
                note="Order T1 (Pending Payment)",
            ),
        ],
    )
    return PosState(
        products=[product],
        sales=[
            make_sale(
                "sale-1",
                quantity=2,
                total_price=200.0,
                customer_id="cust-1",
                customer_name="Ama Mensah",
                payment_status=PaymentStatus.PENDING,
            )
        ],
        customers=[Customer(id="cust-1", name="Ama Mensah")],
    )


@pytest.fixture
async def api_client(
    state: PosState, sync: PersistenceSync
) -> AsyncGenerator[AsyncClient, None]:
    """Client against the app with in-memory state and a mocked backend."""
    app.dependency_overrides[get_state] = lambda: state
    app.dependency_overrides[get_sync] = lambda: sync
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_state, None)
    app.dependency_overrides.pop(get_sync, None)
