"""
In-memory POS state.

Authoritative copy of products, sale lines and customers for the running
process. Use cases read and mutate it under the locks it hands out and
then pass the changed records to the persistence sync.
"""

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import AsyncExitStack, asynccontextmanager

from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.order import Order
from src.core.entities.product import Product
from src.core.entities.sale import Sale
from src.core.exceptions import (
    CustomerNotFoundError,
    OrderNotFoundError,
    ProductNotFoundError,
    SaleNotFoundError,
)
from src.core.interfaces.persistence import IPersistence
from src.core.services.inventory_ledger import InventoryLedger
from src.core.services.order_grouping import group_by_transaction

logger = get_logger(__name__)


class KeyedLocks:
    """One asyncio lock per key, dropped once nobody holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class PosState:
    """Products, sales and customers plus the locks that guard them."""

    def __init__(
        self,
        products: Iterable[Product] = (),
        sales: Iterable[Sale] = (),
        customers: Iterable[Customer] = (),
    ) -> None:
        self.products: dict[str, Product] = {p.id: p for p in products}
        self.sales: list[Sale] = list(sales)
        self.customers: dict[str, Customer] = {c.id: c for c in customers}
        # Bound to the dict object; load() refills it in place
        self.ledger = InventoryLedger(self.products)

        self._product_locks = KeyedLocks()
        self._order_locks = KeyedLocks()

    # =========================================================================
    # Locking
    # =========================================================================

    @asynccontextmanager
    async def lock_products(self, product_ids: Iterable[str]) -> AsyncIterator[None]:
        """Hold the locks of several products, acquired in id order."""
        async with AsyncExitStack() as stack:
            for product_id in sorted(set(product_ids)):
                await stack.enter_async_context(self._product_locks.hold(product_id))
            yield

    @asynccontextmanager
    async def lock_order(self, order_key: str) -> AsyncIterator[None]:
        async with self._order_locks.hold(order_key):
            yield

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_product(self, product_id: str) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.customers.get(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    def get_sale(self, sale_id: str) -> Sale:
        for sale in self.sales:
            if sale.id == sale_id:
                return sale
        raise SaleNotFoundError(sale_id)

    def orders(self) -> list[Order]:
        return group_by_transaction(self.sales)

    def get_order(self, order_key: str) -> Order:
        lines = [s for s in self.sales if s.group_key == order_key]
        if not lines:
            raise OrderNotFoundError(order_key)
        return Order(key=order_key, lines=lines)

    def has_order(self, order_key: str) -> bool:
        return any(s.group_key == order_key for s in self.sales)

    # =========================================================================
    # Mutation
    # =========================================================================

    def add_product(self, product: Product) -> None:
        self.products[product.id] = product

    def add_customer(self, customer: Customer) -> None:
        self.customers[customer.id] = customer

    def add_sales(self, lines: Iterable[Sale]) -> None:
        self.sales.extend(lines)

    async def load(self, persistence: IPersistence) -> None:
        """Replace collections with persisted data.

        A loader returning ``None`` (store unavailable) keeps the
        collection currently held in memory.
        """
        products = await persistence.load_products()
        if products is not None:
            self.products.clear()
            self.products.update((p.id, p) for p in products)

        sales = await persistence.load_sales()
        if sales is not None:
            self.sales[:] = sales

        customers = await persistence.load_customers()
        if customers is not None:
            self.customers.clear()
            self.customers.update((c.id, c) for c in customers)

        logger.info(
            "state_loaded",
            products=len(self.products),
            sales=len(self.sales),
            customers=len(self.customers),
            offline=products is None or sales is None or customers is None,
        )
