"""Persistence backend that keeps nothing."""

from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.product import Product
from src.core.entities.sale import Sale
from src.core.interfaces.persistence import IPersistence

logger = get_logger(__name__)


class NullPersistence(IPersistence):
    """Offline backend: loads report unavailable, writes are dropped.

    The POS then runs purely against its in-memory collections.
    """

    async def load_products(self) -> list[Product] | None:
        return None

    async def load_sales(self) -> list[Sale] | None:
        return None

    async def load_customers(self) -> list[Customer] | None:
        return None

    async def save_product(self, product: Product) -> None:
        logger.debug("null_persistence_write", record="product", id=product.id)

    async def save_products(self, products: list[Product]) -> None:
        logger.debug("null_persistence_write", record="products", count=len(products))

    async def save_sale(self, sale: Sale) -> None:
        logger.debug("null_persistence_write", record="sale", id=sale.id)

    async def save_sales(self, sales: list[Sale]) -> None:
        logger.debug("null_persistence_write", record="sales", count=len(sales))

    async def save_customer(self, customer: Customer) -> None:
        logger.debug("null_persistence_write", record="customer", id=customer.id)

    async def delete_product(self, product_id: str) -> None:
        logger.debug("null_persistence_write", record="delete_product", id=product_id)
