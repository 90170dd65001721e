"""Abstract interface for the persistence collaborator."""

from abc import ABC, abstractmethod

from src.core.entities.customer import Customer
from src.core.entities.product import Product
from src.core.entities.sale import Sale


class IPersistence(ABC):
    """Interface for product, sale and customer persistence.

    Loaders return ``None`` when the backing store is unavailable; the
    caller then keeps working against its in-memory collections.
    """

    @abstractmethod
    async def load_products(self) -> list[Product] | None:
        """Load every product with its stock history."""
        pass

    @abstractmethod
    async def load_sales(self) -> list[Sale] | None:
        """Load every sale line."""
        pass

    @abstractmethod
    async def load_customers(self) -> list[Customer] | None:
        """Load every customer."""
        pass

    @abstractmethod
    async def save_product(self, product: Product) -> None:
        """Upsert a product and append any new history entries."""
        pass

    @abstractmethod
    async def save_products(self, products: list[Product]) -> None:
        """Upsert several products in one unit of work."""
        pass

    @abstractmethod
    async def save_sale(self, sale: Sale) -> None:
        """Upsert a sale line."""
        pass

    @abstractmethod
    async def save_sales(self, sales: list[Sale]) -> None:
        """Upsert several sale lines in one unit of work."""
        pass

    @abstractmethod
    async def save_customer(self, customer: Customer) -> None:
        """Upsert a customer."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: str) -> None:
        """Remove a product that no sale references."""
        pass
