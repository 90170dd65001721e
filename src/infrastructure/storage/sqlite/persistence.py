"""SQLite implementation of the POS persistence collaborator."""

import json
from typing import Any

import aiosqlite

from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.product import Product, StockHistoryEntry
from src.core.entities.sale import Sale
from src.core.exceptions import ValidationError
from src.core.interfaces.persistence import IPersistence
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_PRODUCT_UPSERT = """
    INSERT INTO products (
        id, brand, type, color, model, size,
        cost_cfa, exchange_rate, cost_ghs_base, service_charge, misc_charge,
        profit_margin, tax_rate, selling_price, stock_quantity, date_added,
        updated_at
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ON CONFLICT(id) DO UPDATE SET
        brand = excluded.brand,
        type = excluded.type,
        color = excluded.color,
        model = excluded.model,
        size = excluded.size,
        cost_cfa = excluded.cost_cfa,
        exchange_rate = excluded.exchange_rate,
        cost_ghs_base = excluded.cost_ghs_base,
        service_charge = excluded.service_charge,
        misc_charge = excluded.misc_charge,
        profit_margin = excluded.profit_margin,
        tax_rate = excluded.tax_rate,
        selling_price = excluded.selling_price,
        stock_quantity = excluded.stock_quantity,
        updated_at = CURRENT_TIMESTAMP
"""

# History rows are immutable; re-sending a known entry is a no-op
_HISTORY_INSERT = """
    INSERT OR IGNORE INTO stock_history (
        id, product_id, seq, date, type, quantity_change, new_stock_level, note
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

_SALE_UPSERT = """
    INSERT INTO sales (
        id, transaction_id, kind, refund_of, product_id, product_name,
        quantity, total_price, tax_amount, salesman, customer_id, customer_name,
        date, returned_quantity, payment_status, payment_method, payment_date,
        cashier_name, fulfillment_status
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        returned_quantity = excluded.returned_quantity,
        payment_status = excluded.payment_status,
        payment_method = excluded.payment_method,
        payment_date = excluded.payment_date,
        cashier_name = excluded.cashier_name,
        fulfillment_status = excluded.fulfillment_status
"""

_CUSTOMER_UPSERT = """
    INSERT INTO customers (
        id, name, phone, email, total_spent, last_purchase_date, preferences
    ) VALUES (?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        name = excluded.name,
        phone = excluded.phone,
        email = excluded.email,
        total_spent = excluded.total_spent,
        last_purchase_date = excluded.last_purchase_date,
        preferences = excluded.preferences
"""


class SQLitePersistence(IPersistence):
    """Products, stock history, sale lines and customers in SQLite.

    Loaders report an unreachable database as ``None``; writers raise and
    leave retrying to the caller.
    """

    # =========================================================================
    # Loading
    # =========================================================================

    async def load_products(self) -> list[Product] | None:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM products ORDER BY date_added")
                product_rows = await cursor.fetchall()
                cursor = await conn.execute(
                    "SELECT * FROM stock_history ORDER BY product_id, seq"
                )
                history_rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.warning("persistence_load_failed", collection="products", error=str(e))
            return None

        history: dict[str, list[StockHistoryEntry]] = {}
        for row in history_rows:
            history.setdefault(row["product_id"], []).append(self._row_to_history(row))

        return [self._row_to_product(row, history.get(row["id"], [])) for row in product_rows]

    async def load_sales(self) -> list[Sale] | None:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM sales ORDER BY date, rowid")
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.warning("persistence_load_failed", collection="sales", error=str(e))
            return None
        return [self._row_to_sale(row) for row in rows]

    async def load_customers(self) -> list[Customer] | None:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM customers ORDER BY name")
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.warning("persistence_load_failed", collection="customers", error=str(e))
            return None
        return [self._row_to_customer(row) for row in rows]

    # =========================================================================
    # Writing
    # =========================================================================

    async def save_product(self, product: Product) -> None:
        await self.save_products([product])

    async def save_products(self, products: list[Product]) -> None:
        async with get_transaction() as conn:
            for product in products:
                await self._write_product(conn, product)
        logger.debug("products_saved", count=len(products))

    async def save_sale(self, sale: Sale) -> None:
        await self.save_sales([sale])

    async def save_sales(self, sales: list[Sale]) -> None:
        async with get_transaction() as conn:
            await conn.executemany(_SALE_UPSERT, [self._sale_params(s) for s in sales])
        logger.debug("sales_saved", count=len(sales))

    async def save_customer(self, customer: Customer) -> None:
        async with get_transaction() as conn:
            await conn.execute(
                _CUSTOMER_UPSERT,
                (
                    customer.id,
                    customer.name,
                    customer.phone,
                    customer.email,
                    customer.total_spent,
                    _iso(customer.last_purchase_date),
                    json.dumps(customer.preferences),
                ),
            )

    async def delete_product(self, product_id: str) -> None:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM sales WHERE product_id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row[0]:
                raise ValidationError(
                    "product_id", "product is referenced by sale lines", product_id
                )
            await conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
        logger.info("product_deleted", product_id=product_id)

    # =========================================================================
    # Mapping
    # =========================================================================

    @staticmethod
    async def _write_product(conn: aiosqlite.Connection, product: Product) -> None:
        await conn.execute(
            _PRODUCT_UPSERT,
            (
                product.id,
                product.brand,
                product.type.value,
                product.color,
                product.model,
                product.size,
                product.cost_cfa,
                product.exchange_rate,
                product.cost_ghs_base,
                product.service_charge,
                product.misc_charge,
                product.profit_margin,
                product.tax_rate,
                product.selling_price,
                product.stock_quantity,
                product.date_added.isoformat(),
            ),
        )
        await conn.executemany(
            _HISTORY_INSERT,
            [
                (
                    entry.id,
                    product.id,
                    seq,
                    entry.date.isoformat(),
                    entry.type.value,
                    entry.quantity_change,
                    entry.new_stock_level,
                    entry.note,
                )
                for seq, entry in enumerate(product.history)
            ],
        )

    @staticmethod
    def _sale_params(sale: Sale) -> tuple[Any, ...]:
        return (
            sale.id,
            sale.transaction_id,
            sale.kind.value,
            sale.refund_of,
            sale.product_id,
            sale.product_name,
            sale.quantity,
            sale.total_price,
            sale.tax_amount,
            sale.salesman,
            sale.customer_id,
            sale.customer_name,
            sale.date.isoformat(),
            sale.returned_quantity,
            sale.payment_status.value,
            sale.payment_method.value if sale.payment_method else None,
            _iso(sale.payment_date),
            sale.cashier_name,
            sale.fulfillment_status.value,
        )

    @staticmethod
    def _row_to_history(row: aiosqlite.Row) -> StockHistoryEntry:
        return StockHistoryEntry(
            id=row["id"],
            date=row["date"],
            type=row["type"],
            quantity_change=row["quantity_change"],
            new_stock_level=row["new_stock_level"],
            note=row["note"],
        )

    @staticmethod
    def _row_to_product(row: aiosqlite.Row, history: list[StockHistoryEntry]) -> Product:
        return Product(
            id=row["id"],
            brand=row["brand"],
            type=row["type"],
            color=row["color"],
            model=row["model"],
            size=row["size"],
            cost_cfa=row["cost_cfa"],
            exchange_rate=row["exchange_rate"],
            cost_ghs_base=row["cost_ghs_base"],
            service_charge=row["service_charge"],
            misc_charge=row["misc_charge"],
            profit_margin=row["profit_margin"],
            tax_rate=row["tax_rate"],
            selling_price=row["selling_price"],
            stock_quantity=row["stock_quantity"],
            date_added=row["date_added"],
            history=history,
        )

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row) -> Sale:
        if row["transaction_id"]:
            order = {"kind": "transaction", "transaction_id": row["transaction_id"]}
        else:
            order = {"kind": "standalone"}
        return Sale.model_validate(
            {
                "id": row["id"],
                "order": order,
                "kind": row["kind"],
                "refund_of": row["refund_of"],
                "product_id": row["product_id"],
                "product_name": row["product_name"],
                "quantity": row["quantity"],
                "total_price": row["total_price"],
                "tax_amount": row["tax_amount"],
                "salesman": row["salesman"],
                "customer_id": row["customer_id"],
                "customer_name": row["customer_name"],
                "date": row["date"],
                "returned_quantity": row["returned_quantity"],
                "payment_status": row["payment_status"],
                "payment_method": row["payment_method"],
                "payment_date": row["payment_date"],
                "cashier_name": row["cashier_name"],
                "fulfillment_status": row["fulfillment_status"],
            }
        )

    @staticmethod
    def _row_to_customer(row: aiosqlite.Row) -> Customer:
        try:
            preferences = json.loads(row["preferences"] or "[]")
        except (json.JSONDecodeError, TypeError):
            preferences = []
        return Customer(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            email=row["email"],
            total_spent=row["total_spent"],
            last_purchase_date=row["last_purchase_date"],
            preferences=preferences,
        )


def _iso(value: Any) -> str | None:
    return value.isoformat() if value is not None else None
