"""Bulk product edits: stock levels and pricing across a selection."""

import math

from src.application.dto.requests import BulkRepriceRequest, BulkStockUpdateRequest
from src.application.dto.responses import (
    BulkRepriceResponse,
    BulkStockUpdateResponse,
    ProductResponse,
)
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.application.use_cases.adjust_stock import StockChangeResult, stock_change_response
from src.config import get_logger
from src.core.entities.product import Product, StockHistoryType
from src.core.exceptions import ValidationError
from src.core.services.pricing import price_from_cost

logger = get_logger(__name__)

BULK_EDIT_NOTE = "Bulk Update"


class BulkStockUpdateUseCase:
    """SET every selected product to a level, or ADD a delta to each.

    Targets are floored to whole units and clamped at zero. Unknown ids
    fail the whole batch before anything changes.
    """

    def __init__(
        self,
        state: PosState | None = None,
        sync: PersistenceSync | None = None,
    ):
        self._state = state
        self._sync = sync

    def _get_state(self) -> PosState:
        if self._state is None:
            from src.application.services import get_pos_state

            self._state = get_pos_state()
        return self._state

    async def _get_sync(self) -> PersistenceSync:
        if self._sync is None:
            from src.application.services import get_persistence_sync

            self._sync = await get_persistence_sync()
        return self._sync

    async def execute(self, request: BulkStockUpdateRequest) -> list[StockChangeResult]:
        """Execute bulk stock update use case."""
        state = self._get_state()
        sync = await self._get_sync()
        product_ids = list(dict.fromkeys(request.product_ids))

        async with state.lock_products(product_ids):
            products = [state.get_product(product_id) for product_id in product_ids]

            results: list[StockChangeResult] = []
            for product in products:
                if request.mode == "SET":
                    target = request.value
                else:
                    target = product.stock_quantity + request.value
                entry = state.ledger.set_absolute(
                    product.id,
                    max(0, math.floor(target)),
                    StockHistoryType.BULK_EDIT,
                    request.note or BULK_EDIT_NOTE,
                )
                results.append(StockChangeResult(product=product, entry=entry))

        await sync.save_products([r.product for r in results if r.changed])

        logger.info(
            "bulk_stock_updated",
            mode=request.mode,
            value=request.value,
            selected=len(results),
            changed=sum(1 for r in results if r.changed),
        )
        return results

    def to_response(self, results: list[StockChangeResult]) -> BulkStockUpdateResponse:
        """Convert result to API response."""
        changed = sum(1 for r in results if r.changed)
        return BulkStockUpdateResponse(
            updated=[stock_change_response(r) for r in results],
            changed_count=changed,
            unchanged_count=len(results) - changed,
        )


class BulkRepriceUseCase:
    """Apply a new margin and/or tax rate and recompute selling prices.

    Past sale lines keep the prices they were booked at.
    """

    def __init__(
        self,
        state: PosState | None = None,
        sync: PersistenceSync | None = None,
    ):
        self._state = state
        self._sync = sync

    def _get_state(self) -> PosState:
        if self._state is None:
            from src.application.services import get_pos_state

            self._state = get_pos_state()
        return self._state

    async def _get_sync(self) -> PersistenceSync:
        if self._sync is None:
            from src.application.services import get_persistence_sync

            self._sync = await get_persistence_sync()
        return self._sync

    async def execute(self, request: BulkRepriceRequest) -> list[Product]:
        """Execute bulk reprice use case."""
        if request.profit_margin is None and request.tax_rate_pct is None:
            raise ValidationError(
                "profit_margin", "profit margin or tax rate must be provided"
            )

        state = self._get_state()
        sync = await self._get_sync()
        product_ids = list(dict.fromkeys(request.product_ids))

        async with state.lock_products(product_ids):
            products = [state.get_product(product_id) for product_id in product_ids]
            for product in products:
                if request.profit_margin is not None:
                    product.profit_margin = request.profit_margin
                if request.tax_rate_pct is not None:
                    product.tax_rate = request.tax_rate_pct
                _, _, product.selling_price = price_from_cost(
                    product.total_cost, product.profit_margin, product.tax_rate
                )

        await sync.save_products(products)

        logger.info(
            "bulk_reprice_complete",
            products=len(products),
            profit_margin=request.profit_margin,
            tax_rate=request.tax_rate_pct,
        )
        return products

    def to_response(self, products: list[Product]) -> BulkRepriceResponse:
        """Convert result to API response."""
        return BulkRepriceResponse(products=[ProductResponse.from_entity(p) for p in products])
