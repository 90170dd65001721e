"""Stock edit use cases: manual correction and restock of a single product."""

from dataclasses import dataclass

from src.application.dto.requests import AdjustStockRequest, RestockRequest
from src.application.dto.responses import (
    ProductResponse,
    StockChangeResponse,
    StockHistoryEntryResponse,
)
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger
from src.core.entities.product import Product, StockHistoryEntry, StockHistoryType

logger = get_logger(__name__)

MANUAL_EDIT_NOTE = "Manual Correction"
RESTOCK_NOTE = "Restock"


@dataclass
class StockChangeResult:
    """Product after an edit and the entry it produced, if any."""

    product: Product
    entry: StockHistoryEntry | None

    @property
    def changed(self) -> bool:
        return self.entry is not None


def stock_change_response(result: StockChangeResult) -> StockChangeResponse:
    return StockChangeResponse(
        product=ProductResponse.from_entity(result.product),
        changed=result.changed,
        entry=StockHistoryEntryResponse.from_entity(result.entry) if result.entry else None,
    )


class AdjustStockUseCase:
    """Set a product's stock to an absolute level.

    An edit to the current level is a no-op: nothing is appended and
    nothing is written.
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

    async def execute(self, request: AdjustStockRequest) -> StockChangeResult:
        """Execute adjust stock use case."""
        state = self._get_state()
        sync = await self._get_sync()

        async with state.lock_products([request.product_id]):
            product = state.get_product(request.product_id)
            entry = state.ledger.set_absolute(
                product.id,
                request.new_quantity,
                StockHistoryType.MANUAL_EDIT,
                request.note or MANUAL_EDIT_NOTE,
            )

        if entry is not None:
            await sync.save_product(product)
        return StockChangeResult(product=product, entry=entry)

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        """Convert result to API response."""
        return stock_change_response(result)


class RestockUseCase:
    """Receive goods for an existing product."""

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

    async def execute(self, request: RestockRequest) -> StockChangeResult:
        """Execute restock use case."""
        logger.info(
            "restock_started",
            product_id=request.product_id,
            quantity=request.quantity,
        )
        state = self._get_state()
        sync = await self._get_sync()

        async with state.lock_products([request.product_id]):
            product = state.get_product(request.product_id)
            entry = state.ledger.restore(
                product.id,
                request.quantity,
                StockHistoryType.RESTOCK,
                request.note or RESTOCK_NOTE,
            )

        await sync.save_product(product)
        return StockChangeResult(product=product, entry=entry)

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        """Convert result to API response."""
        return stock_change_response(result)
