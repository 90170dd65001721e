"""Cancel Order Use Case: PENDING -> CANCELLED with stock restoration."""

from dataclasses import dataclass

from src.application.dto.responses import OrderResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger
from src.core.entities.order import Order
from src.core.entities.product import Product, StockHistoryType
from src.core.entities.sale import PaymentStatus
from src.core.services.order_lifecycle import (
    apply_payment_transition,
    validate_payment_transition,
)

logger = get_logger(__name__)


@dataclass
class CancelResult:
    """Result of cancelling an order."""

    order: Order
    products: list[Product]


class CancelOrderUseCase:
    """Cancel an unpaid order and release its reserved stock."""

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

    async def execute(self, order_key: str) -> CancelResult:
        """Execute cancel order use case."""
        state = self._get_state()
        sync = await self._get_sync()

        async with state.lock_order(order_key):
            order = state.get_order(order_key)
            validate_payment_transition(order, PaymentStatus.CANCELLED)

            lines = order.sale_lines
            product_ids = [line.product_id for line in lines]
            async with state.lock_products(product_ids):
                for product_id in product_ids:
                    state.get_product(product_id)

                apply_payment_transition(order, PaymentStatus.CANCELLED)
                note = f"Cancelled Order {order.short_code}"
                for line in lines:
                    state.ledger.restore(
                        line.product_id,
                        line.quantity,
                        StockHistoryType.CANCELLATION,
                        note,
                    )

        products = [state.get_product(product_id) for product_id in dict.fromkeys(product_ids)]
        await sync.save_products(products)
        await sync.save_sales(lines)

        logger.info(
            "order_cancelled",
            order_key=order.key,
            lines=len(lines),
            units_restored=sum(line.quantity for line in lines),
        )
        return CancelResult(order=order, products=products)

    def to_response(self, result: CancelResult) -> OrderResponse:
        """Convert result to API response."""
        return OrderResponse.from_entity(result.order)
