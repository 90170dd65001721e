"""Advance Fulfillment Use Case: move a paid order along the pickup board."""

from src.application.dto.requests import AdvanceFulfillmentRequest
from src.application.dto.responses import OrderResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger
from src.core.entities.order import Order
from src.core.services.order_lifecycle import apply_fulfillment_transition

logger = get_logger(__name__)


class AdvanceFulfillmentUseCase:
    """PROCESSING -> READY and READY -> COMPLETED. No stock effect."""

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

    async def execute(self, request: AdvanceFulfillmentRequest) -> Order:
        """Execute advance fulfillment use case."""
        state = self._get_state()
        sync = await self._get_sync()

        async with state.lock_order(request.order_key):
            order = state.get_order(request.order_key)
            previous = order.fulfillment_status
            lines = apply_fulfillment_transition(order, request.target)

        await sync.save_sales(lines)

        logger.info(
            "order_fulfillment_advanced",
            order_key=order.key,
            from_status=previous.value,
            to_status=request.target.value,
        )
        return order

    def to_response(self, order: Order) -> OrderResponse:
        """Convert result to API response."""
        return OrderResponse.from_entity(order)
