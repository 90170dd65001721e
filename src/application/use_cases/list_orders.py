"""Order views: cashier queue, pickup queue and fulfillment boards."""

from enum import Enum

from src.application.dto.responses import OrderListResponse, OrderResponse
from src.application.state import PosState
from src.config import get_settings
from src.core.entities.order import Order
from src.core.entities.sale import FulfillmentStatus, Sale
from src.core.services.order_grouping import (
    awaiting_pickup,
    filter_orders,
    group_by_transaction,
    in_fulfillment,
    pending_payment,
    search_by_code,
)


class OrderView(str, Enum):
    """Named selections of orders shown to staff."""

    ALL = "all"
    PENDING = "pending"
    PICKUP = "pickup"
    PROCESSING = "processing"
    READY = "ready"
    COMPLETED = "completed"


_VIEW_FILTERS = {
    OrderView.PENDING: pending_payment,
    OrderView.PICKUP: awaiting_pickup,
    OrderView.PROCESSING: in_fulfillment(FulfillmentStatus.PROCESSING),
    OrderView.READY: in_fulfillment(FulfillmentStatus.READY),
    OrderView.COMPLETED: in_fulfillment(FulfillmentStatus.COMPLETED),
}


class ListOrdersUseCase:
    """Group sale lines into orders for one view, optionally searched by code."""

    def __init__(self, state: PosState | None = None):
        self._state = state

    def _get_state(self) -> PosState:
        if self._state is None:
            from src.application.services import get_pos_state

            self._state = get_pos_state()
        return self._state

    async def execute(
        self,
        view: OrderView = OrderView.ALL,
        code: str | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        sales: list[Sale] = self._get_state().sales
        if view == OrderView.ALL:
            orders = group_by_transaction(sales)
        else:
            orders = filter_orders(sales, _VIEW_FILTERS[view])

        if code:
            orders = search_by_code(orders, code)

        if limit is None and view == OrderView.COMPLETED:
            limit = get_settings().inventory.completed_log_limit
        if limit is not None:
            orders = orders[:limit]
        return orders

    def to_response(self, view: OrderView, orders: list[Order]) -> OrderListResponse:
        return OrderListResponse(
            view=view.value,
            orders=[OrderResponse.from_entity(o) for o in orders],
            total=len(orders),
        )
