"""Confirm Payment Use Case: PENDING -> PAID for a whole order."""

from dataclasses import dataclass

from src.application.dto.requests import ConfirmPaymentRequest
from src.application.dto.responses import OrderResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.order import Order
from src.core.entities.sale import PaymentStatus
from src.core.services.customer_spend import apply_spend
from src.core.services.order_lifecycle import apply_payment_transition

logger = get_logger(__name__)


@dataclass
class PaymentResult:
    """Result of confirming a payment."""

    order: Order
    customer: Customer | None = None


class ConfirmPaymentUseCase:
    """Settle a pending order and credit the buyer's spend."""

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

    async def execute(self, request: ConfirmPaymentRequest) -> PaymentResult:
        """Execute confirm payment use case."""
        state = self._get_state()
        sync = await self._get_sync()

        async with state.lock_order(request.order_key):
            order = state.get_order(request.order_key)
            lines = apply_payment_transition(
                order,
                PaymentStatus.PAID,
                method=request.payment_method,
                cashier_name=request.cashier_name,
            )

            customer = None
            if order.customer_id:
                customer = state.customers.get(order.customer_id)
                if customer is None:
                    logger.warning(
                        "order_customer_missing",
                        order_key=order.key,
                        customer_id=order.customer_id,
                    )
                else:
                    purchased = [
                        state.products[line.product_id]
                        for line in lines
                        if line.product_id in state.products
                    ]
                    apply_spend(
                        customer,
                        sum(line.total_price for line in lines),
                        purchased,
                        at=lines[0].payment_date,
                    )

        await sync.save_sales(lines)
        if customer is not None:
            await sync.save_customer(customer)

        logger.info(
            "order_paid",
            order_key=order.key,
            method=request.payment_method.value,
            cashier=request.cashier_name,
            total=order.gross_total,
        )
        return PaymentResult(order=order, customer=customer)

    def to_response(self, result: PaymentResult) -> OrderResponse:
        """Convert result to API response."""
        return OrderResponse.from_entity(result.order)
