"""Checkout Use Case: book a cart as one pending order and reserve its stock."""

from dataclasses import dataclass
from uuid import uuid4

from src.application.dto.requests import CheckoutRequest
from src.application.dto.responses import CheckoutResponse, OrderResponse, ProductResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger, get_settings
from src.core.entities.order import Order
from src.core.entities.product import Product, StockHistoryType, utcnow
from src.core.entities.sale import Sale, TransactionRef
from src.core.exceptions import EmptyOperationError
from src.core.services.pricing import split_tax

logger = get_logger(__name__)


@dataclass
class CheckoutResult:
    """Result of booking a cart."""

    order: Order
    products: list[Product]


class CheckoutUseCase:
    """Turn a cart into PENDING sale lines sharing one transaction id.

    All lines are validated against current stock before the first
    deduction, so a failing cart leaves every product untouched.
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

    async def execute(self, request: CheckoutRequest) -> CheckoutResult:
        """Execute checkout use case."""
        if not request.items:
            raise EmptyOperationError("checkout", "cart has no lines")

        # Same product on several cart lines is booked as one line
        demand: dict[str, int] = {}
        for item in request.items:
            if item.quantity <= 0:
                raise EmptyOperationError(
                    "checkout",
                    f"quantity for {item.product_id} must be positive, got {item.quantity}",
                )
            demand[item.product_id] = demand.get(item.product_id, 0) + item.quantity

        logger.info(
            "checkout_started",
            lines=len(demand),
            units=sum(demand.values()),
            customer_id=request.customer_id,
        )

        state = self._get_state()
        sync = await self._get_sync()
        walk_in = get_settings().inventory.walk_in_customer_name

        async with state.lock_products(demand):
            # 1. Validate everything before touching stock
            state.ledger.check_available(demand)
            customer = state.get_customer(request.customer_id) if request.customer_id else None

            # 2. Build sale lines
            transaction_id = self._new_transaction_id(state)
            booked_at = utcnow()
            lines: list[Sale] = []
            for product_id, qty in demand.items():
                product = state.get_product(product_id)
                line_total = product.selling_price * qty
                lines.append(
                    Sale(
                        order=TransactionRef(transaction_id=transaction_id),
                        product_id=product.id,
                        product_name=product.display_name,
                        quantity=qty,
                        total_price=line_total,
                        tax_amount=split_tax(line_total, product.tax_rate).tax_amount,
                        salesman=request.salesman,
                        customer_id=customer.id if customer else None,
                        customer_name=customer.name if customer else walk_in,
                        date=booked_at,
                    )
                )

            # 3. Reserve stock
            note = f"Order {transaction_id} (Pending Payment)"
            for product_id, qty in demand.items():
                state.ledger.deduct(product_id, qty, StockHistoryType.SALE, note)
            state.add_sales(lines)

        products = [state.get_product(product_id) for product_id in demand]

        # 4. One logical batch to persistence
        await sync.save_products(products)
        await sync.save_sales(lines)

        order = Order(key=transaction_id, lines=lines)
        logger.info(
            "checkout_complete",
            transaction_id=transaction_id,
            total=order.gross_total,
        )
        return CheckoutResult(order=order, products=products)

    @staticmethod
    def _new_transaction_id(state: PosState) -> str:
        while True:
            code = uuid4().hex[:8].upper()
            if not state.has_order(code):
                return code

    def to_response(self, result: CheckoutResult) -> CheckoutResponse:
        """Convert result to API response."""
        return CheckoutResponse(
            order=OrderResponse.from_entity(result.order),
            products=[ProductResponse.from_entity(p) for p in result.products],
        )
