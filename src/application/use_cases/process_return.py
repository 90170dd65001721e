"""Process Return Use Case: partial or full return against one sale line."""

from dataclasses import dataclass

from src.application.dto.requests import ProcessReturnRequest
from src.application.dto.responses import ProductResponse, ReturnResponse, SaleResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.product import Product, StockHistoryType, utcnow
from src.core.entities.sale import (
    FulfillmentStatus,
    LineKind,
    PaymentMethod,
    PaymentStatus,
    Sale,
)
from src.core.exceptions import (
    EmptyOperationError,
    InvalidTransitionError,
    OverReturnError,
)
from src.core.services.customer_spend import apply_spend

logger = get_logger(__name__)

REFUND_PREFIX = "RETURN: "


@dataclass
class ReturnResult:
    """Result of a return."""

    original: Sale
    refund: Sale
    product: Product
    customer: Customer | None = None


class ProcessReturnUseCase:
    """Book a compensating refund line and put the units back in stock.

    Unit price and tax always come from the original line divided by its
    original quantity, however many units were returned before.
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

    async def execute(self, request: ProcessReturnRequest) -> ReturnResult:
        """Execute process return use case."""
        state = self._get_state()
        sync = await self._get_sync()
        sale = state.get_sale(request.sale_id)
        qty = request.quantity

        logger.info("return_started", sale_id=sale.id, quantity=qty)

        async with state.lock_order(sale.group_key):
            async with state.lock_products([sale.product_id]):
                # 1. Validate
                if qty <= 0:
                    raise EmptyOperationError("return", f"quantity must be positive, got {qty}")
                if sale.is_refund:
                    raise InvalidTransitionError(
                        sale.group_key, "REFUND", "RETURN", "refund lines cannot be returned"
                    )
                if sale.payment_status != PaymentStatus.PAID:
                    raise InvalidTransitionError(
                        sale.group_key,
                        sale.payment_status.value,
                        "RETURN",
                        "only paid lines can be returned",
                    )
                if qty > sale.returnable_quantity:
                    raise OverReturnError(sale.id, qty, sale.returnable_quantity)
                product = state.get_product(sale.product_id)

                # 2. Compensating line
                refunded_at = utcnow()
                refund = Sale(
                    order=sale.order.model_copy(),
                    kind=LineKind.REFUND,
                    refund_of=sale.id,
                    product_id=sale.product_id,
                    product_name=f"{REFUND_PREFIX}{sale.product_name}",
                    quantity=-qty,
                    total_price=-(sale.total_price / sale.quantity) * qty,
                    tax_amount=-(sale.tax_amount / sale.quantity) * qty,
                    salesman=sale.salesman,
                    customer_id=sale.customer_id,
                    customer_name=sale.customer_name,
                    date=refunded_at,
                    payment_status=PaymentStatus.PAID,
                    payment_method=PaymentMethod.CASH,
                    payment_date=refunded_at,
                    fulfillment_status=FulfillmentStatus.COMPLETED,
                )

                # 3. Apply
                sale.returned_quantity += qty
                state.ledger.restore(
                    product.id,
                    qty,
                    StockHistoryType.RETURN,
                    f"Return from {sale.customer_name}",
                )
                state.add_sales([refund])

                customer = None
                if sale.customer_id:
                    customer = state.customers.get(sale.customer_id)
                    if customer is None:
                        logger.warning(
                            "order_customer_missing",
                            order_key=sale.group_key,
                            customer_id=sale.customer_id,
                        )
                    else:
                        apply_spend(customer, refund.total_price, at=refunded_at)

        await sync.save_product(product)
        await sync.save_sales([sale, refund])
        if customer is not None:
            await sync.save_customer(customer)

        logger.info(
            "return_processed",
            sale_id=sale.id,
            refund_id=refund.id,
            quantity=qty,
            amount=refund.total_price,
            returned_total=sale.returned_quantity,
        )
        return ReturnResult(original=sale, refund=refund, product=product, customer=customer)

    def to_response(self, result: ReturnResult) -> ReturnResponse:
        """Convert result to API response."""
        return ReturnResponse(
            original=SaleResponse.from_entity(result.original),
            refund=SaleResponse.from_entity(result.refund),
            product=ProductResponse.from_entity(result.product),
        )
