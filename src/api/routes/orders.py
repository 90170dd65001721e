"""Order endpoints: checkout, payment, cancellation and fulfillment."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_advance_fulfillment_use_case,
    get_cancel_order_use_case,
    get_checkout_use_case,
    get_confirm_payment_use_case,
    get_list_orders_use_case,
    get_state,
)
from src.application.dto.requests import (
    AdvanceFulfillmentRequest,
    CheckoutRequest,
    ConfirmPaymentRequest,
    PaymentBody,
)
from src.application.dto.responses import (
    CheckoutResponse,
    ErrorResponse,
    OrderListResponse,
    OrderResponse,
)
from src.application.state import PosState
from src.application.use_cases import (
    AdvanceFulfillmentUseCase,
    CancelOrderUseCase,
    CheckoutUseCase,
    ConfirmPaymentUseCase,
    ListOrdersUseCase,
    OrderView,
)
from src.core.entities.sale import FulfillmentStatus

router = APIRouter(prefix="/api/orders", tags=["orders"])

_TRANSITION_ERRORS = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def checkout(
    request: CheckoutRequest,
    use_case: CheckoutUseCase = Depends(get_checkout_use_case),
) -> CheckoutResponse:
    """Book a cart as one pending order; stock is reserved immediately."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    view: OrderView = OrderView.ALL,
    code: str | None = None,
    limit: int | None = None,
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),
) -> OrderListResponse:
    """Orders of one view, newest first."""
    orders = await use_case.execute(view=view, code=code, limit=limit)
    return use_case.to_response(view, orders)


@router.get(
    "/{order_key}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_order(
    order_key: str,
    state: PosState = Depends(get_state),
) -> OrderResponse:
    return OrderResponse.from_entity(state.get_order(order_key))


@router.post("/{order_key}/pay", response_model=OrderResponse, responses=_TRANSITION_ERRORS)
async def pay_order(
    order_key: str,
    body: PaymentBody,
    use_case: ConfirmPaymentUseCase = Depends(get_confirm_payment_use_case),
) -> OrderResponse:
    """Confirm payment (cashier) or verify a mobile-money payment (salesman)."""
    result = await use_case.execute(
        ConfirmPaymentRequest(
            order_key=order_key,
            payment_method=body.payment_method,
            cashier_name=body.cashier_name,
        )
    )
    return use_case.to_response(result)


@router.post("/{order_key}/cancel", response_model=OrderResponse, responses=_TRANSITION_ERRORS)
async def cancel_order(
    order_key: str,
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case),
) -> OrderResponse:
    """Cancel an unpaid order and release its stock."""
    result = await use_case.execute(order_key)
    return use_case.to_response(result)


@router.post("/{order_key}/ready", response_model=OrderResponse, responses=_TRANSITION_ERRORS)
async def mark_ready(
    order_key: str,
    use_case: AdvanceFulfillmentUseCase = Depends(get_advance_fulfillment_use_case),
) -> OrderResponse:
    order = await use_case.execute(
        AdvanceFulfillmentRequest(order_key=order_key, target=FulfillmentStatus.READY)
    )
    return use_case.to_response(order)


@router.post("/{order_key}/complete", response_model=OrderResponse, responses=_TRANSITION_ERRORS)
async def mark_completed(
    order_key: str,
    use_case: AdvanceFulfillmentUseCase = Depends(get_advance_fulfillment_use_case),
) -> OrderResponse:
    order = await use_case.execute(
        AdvanceFulfillmentRequest(order_key=order_key, target=FulfillmentStatus.COMPLETED)
    )
    return use_case.to_response(order)
