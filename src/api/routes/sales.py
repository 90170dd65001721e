"""Sale line endpoints: the sales ledger and returns."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_process_return_use_case, get_state
from src.application.dto.requests import ProcessReturnRequest, ReturnBody
from src.application.dto.responses import (
    ErrorResponse,
    ReturnResponse,
    SaleListResponse,
    SaleResponse,
)
from src.application.state import PosState
from src.application.use_cases import ProcessReturnUseCase
from src.core.entities.sale import PaymentStatus

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get("", response_model=SaleListResponse)
async def list_sales(
    payment_status: PaymentStatus | None = None,
    customer_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
    state: PosState = Depends(get_state),
) -> SaleListResponse:
    """Sale lines, newest first."""
    sales = sorted(state.sales, key=lambda s: s.date, reverse=True)
    if payment_status is not None:
        sales = [s for s in sales if s.payment_status == payment_status]
    if customer_id is not None:
        sales = [s for s in sales if s.customer_id == customer_id]
    page = sales[offset : offset + limit]
    return SaleListResponse(
        sales=[SaleResponse.from_entity(s) for s in page],
        total=len(sales),
    )


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: str,
    state: PosState = Depends(get_state),
) -> SaleResponse:
    return SaleResponse.from_entity(state.get_sale(sale_id))


@router.post(
    "/{sale_id}/returns",
    response_model=ReturnResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def return_items(
    sale_id: str,
    body: ReturnBody,
    use_case: ProcessReturnUseCase = Depends(get_process_return_use_case),
) -> ReturnResponse:
    """Return units of a paid sale line."""
    result = await use_case.execute(ProcessReturnRequest(sale_id=sale_id, quantity=body.quantity))
    return use_case.to_response(result)
