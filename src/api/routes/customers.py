"""Customer endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_register_customer_use_case, get_state
from src.application.dto.requests import RegisterCustomerRequest
from src.application.dto.responses import (
    CustomerListResponse,
    CustomerResponse,
    ErrorResponse,
)
from src.application.state import PosState
from src.application.use_cases import RegisterCustomerUseCase

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def register_customer(
    request: RegisterCustomerRequest,
    use_case: RegisterCustomerUseCase = Depends(get_register_customer_use_case),
) -> CustomerResponse:
    customer = await use_case.execute(request)
    return use_case.to_response(customer)


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    search: str | None = None,
    state: PosState = Depends(get_state),
) -> CustomerListResponse:
    """Customers sorted by total spend, biggest first."""
    customers = sorted(state.customers.values(), key=lambda c: c.total_spent, reverse=True)
    if search:
        needle = search.lower()
        customers = [c for c in customers if needle in c.name.lower() or needle in c.phone]
    return CustomerListResponse(
        customers=[CustomerResponse.from_entity(c) for c in customers],
        total=len(customers),
    )


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_customer(
    customer_id: str,
    state: PosState = Depends(get_state),
) -> CustomerResponse:
    return CustomerResponse.from_entity(state.get_customer(customer_id))
