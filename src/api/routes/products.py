"""Product and stock management endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_add_product_use_case,
    get_adjust_stock_use_case,
    get_bulk_reprice_use_case,
    get_bulk_stock_use_case,
    get_restock_use_case,
    get_state,
)
from src.application.dto.requests import (
    AddProductRequest,
    AdjustStockRequest,
    BulkRepriceRequest,
    BulkStockUpdateRequest,
    PriceQuoteRequest,
    RestockBody,
    RestockRequest,
    SetStockBody,
)
from src.application.dto.responses import (
    BulkRepriceResponse,
    BulkStockUpdateResponse,
    ErrorResponse,
    PriceQuoteResponse,
    ProductHistoryResponse,
    ProductListResponse,
    ProductResponse,
    StockChangeResponse,
    StockHistoryEntryResponse,
)
from src.application.state import PosState
from src.application.use_cases import (
    AddProductUseCase,
    AdjustStockUseCase,
    BulkRepriceUseCase,
    BulkStockUpdateUseCase,
    RestockUseCase,
    breakdown_to_response,
    quote_price,
)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def add_product(
    request: AddProductRequest,
    use_case: AddProductUseCase = Depends(get_add_product_use_case),
) -> ProductResponse:
    """Register a product, compute its selling price and record opening stock."""
    product = await use_case.execute(request)
    return use_case.to_response(product)


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = None,
    in_stock_only: bool = False,
    state: PosState = Depends(get_state),
) -> ProductListResponse:
    """List products, optionally filtered by a name fragment."""
    products = list(state.products.values())
    if search:
        needle = search.lower()
        products = [
            p
            for p in products
            if needle in p.display_name.lower() or needle in p.model.lower()
        ]
    if in_stock_only:
        products = [p for p in products if p.stock_quantity > 0]
    return ProductListResponse(
        products=[ProductResponse.from_entity(p) for p in products],
        total=len(products),
    )


@router.post("/price-quote", response_model=PriceQuoteResponse)
async def price_quote(request: PriceQuoteRequest) -> PriceQuoteResponse:
    """Run the price calculator without creating anything."""
    return breakdown_to_response(quote_price(request))


@router.post(
    "/bulk/stock",
    response_model=BulkStockUpdateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def bulk_stock_update(
    request: BulkStockUpdateRequest,
    use_case: BulkStockUpdateUseCase = Depends(get_bulk_stock_use_case),
) -> BulkStockUpdateResponse:
    """Set or shift the stock of several products."""
    results = await use_case.execute(request)
    return use_case.to_response(results)


@router.post(
    "/bulk/pricing",
    response_model=BulkRepriceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def bulk_reprice(
    request: BulkRepriceRequest,
    use_case: BulkRepriceUseCase = Depends(get_bulk_reprice_use_case),
) -> BulkRepriceResponse:
    """Apply a margin and/or tax rate to several products."""
    products = await use_case.execute(request)
    return use_case.to_response(products)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: str,
    state: PosState = Depends(get_state),
) -> ProductResponse:
    return ProductResponse.from_entity(state.get_product(product_id))


@router.get(
    "/{product_id}/history",
    response_model=ProductHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product_history(
    product_id: str,
    state: PosState = Depends(get_state),
) -> ProductHistoryResponse:
    """Stock ledger of a product, oldest entry first."""
    product = state.get_product(product_id)
    return ProductHistoryResponse(
        product_id=product.id,
        stock_quantity=product.stock_quantity,
        entries=[StockHistoryEntryResponse.from_entity(e) for e in product.history],
    )


@router.put(
    "/{product_id}/stock",
    response_model=StockChangeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_stock(
    product_id: str,
    body: SetStockBody,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> StockChangeResponse:
    """Manual stock correction to an absolute level."""
    result = await use_case.execute(
        AdjustStockRequest(
            product_id=product_id,
            new_quantity=body.new_quantity,
            note=body.note,
        )
    )
    return use_case.to_response(result)


@router.post(
    "/{product_id}/restock",
    response_model=StockChangeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def restock(
    product_id: str,
    body: RestockBody,
    use_case: RestockUseCase = Depends(get_restock_use_case),
) -> StockChangeResponse:
    """Receive goods for a product."""
    result = await use_case.execute(
        RestockRequest(product_id=product_id, quantity=body.quantity, note=body.note)
    )
    return use_case.to_response(result)
