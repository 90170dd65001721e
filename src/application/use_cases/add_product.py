"""Add Product Use Case: register a product, price it and open its ledger."""

from src.application.dto.requests import AddProductRequest, PriceQuoteRequest
from src.application.dto.responses import PriceQuoteResponse, ProductResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger, get_settings
from src.core.entities.product import Product
from src.core.services.pricing import PriceBreakdown, calculate_price

logger = get_logger(__name__)


def quote_price(request: PriceQuoteRequest | AddProductRequest) -> PriceBreakdown:
    """Run the price calculator, filling unset rates from settings."""
    pricing = get_settings().pricing
    return calculate_price(
        cost_cfa=request.cost_cfa,
        exchange_rate=request.exchange_rate,
        service_rate_pct=(
            pricing.service_rate_pct
            if request.service_rate_pct is None
            else request.service_rate_pct
        ),
        misc_rate_pct=(
            pricing.misc_rate_pct if request.misc_rate_pct is None else request.misc_rate_pct
        ),
        profit_margin=request.profit_margin,
        tax_rate_pct=(
            pricing.tax_rate_pct if request.tax_rate_pct is None else request.tax_rate_pct
        ),
    )


def breakdown_to_response(breakdown: PriceBreakdown) -> PriceQuoteResponse:
    return PriceQuoteResponse(
        base_cost_ghs=breakdown.base_cost_ghs,
        service_charge=breakdown.service_charge,
        misc_charge=breakdown.misc_charge,
        total_cost=breakdown.total_cost,
        price_pre_tax=breakdown.price_pre_tax,
        tax_amount=breakdown.tax_amount,
        final_price=breakdown.final_price,
    )


class AddProductUseCase:
    """Create a product from costing inputs with an INITIAL stock entry."""

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

    async def execute(self, request: AddProductRequest) -> Product:
        """Execute add product use case."""
        state = self._get_state()
        sync = await self._get_sync()

        breakdown = quote_price(request)
        tax_rate = request.tax_rate_pct
        if tax_rate is None:
            tax_rate = get_settings().pricing.tax_rate_pct

        product = Product(
            brand=request.brand,
            type=request.type,
            color=request.color,
            model=request.model,
            size=request.size,
            cost_cfa=request.cost_cfa,
            exchange_rate=request.exchange_rate,
            cost_ghs_base=breakdown.base_cost_ghs,
            service_charge=breakdown.service_charge,
            misc_charge=breakdown.misc_charge,
            profit_margin=request.profit_margin,
            tax_rate=tax_rate,
            selling_price=breakdown.final_price,
        )

        state.add_product(product)
        state.ledger.record_initial(product.id, request.initial_quantity)
        await sync.save_product(product)

        logger.info(
            "product_added",
            product_id=product.id,
            name=product.display_name,
            selling_price=product.selling_price,
            stock=product.stock_quantity,
        )
        return product

    def to_response(self, product: Product) -> ProductResponse:
        """Convert result to API response."""
        return ProductResponse.from_entity(product)
