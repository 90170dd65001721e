"""
Dependency injection container for FastAPI.

Provides state, persistence sync and use case instances to route
handlers. Tests override ``get_state`` and ``get_sync``.
"""

from functools import lru_cache

from fastapi import Depends

from src.application.services import get_persistence_sync, get_pos_state
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.application.use_cases import (
    AddProductUseCase,
    AdjustStockUseCase,
    AdvanceFulfillmentUseCase,
    BulkRepriceUseCase,
    BulkStockUpdateUseCase,
    CancelOrderUseCase,
    CheckoutUseCase,
    ConfirmPaymentUseCase,
    DailySummaryUseCase,
    ListOrdersUseCase,
    ProcessReturnUseCase,
    RegisterCustomerUseCase,
    RestockUseCase,
    StockReportUseCase,
)
from src.config import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Core dependencies
def get_state() -> PosState:
    """Get in-memory POS state."""
    return get_pos_state()


async def get_sync() -> PersistenceSync:
    """Get persistence sync."""
    return await get_persistence_sync()


# Product use cases
def get_add_product_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> AddProductUseCase:
    return AddProductUseCase(state=state, sync=sync)


def get_adjust_stock_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> AdjustStockUseCase:
    return AdjustStockUseCase(state=state, sync=sync)


def get_restock_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> RestockUseCase:
    return RestockUseCase(state=state, sync=sync)


def get_bulk_stock_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> BulkStockUpdateUseCase:
    return BulkStockUpdateUseCase(state=state, sync=sync)


def get_bulk_reprice_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> BulkRepriceUseCase:
    return BulkRepriceUseCase(state=state, sync=sync)


# Order use cases
def get_checkout_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> CheckoutUseCase:
    return CheckoutUseCase(state=state, sync=sync)


def get_confirm_payment_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> ConfirmPaymentUseCase:
    return ConfirmPaymentUseCase(state=state, sync=sync)


def get_cancel_order_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> CancelOrderUseCase:
    return CancelOrderUseCase(state=state, sync=sync)


def get_advance_fulfillment_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> AdvanceFulfillmentUseCase:
    return AdvanceFulfillmentUseCase(state=state, sync=sync)


def get_process_return_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> ProcessReturnUseCase:
    return ProcessReturnUseCase(state=state, sync=sync)


def get_list_orders_use_case(state: PosState = Depends(get_state)) -> ListOrdersUseCase:
    return ListOrdersUseCase(state=state)


# Customer use cases
def get_register_customer_use_case(
    state: PosState = Depends(get_state),
    sync: PersistenceSync = Depends(get_sync),
) -> RegisterCustomerUseCase:
    return RegisterCustomerUseCase(state=state, sync=sync)


# Report use cases
def get_daily_summary_use_case(state: PosState = Depends(get_state)) -> DailySummaryUseCase:
    return DailySummaryUseCase(state=state)


def get_stock_report_use_case(state: PosState = Depends(get_state)) -> StockReportUseCase:
    return StockReportUseCase(state=state)
