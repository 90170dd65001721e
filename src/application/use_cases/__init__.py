"""Application use cases."""

from src.application.use_cases.add_product import (
    AddProductUseCase,
    breakdown_to_response,
    quote_price,
)
from src.application.use_cases.adjust_stock import (
    AdjustStockUseCase,
    RestockUseCase,
    StockChangeResult,
)
from src.application.use_cases.advance_fulfillment import AdvanceFulfillmentUseCase
from src.application.use_cases.bulk_update import BulkRepriceUseCase, BulkStockUpdateUseCase
from src.application.use_cases.cancel_order import CancelOrderUseCase, CancelResult
from src.application.use_cases.checkout import CheckoutResult, CheckoutUseCase
from src.application.use_cases.confirm_payment import ConfirmPaymentUseCase, PaymentResult
from src.application.use_cases.list_orders import ListOrdersUseCase, OrderView
from src.application.use_cases.process_return import ProcessReturnUseCase, ReturnResult
from src.application.use_cases.register_customer import RegisterCustomerUseCase
from src.application.use_cases.reports import DailySummaryUseCase, StockReportUseCase

__all__ = [
    # Products
    "AddProductUseCase",
    "AdjustStockUseCase",
    "RestockUseCase",
    "BulkStockUpdateUseCase",
    "BulkRepriceUseCase",
    "StockChangeResult",
    "quote_price",
    "breakdown_to_response",
    # Orders
    "CheckoutUseCase",
    "CheckoutResult",
    "ConfirmPaymentUseCase",
    "PaymentResult",
    "CancelOrderUseCase",
    "CancelResult",
    "AdvanceFulfillmentUseCase",
    "ProcessReturnUseCase",
    "ReturnResult",
    "ListOrdersUseCase",
    "OrderView",
    # Customers
    "RegisterCustomerUseCase",
    # Reports
    "DailySummaryUseCase",
    "StockReportUseCase",
]
