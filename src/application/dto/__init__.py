"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    AddProductRequest,
    AdjustStockRequest,
    AdvanceFulfillmentRequest,
    BulkRepriceRequest,
    BulkStockUpdateRequest,
    CartItemRequest,
    CheckoutRequest,
    ConfirmPaymentRequest,
    DailySummaryRequest,
    PaymentBody,
    PriceQuoteRequest,
    ProcessReturnRequest,
    RegisterCustomerRequest,
    RestockBody,
    RestockRequest,
    ReturnBody,
    SetStockBody,
)
from src.application.dto.responses import (
    BulkRepriceResponse,
    BulkStockUpdateResponse,
    CheckoutResponse,
    CustomerListResponse,
    CustomerResponse,
    DailySummaryResponse,
    ErrorResponse,
    HealthResponse,
    OrderListResponse,
    OrderResponse,
    PriceQuoteResponse,
    ProductHistoryResponse,
    ProductListResponse,
    ProductResponse,
    ProviderHealthResponse,
    ReturnResponse,
    SaleListResponse,
    SaleResponse,
    StockChangeResponse,
    StockHistoryEntryResponse,
    StockReportResponse,
    SyncStatusResponse,
)

__all__ = [
    # Requests
    "AddProductRequest",
    "AdjustStockRequest",
    "BulkStockUpdateRequest",
    "RestockRequest",
    "BulkRepriceRequest",
    "PriceQuoteRequest",
    "RegisterCustomerRequest",
    "CartItemRequest",
    "CheckoutRequest",
    "ConfirmPaymentRequest",
    "AdvanceFulfillmentRequest",
    "ProcessReturnRequest",
    "DailySummaryRequest",
    "SetStockBody",
    "RestockBody",
    "PaymentBody",
    "ReturnBody",
    # Responses
    "ProductResponse",
    "ProductListResponse",
    "ProductHistoryResponse",
    "StockHistoryEntryResponse",
    "StockChangeResponse",
    "BulkStockUpdateResponse",
    "BulkRepriceResponse",
    "PriceQuoteResponse",
    "SaleResponse",
    "SaleListResponse",
    "OrderResponse",
    "OrderListResponse",
    "CheckoutResponse",
    "ReturnResponse",
    "CustomerResponse",
    "CustomerListResponse",
    "DailySummaryResponse",
    "StockReportResponse",
    "SyncStatusResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
