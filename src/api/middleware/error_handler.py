"""
Error responses for the POS API.

Every failure leaves the API as an ``ErrorResponse`` body. Domain errors
keep their code and message, and their details are flattened into
``detail``. Anything unexpected becomes a 500 whose message is hidden
from the till.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    ConfigurationError,
    EmptyOperationError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
    OverReturnError,
    PosError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

# Checked in order; subclasses must precede their bases
_STATUS_RULES: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InsufficientStockError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (OverReturnError, status.HTTP_409_CONFLICT),
    (EmptyOperationError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)

_CODE_HINTS: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "List products with GET /api/products and use one of their ids.",
    "SALE_NOT_FOUND": "List sale lines with GET /api/sales and use one of their ids.",
    "ORDER_NOT_FOUND": "Use the order key from GET /api/orders?view=all.",
    "CUSTOMER_NOT_FOUND": "Register the customer first or pick one from GET /api/customers.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or restock the product first.",
    "EMPTY_OPERATION": "Send at least one line with a positive quantity.",
    "INVALID_TRANSITION": "Reload the order; its status has moved on or the step is not allowed.",
    "OVER_RETURN": "Return no more than the units still unreturned on the line.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "The sale was kept in memory; see GET /api/sync and the server logs.",
}

_STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "Nothing matches that id.",
    409: "The order or stock changed underneath the request. Reload and retry.",
    422: "Check the field types in the request.",
    500: "An internal error occurred. Check server logs.",
}

_HTTP_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _status_for(exc: Exception) -> int:
    for exc_type, code in _STATUS_RULES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _hint(error_code: str, status_code: int) -> str | None:
    return _CODE_HINTS.get(error_code) or _STATUS_HINTS.get(status_code)


def _render(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response_for(request: Request, exc: Exception) -> JSONResponse:
    """Build the JSON error response for an exception raised while serving ``request``."""
    status_code = _status_for(exc)
    path = request.url.path
    request_id = getattr(request.state, "request_id", None)

    if isinstance(exc, PosError):
        error_code, message = exc.code, exc.message
        detail = ", ".join(f"{k}={v}" for k, v in exc.details.items()) or None
    else:
        error_code, message, detail = exc.__class__.__name__, str(exc), None

    if status_code >= 500:
        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=path,
            error_type=error_code,
            error=str(exc),
            traceback=traceback.format_exc(),
        )
        if not isinstance(exc, PosError):
            message = "Internal server error"
    else:
        logger.info(
            "request_rejected",
            request_id=request_id,
            path=path,
            error_type=error_code,
            error=message,
        )

    return _render(
        status_code,
        ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_hint(error_code, status_code),
            detail=detail,
            path=path,
        ),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions that escape the routers into error responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response_for(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PosError)
    async def pos_exception_handler(request: Request, exc: PosError) -> JSONResponse:
        return error_response_for(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return _render(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=_hint("VALIDATION_ERROR", 422),
                detail=problems,
                path=request.url.path,
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        error_code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        return _render(
            exc.status_code,
            ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=_hint(error_code, exc.status_code),
                path=request.url.path,
            ),
        )
