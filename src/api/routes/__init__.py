"""API route modules."""

from src.api.routes.customers import router as customers_router
from src.api.routes.health import router as health_router
from src.api.routes.orders import router as orders_router
from src.api.routes.products import router as products_router
from src.api.routes.reports import router as reports_router
from src.api.routes.sales import router as sales_router
from src.api.routes.sync import router as sync_router

__all__ = [
    "health_router",
    "products_router",
    "orders_router",
    "sales_router",
    "customers_router",
    "reports_router",
    "sync_router",
]
