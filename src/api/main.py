"""
FastAPI application for the boutique till.

Startup migrates the database and loads products, sales and customers into
memory. Shutdown waits for queued snapshot writes before closing the pool.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    customers_router,
    health_router,
    orders_router,
    products_router,
    reports_router,
    sales_router,
    sync_router,
)
from src.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    products_router,
    orders_router,
    sales_router,
    customers_router,
    reports_router,
    sync_router,
)


async def _open_storage() -> None:
    from src.infrastructure.storage.sqlite import get_connection_pool
    from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    applied = await run_migrations()
    failed = [r.version for r in applied if not r.success]
    if failed:
        raise RuntimeError(f"Migrations failed: {', '.join(failed)}")
    await get_connection_pool()
    logger.info("database_ready", migrations_applied=len(applied))


async def _drain_sync() -> None:
    from src.application.services import get_persistence_sync

    sync = await get_persistence_sync()
    await sync.flush()
    if sync.pending_count:
        # Still held in memory and in the failure queue; lost on exit
        logger.warning("pending_writes_on_shutdown", pending=sync.pending_count)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging()
    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        storage_backend=settings.storage.backend,
    )

    sqlite = settings.storage.backend == "sqlite"
    if sqlite:
        try:
            await _open_storage()
        except Exception as e:
            logger.error("database_init_failed", error=str(e))
            raise

    from src.application.services import bootstrap_state

    state = await bootstrap_state()
    logger.info(
        "state_ready",
        products=len(state.products),
        sales=len(state.sales),
        customers=len(state.customers),
    )

    yield

    logger.info("application_stopping")
    try:
        await _drain_sync()
    except Exception as e:
        logger.warning("sync_flush_failed", error=str(e))

    if sqlite:
        from src.infrastructure.storage.sqlite import close_connection_pool

        await close_connection_pool()

    logger.info("application_stopped")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Boutique POS API",
        description="Point-of-sale orders, inventory ledger and customer spend",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Last added runs first: errors are caught inside the logged request
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"name": "Boutique POS API", "version": settings.app_version}

    # Liveness probe; /api/health/db checks the database
    @app.get("/health", include_in_schema=False)
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
