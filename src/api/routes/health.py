"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from src.application.dto.responses import HealthResponse, ProviderHealthResponse
from src.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    An offline backend reports degraded; the POS keeps working in memory.
    """
    settings = get_settings()
    if settings.storage.backend == "none":
        db_status = ProviderHealthResponse(name="none", available=False, error="offline mode")
        return HealthResponse(
            status="degraded",
            version=settings.app_version,
            uptime_seconds=time.time() - _start_time,
            database=db_status,
        )

    from src.infrastructure.storage.sqlite import get_connection_pool

    try:
        pool = await get_connection_pool()
        latency = await pool.ping()
        db_status = ProviderHealthResponse(name="sqlite", available=True, latency_ms=latency)
    except Exception as e:
        db_status = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.available else "degraded",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
