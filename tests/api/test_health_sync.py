"""API tests for health checks and the persistence sync status."""

from unittest.mock import AsyncMock, MagicMock, patch

from httpx import AsyncClient

import src.api.routes.health as health_module


async def test_root_health(api_client: AsyncClient):
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_api_health_has_uptime(api_client: AsyncClient):
    data = (await api_client.get("/api/health")).json()

    assert data["status"] == "healthy"
    assert data["uptime_seconds"] >= 0


async def test_db_health_offline_backend_is_degraded(api_client: AsyncClient):
    settings = MagicMock()
    settings.storage.backend = "none"
    settings.app_version = "1.0.0"

    with patch.object(health_module, "get_settings", return_value=settings):
        data = (await api_client.get("/api/health/db")).json()

    assert data["status"] == "degraded"
    assert data["database"]["available"] is False


async def test_request_id_is_echoed(api_client: AsyncClient):
    response = await api_client.get("/api/products", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"


async def test_failed_write_does_not_fail_checkout(
    api_client: AsyncClient, mock_persistence: AsyncMock
):
    mock_persistence.save_products.side_effect = OSError("disk full")

    checkout = await api_client.post(
        "/api/orders", json={"items": [{"product_id": "prod-a", "quantity": 1}]}
    )
    assert checkout.status_code == 201

    status = (await api_client.get("/api/sync")).json()
    assert status["pending_count"] == 1
    assert status["pending_operations"] == ["save_products:1"]
    assert status["last_failure"]["error"] == "disk full"

    mock_persistence.save_products.side_effect = None
    retry = (await api_client.post("/api/sync/retry")).json()

    assert retry == {"succeeded": 1, "still_pending": 0}
