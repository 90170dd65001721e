"""API tests for the order lifecycle."""

from httpx import AsyncClient

from src.application.state import PosState


async def _checkout(client: AsyncClient, items: list[dict], **extra) -> dict:
    response = await client.post(
        "/api/orders", json={"items": items, "salesman": "Kofi", **extra}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_checkout_reserves_stock(api_client: AsyncClient, state: PosState):
    data = await _checkout(
        api_client,
        [{"product_id": "prod-a", "quantity": 2}],
        customer_id="cust-1",
    )

    order = data["order"]
    assert order["payment_status"] == "PENDING"
    assert order["fulfillment_status"] == "NEW"
    assert order["customer_name"] == "Ama Mensah"
    assert order["gross_total"] == 200.0
    assert order["short_code"] == order["key"][:8].upper()
    assert data["products"][0]["stock_quantity"] == 3
    assert state.products["prod-a"].history[-1].type.value == "SALE"


async def test_checkout_insufficient_stock_is_409(api_client: AsyncClient, state: PosState):
    response = await api_client.post(
        "/api/orders",
        json={
            "items": [
                {"product_id": "prod-a", "quantity": 1},
                {"product_id": "prod-b", "quantity": 2},
            ]
        },
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "INSUFFICIENT_STOCK"
    assert state.products["prod-a"].stock_quantity == 5
    assert state.sales == []


async def test_empty_cart_is_400(api_client: AsyncClient):
    response = await api_client.post("/api/orders", json={"items": []})

    assert response.status_code == 400
    assert response.json()["error_code"] == "EMPTY_OPERATION"


async def test_checkout_unknown_product_is_404(api_client: AsyncClient):
    response = await api_client.post(
        "/api/orders", json={"items": [{"product_id": "missing", "quantity": 1}]}
    )

    assert response.status_code == 404


async def test_pay_then_fulfill(api_client: AsyncClient):
    key = (await _checkout(api_client, [{"product_id": "prod-a", "quantity": 1}]))["order"][
        "key"
    ]

    paid = await api_client.post(
        f"/api/orders/{key}/pay",
        json={"payment_method": "MOMO", "cashier_name": "Efua"},
    )
    assert paid.status_code == 200
    body = paid.json()
    assert body["payment_status"] == "PAID"
    assert body["fulfillment_status"] == "PROCESSING"
    assert body["lines"][0]["cashier_name"] == "Efua"

    ready = await api_client.post(f"/api/orders/{key}/ready")
    assert ready.json()["fulfillment_status"] == "READY"

    done = await api_client.post(f"/api/orders/{key}/complete")
    assert done.json()["fulfillment_status"] == "COMPLETED"


async def test_pay_with_unknown_method_is_400(api_client: AsyncClient):
    key = (await _checkout(api_client, [{"product_id": "prod-a", "quantity": 1}]))["order"][
        "key"
    ]

    response = await api_client.post(
        f"/api/orders/{key}/pay",
        json={"payment_method": "UNKNOWN", "cashier_name": "Efua"},
    )

    assert response.status_code == 400


async def test_cancel_releases_stock(api_client: AsyncClient, state: PosState):
    key = (await _checkout(api_client, [{"product_id": "prod-a", "quantity": 3}]))["order"][
        "key"
    ]
    assert state.products["prod-a"].stock_quantity == 2

    response = await api_client.post(f"/api/orders/{key}/cancel")

    assert response.status_code == 200
    assert response.json()["payment_status"] == "CANCELLED"
    assert state.products["prod-a"].stock_quantity == 5
    assert state.products["prod-a"].history[-1].type.value == "CANCELLATION"


async def test_cancel_after_payment_is_409(api_client: AsyncClient):
    key = (await _checkout(api_client, [{"product_id": "prod-a", "quantity": 1}]))["order"][
        "key"
    ]
    await api_client.post(
        f"/api/orders/{key}/pay", json={"payment_method": "CASH", "cashier_name": "Efua"}
    )

    response = await api_client.post(f"/api/orders/{key}/cancel")

    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_TRANSITION"


async def test_ready_before_payment_is_409(api_client: AsyncClient):
    key = (await _checkout(api_client, [{"product_id": "prod-a", "quantity": 1}]))["order"][
        "key"
    ]

    response = await api_client.post(f"/api/orders/{key}/ready")

    assert response.status_code == 409


async def test_unknown_order_is_404(api_client: AsyncClient):
    response = await api_client.post("/api/orders/nope/cancel")

    assert response.status_code == 404
    assert response.json()["error_code"] == "ORDER_NOT_FOUND"


async def test_list_pending_orders(api_client: AsyncClient):
    await _checkout(api_client, [{"product_id": "prod-a", "quantity": 1}])
    await _checkout(api_client, [{"product_id": "prod-b", "quantity": 1}])

    response = await api_client.get("/api/orders", params={"view": "pending"})

    data = response.json()
    assert data["view"] == "pending"
    assert data["total"] == 2
