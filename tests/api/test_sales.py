"""API tests for the sale ledger and returns."""

from httpx import AsyncClient

from src.application.state import PosState


async def _paid_order(client: AsyncClient, quantity: int) -> dict:
    checkout = await client.post(
        "/api/orders",
        json={
            "items": [{"product_id": "prod-a", "quantity": quantity}],
            "customer_id": "cust-1",
        },
    )
    key = checkout.json()["order"]["key"]
    paid = await client.post(
        f"/api/orders/{key}/pay", json={"payment_method": "CASH", "cashier_name": "Efua"}
    )
    return paid.json()


async def test_return_creates_refund_line(api_client: AsyncClient, state: PosState):
    order = await _paid_order(api_client, 3)
    sale_id = order["lines"][0]["id"]

    response = await api_client.post(f"/api/sales/{sale_id}/returns", json={"quantity": 2})

    assert response.status_code == 201
    data = response.json()
    assert data["original"]["returned_quantity"] == 2
    assert data["refund"]["kind"] == "refund"
    assert data["refund"]["quantity"] == -2
    assert data["refund"]["total_price"] == -200.0
    assert data["refund"]["refund_of"] == sale_id
    assert data["product"]["stock_quantity"] == 4
    assert state.customers["cust-1"].total_spent == 100.0


async def test_over_return_is_409(api_client: AsyncClient):
    order = await _paid_order(api_client, 2)
    sale_id = order["lines"][0]["id"]
    await api_client.post(f"/api/sales/{sale_id}/returns", json={"quantity": 2})

    response = await api_client.post(f"/api/sales/{sale_id}/returns", json={"quantity": 1})

    assert response.status_code == 409
    assert response.json()["error_code"] == "OVER_RETURN"


async def test_return_of_unpaid_line_is_409(api_client: AsyncClient):
    checkout = await api_client.post(
        "/api/orders", json={"items": [{"product_id": "prod-a", "quantity": 1}]}
    )
    sale_id = checkout.json()["order"]["lines"][0]["id"]

    response = await api_client.post(f"/api/sales/{sale_id}/returns", json={"quantity": 1})

    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_TRANSITION"


async def test_list_sales_filters_by_status(api_client: AsyncClient):
    await _paid_order(api_client, 1)
    await api_client.post(
        "/api/orders", json={"items": [{"product_id": "prod-b", "quantity": 1}]}
    )

    paid = (await api_client.get("/api/sales", params={"payment_status": "PAID"})).json()
    everything = (await api_client.get("/api/sales")).json()

    assert paid["total"] == 1
    assert paid["sales"][0]["product_id"] == "prod-a"
    assert everything["total"] == 2


async def test_unknown_sale_is_404(api_client: AsyncClient):
    response = await api_client.get("/api/sales/missing")

    assert response.status_code == 404
    assert response.json()["error_code"] == "SALE_NOT_FOUND"
