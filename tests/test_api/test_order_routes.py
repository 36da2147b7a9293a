"""Tests for customer order and farmer fulfillment endpoints."""

import pytest
from httpx import AsyncClient


class TestOrderRoutes:
    """Order placement, tracking and fulfillment over HTTP."""

    @pytest.fixture
    def order_payload(self) -> dict:
        return {
            "items": [
                {
                    "productId": "p1",
                    "productName": "Kale",
                    "quantity": 2,
                    "price": 40,
                    "farmerId": "farmer-1",
                },
                {
                    "productId": "p2",
                    "productName": "Honey",
                    "quantity": 1,
                    "price": 250,
                    "farmerId": "farmer-2",
                },
            ]
        }

    @pytest.mark.asyncio
    async def test_place_order(self, client: AsyncClient, customer_headers: dict, order_payload: dict):
        response = await client.post("/orders", json=order_payload, headers=customer_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["totalAmount"] == 330
        assert data["customerId"] == "customer-1"

    @pytest.mark.asyncio
    async def test_order_needs_items(self, client: AsyncClient, customer_headers: dict):
        response = await client.post("/orders", json={"items": []}, headers=customer_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_farmer_sees_share(
        self,
        client: AsyncClient,
        customer_headers: dict,
        farmer_headers: dict,
        order_payload: dict,
    ):
        order = (await client.post("/orders", json=order_payload, headers=customer_headers)).json()

        response = await client.get("/farmer-orders", headers=farmer_headers)

        farmer_orders = response.json()
        assert len(farmer_orders) == 1
        assert farmer_orders[0]["orderId"] == order["id"]
        assert [item["productId"] for item in farmer_orders[0]["items"]] == ["p1"]

    @pytest.mark.asyncio
    async def test_fulfillment_transitions(
        self,
        client: AsyncClient,
        customer_headers: dict,
        farmer_headers: dict,
        order_payload: dict,
    ):
        await client.post("/orders", json=order_payload, headers=customer_headers)
        farmer_order = (await client.get("/farmer-orders", headers=farmer_headers)).json()[0]

        confirm = await client.post(f"/farmer-orders/{farmer_order['id']}/confirm", headers=farmer_headers)
        assert confirm.status_code == 200
        assert confirm.json()["status"] == "confirmed"
        assert confirm.json()["confirmedDate"] is not None

        skip = await client.post(f"/farmer-orders/{farmer_order['id']}/deliver", headers=farmer_headers)
        assert skip.status_code == 409
        assert skip.json()["detail"]["allowed_transitions"] == ["pack"]

        unknown = await client.post(f"/farmer-orders/{farmer_order['id']}/refund", headers=farmer_headers)
        assert unknown.status_code == 400
        assert unknown.json()["error_type"] == "UnknownTransition"

        stats = await client.get("/farmer-orders/stats", headers=farmer_headers)
        assert stats.json()["counts"]["confirmed"] == 1

    @pytest.mark.asyncio
    async def test_cancel_and_summary(
        self, client: AsyncClient, customer_headers: dict, order_payload: dict
    ):
        order = (await client.post("/orders", json=order_payload, headers=customer_headers)).json()

        cancel = await client.post(f"/orders/{order['id']}/cancel", headers=customer_headers)
        assert cancel.status_code == 200
        assert cancel.json()["status"] == "cancelled"

        again = await client.post(f"/orders/{order['id']}/cancel", headers=customer_headers)
        assert again.status_code == 409

        summary = (await client.get("/orders/summary", headers=customer_headers)).json()
        assert summary["groups"]["cancelled"] == 1
        assert summary["totalSpent"] == 0
        assert summary["totalSpentDisplay"] == "₹0"
        assert summary["orders"][0]["liveTotal"] == 330

    @pytest.mark.asyncio
    async def test_admin_advances_order(
        self,
        client: AsyncClient,
        customer_headers: dict,
        admin_headers: dict,
        order_payload: dict,
    ):
        order = (await client.post("/orders", json=order_payload, headers=customer_headers)).json()

        for transition, expected in [("confirm", "confirmed"), ("ship", "shipped"), ("deliver", "delivered")]:
            response = await client.post(
                f"/orders/customer-1/{order['id']}/{transition}", headers=admin_headers
            )
            assert response.json()["status"] == expected

        stats = (await client.get("/orders/stats", headers=customer_headers)).json()
        assert stats["counts"]["delivered"] == 1

        summary = (await client.get("/orders/summary", headers=customer_headers)).json()
        assert summary["totalSpent"] == 330

    @pytest.mark.asyncio
    async def test_customer_cannot_advance(
        self, client: AsyncClient, customer_headers: dict, order_payload: dict
    ):
        order = (await client.post("/orders", json=order_payload, headers=customer_headers)).json()
        response = await client.post(
            f"/orders/customer-1/{order['id']}/confirm", headers=customer_headers
        )
        assert response.status_code == 403
