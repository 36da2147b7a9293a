"""Tests for product request endpoints."""

import pytest
from httpx import AsyncClient

from marketflow.schemas.records import PagedItems


class TestProductRequestRoutes:
    """Farmer submission and admin review over HTTP."""

    @pytest.fixture
    def request_payload(self) -> dict:
        return {
            "productName": "Heirloom Tomato",
            "category": "cat-veg",
            "quantity": 20,
            "price": 80,
            "description": "Vine ripened",
        }

    @pytest.mark.asyncio
    async def test_submit(self, client: AsyncClient, farmer_headers: dict, request_payload: dict):
        response = await client.post("/product-requests", json=request_payload, headers=farmer_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["farmerId"] == "farmer-1"
        assert data["productName"] == "Heirloom Tomato"

    @pytest.mark.asyncio
    async def test_submit_requires_fields(self, client: AsyncClient, farmer_headers: dict):
        response = await client.post(
            "/product-requests",
            json={"productName": "Kale", "quantity": 0, "price": 10},
            headers=farmer_headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_submit_requires_identity(self, client: AsyncClient, request_payload: dict):
        response = await client.post("/product-requests", json=request_payload)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_customer_cannot_submit(
        self, client: AsyncClient, customer_headers: dict, request_payload: dict
    ):
        response = await client.post("/product-requests", json=request_payload, headers=customer_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_role(self, client: AsyncClient, request_payload: dict):
        response = await client.post(
            "/product-requests",
            json=request_payload,
            headers={"X-Member-Id": "x", "X-Member-Role": "wizard"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_review_flow(
        self,
        client: AsyncClient,
        farmer_headers: dict,
        admin_headers: dict,
        request_payload: dict,
        records,
    ):
        records.get_all.return_value = PagedItems(items=[{"_id": "cat-veg", "name": "Vegetables"}])
        created = (
            await client.post("/product-requests", json=request_payload, headers=farmer_headers)
        ).json()

        pending = await client.get("/product-requests?status=pending", headers=admin_headers)
        assert [r["id"] for r in pending.json()] == [created["id"]]
        assert pending.json()[0]["categoryName"] == "Vegetables"

        review = await client.post(
            f"/product-requests/{created['id']}/review",
            json={"decision": "approve", "notes": "Welcome"},
            headers=admin_headers,
        )
        assert review.status_code == 200
        assert review.json()["status"] == "approved"
        assert review.json()["reviewedDate"] is not None

        mine = await client.get("/product-requests/mine", headers=farmer_headers)
        assert mine.json()[0]["status"] == "approved"
        assert mine.json()[0]["notes"] == "Welcome"

        stats = await client.get("/product-requests/mine/stats", headers=farmer_headers)
        assert stats.json() == {"total": 1, "counts": {"pending": 0, "approved": 1, "rejected": 0}}

    @pytest.mark.asyncio
    async def test_second_review_conflicts(
        self, client: AsyncClient, farmer_headers: dict, admin_headers: dict, request_payload: dict
    ):
        created = (
            await client.post("/product-requests", json=request_payload, headers=farmer_headers)
        ).json()
        await client.post(
            f"/product-requests/{created['id']}/review",
            json={"decision": "reject"},
            headers=admin_headers,
        )

        response = await client.post(
            f"/product-requests/{created['id']}/review",
            json={"decision": "approve"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        data = response.json()
        assert data["success"] is False
        assert data["error_type"] == "InvalidTransition"
        assert data["detail"]["current_status"] == "rejected"

    @pytest.mark.asyncio
    async def test_review_unknown_request(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/product-requests/missing/review",
            json={"decision": "approve"},
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert response.json()["error_type"] == "RecordNotFound"

    @pytest.mark.asyncio
    async def test_admin_stats(
        self, client: AsyncClient, farmer_headers: dict, admin_headers: dict, request_payload: dict
    ):
        await client.post("/product-requests", json=request_payload, headers=farmer_headers)
        await client.post(
            "/product-requests",
            json=request_payload,
            headers={"X-Member-Id": "farmer-2", "X-Member-Role": "farmer"},
        )

        response = await client.get("/product-requests/stats", headers=admin_headers)

        assert response.json()["total"] == 2
        assert response.json()["counts"]["pending"] == 2
