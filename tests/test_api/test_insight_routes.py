"""Tests for loyalty and nutrition endpoints."""

import pytest
from httpx import AsyncClient

from marketflow.schemas.records import PagedItems


class TestInsightRoutes:
    """Derived statistics over HTTP."""

    @pytest.mark.asyncio
    async def test_loyalty_for_spend(self, client: AsyncClient):
        response = await client.get("/insights/loyalty", params={"total_spent": 750})

        data = response.json()
        assert data["tier"] == "silver"
        assert data["nextTier"] == "gold"
        assert data["progress"] == 50.0

    @pytest.mark.asyncio
    async def test_loyalty_platinum_benefits(self, client: AsyncClient):
        response = await client.get("/insights/loyalty", params={"total_spent": 3500})

        data = response.json()
        assert data["tier"] == "platinum"
        assert "VIP customer support" in data["benefits"]
        assert "Personal shopping assistant" in data["benefits"]

    @pytest.mark.asyncio
    async def test_loyalty_rejects_negative(self, client: AsyncClient):
        response = await client.get("/insights/loyalty", params={"total_spent": -1})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_my_loyalty_without_account(self, client: AsyncClient, customer_headers: dict):
        response = await client.get("/insights/loyalty/me", headers=customer_headers)

        data = response.json()
        assert data["tier"] == "bronze"
        assert data["pointsBalance"] == 0
        assert data["progress"] == 0

    @pytest.mark.asyncio
    async def test_my_loyalty(self, client: AsyncClient, customer_headers: dict, records):
        records.find_one.return_value = {
            "_id": "l1",
            "memberId": "customer-1",
            "totalSpent": 3200,
            "pointsBalance": 640,
        }

        response = await client.get("/insights/loyalty/me", headers=customer_headers)

        records.find_one.assert_awaited_once_with("loyaltyprogram", "memberId", "customer-1")
        data = response.json()
        assert data["tier"] == "platinum"
        assert data["progress"] == 100
        assert data["pointsBalance"] == 640

    @pytest.mark.asyncio
    async def test_my_loyalty_matches_login_email(
        self, client: AsyncClient, customer_headers: dict, records
    ):
        records.find_one.return_value = {
            "_id": "l2",
            "memberId": "ana@example.com",
            "totalSpent": 2000,
            "pointsBalance": 200,
        }
        headers = {**customer_headers, "X-Member-Email": "ana@example.com"}

        response = await client.get("/insights/loyalty/me", headers=headers)

        records.find_one.assert_awaited_once_with("loyaltyprogram", "memberId", "ana@example.com")
        data = response.json()
        assert data["tier"] == "gold"
        assert data["totalSpent"] == 2000
        assert "Priority customer support" in data["benefits"]

    @pytest.mark.asyncio
    async def test_score_nutrition(self, client: AsyncClient):
        response = await client.post(
            "/insights/nutrition-score",
            json={"productId": "p1", "fiber": 4.2, "protein": 1, "vitamins": "C", "allergens": ""},
        )

        assert response.json() == {"productId": "p1", "score": 4}

    @pytest.mark.asyncio
    async def test_catalog_nutrition(self, client: AsyncClient, records):
        records.get_all.return_value = PagedItems(
            items=[
                {"_id": "n1", "productId": "p1", "fiber": 5, "protein": 8, "vitamins": "A"},
                {"_id": "n2", "productId": "p2", "allergens": "Peanuts"},
            ]
        )

        response = await client.get("/insights/nutrition")

        assert response.json() == [
            {"productId": "p1", "score": 5},
            {"productId": "p2", "score": 0},
        ]
