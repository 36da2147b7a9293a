"""Tests for DeliveryService."""

import pytest

from marketflow.core.exceptions import InvalidTransition
from marketflow.schemas.requests import DeliveryAssign
from marketflow.schemas.workflow import DeliveryStatus
from marketflow.services.deliveries import DeliveryService


class TestDeliveryService:
    """Test suite for delivery assignments."""

    @pytest.fixture
    def service(self, drafts, workflows, clock) -> DeliveryService:
        return DeliveryService(drafts, workflows, clock=clock)

    def assignment(self, order_id: str, amount: float) -> DeliveryAssign:
        return DeliveryAssign(
            agent_id="a1",
            order_id=order_id,
            customer_name="Priya",
            address="12 MG Road, Pune",
            items_count=3,
            amount=amount,
        )

    @pytest.mark.asyncio
    async def test_assign(self, service):
        delivery = await service.assign(self.assignment("o-1", 420))

        assert delivery.status is DeliveryStatus.PENDING
        assert await service.list_for("a1") == [delivery]

    @pytest.mark.asyncio
    async def test_pick_up_then_deliver(self, service):
        delivery = await service.assign(self.assignment("o-1", 420))

        picked = await service.apply("a1", delivery.id, "pick_up")
        done = await service.apply("a1", delivery.id, "deliver")

        assert picked.status is DeliveryStatus.IN_TRANSIT
        assert picked.picked_up_date is not None
        assert done.status is DeliveryStatus.DELIVERED
        assert done.delivered_date > done.picked_up_date

    @pytest.mark.asyncio
    async def test_cannot_deliver_before_pick_up(self, service):
        delivery = await service.assign(self.assignment("o-1", 420))
        with pytest.raises(InvalidTransition):
            await service.apply("a1", delivery.id, "deliver")

    @pytest.mark.asyncio
    async def test_stats_and_earnings(self, service):
        first = await service.assign(self.assignment("o-1", 1200))
        second = await service.assign(self.assignment("o-2", 300))
        await service.assign(self.assignment("o-3", 50))
        for delivery in (first, second):
            await service.apply("a1", delivery.id, "pick_up")
            await service.apply("a1", delivery.id, "deliver")

        stats = await service.stats("a1")
        earnings = await service.earnings("a1")

        assert stats.counts == {"pending": 1, "in-transit": 0, "delivered": 2}
        assert earnings.deliveries_completed == 2
        assert earnings.total_amount == 1500
        assert earnings.total_amount_display == "₹1,500"
