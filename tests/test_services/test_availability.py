"""Tests for AvailabilityService."""

from datetime import date

import pytest

from marketflow.core.exceptions import RecordNotFound, ValidationFailed
from marketflow.schemas.requests import AvailabilityCreate, AvailabilityUpdate
from marketflow.schemas.workflow import AvailabilityStatus
from marketflow.services.availability import AvailabilityService


class TestAvailabilityService:
    """Test suite for farmer availability entries."""

    @pytest.fixture
    def service(self, drafts, workflows, records, clock) -> AvailabilityService:
        records.get_by_id.return_value = {"_id": "p1", "name": "Heirloom Tomato", "price": 80}
        return AvailabilityService(drafts, workflows, records=records, clock=clock)

    def lot(self, quantity: int, price: float | None = None) -> AvailabilityCreate:
        return AvailabilityCreate(
            product_id="p1",
            quantity=quantity,
            price=price,
            harvest_date=date(2024, 5, 1),
            expiry_date=date(2024, 5, 10),
        )

    @pytest.mark.asyncio
    async def test_add_derives_status(self, service):
        plenty = await service.add("f1", self.lot(50))
        few = await service.add("f1", self.lot(5))
        none = await service.add("f1", self.lot(0))

        assert plenty.status is AvailabilityStatus.AVAILABLE
        assert few.status is AvailabilityStatus.LOW_STOCK
        assert none.status is AvailabilityStatus.OUT_OF_STOCK

    @pytest.mark.asyncio
    async def test_add_uses_catalog_name_and_price(self, service, records):
        entry = await service.add("f1", self.lot(20))

        records.get_by_id.assert_awaited_once_with("products", "p1")
        assert entry.product_name == "Heirloom Tomato"
        assert entry.price == 80

    @pytest.mark.asyncio
    async def test_add_price_override(self, service):
        entry = await service.add("f1", self.lot(20, price=95.5))
        assert entry.price == 95.5

    @pytest.mark.asyncio
    async def test_add_unknown_product(self, service, records):
        records.get_by_id.return_value = None
        with pytest.raises(RecordNotFound):
            await service.add("f1", self.lot(20))

    @pytest.mark.asyncio
    async def test_update_keeps_status(self, service):
        entry = await service.add("f1", self.lot(50))

        updated = await service.update("f1", entry.id, AvailabilityUpdate(quantity=0))

        assert updated.quantity == 0
        assert updated.status is AvailabilityStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_update_explicit_status(self, service):
        entry = await service.add("f1", self.lot(50))

        updated = await service.update(
            "f1", entry.id, AvailabilityUpdate(quantity=0, status=AvailabilityStatus.OUT_OF_STOCK)
        )

        assert updated.status is AvailabilityStatus.OUT_OF_STOCK

    @pytest.mark.asyncio
    async def test_update_unknown_entry(self, service):
        with pytest.raises(RecordNotFound):
            await service.update("f1", "missing", AvailabilityUpdate(quantity=3))

    @pytest.mark.asyncio
    async def test_delete(self, service):
        kept = await service.add("f1", self.lot(50))
        removed = await service.add("f1", self.lot(5))

        await service.delete("f1", removed.id)

        assert await service.list_for("f1") == [kept]

    @pytest.mark.asyncio
    async def test_delete_unknown_entry(self, service):
        with pytest.raises(RecordNotFound):
            await service.delete("f1", "missing")

    @pytest.mark.asyncio
    async def test_stats(self, service):
        await service.add("f1", self.lot(50))
        await service.add("f1", self.lot(0))

        stats = await service.stats("f1")

        assert stats.total == 2
        assert stats.counts == {"available": 1, "low_stock": 0, "out_of_stock": 1}

    def test_create_rejects_expiry_before_harvest(self):
        with pytest.raises(ValueError):
            AvailabilityCreate(
                product_id="p1",
                quantity=1,
                harvest_date=date(2024, 5, 10),
                expiry_date=date(2024, 5, 1),
            )

    @pytest.mark.asyncio
    async def test_update_rejects_expiry_before_harvest(self, service):
        entry = await service.add("f1", self.lot(20))

        with pytest.raises(ValidationFailed):
            await service.update("f1", entry.id, AvailabilityUpdate(expiry_date=date(2024, 1, 1)))

        stored = await service.get("f1", entry.id)
        assert stored.expiry_date == date(2024, 5, 10)
