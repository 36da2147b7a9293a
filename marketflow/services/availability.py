"""Farmer product availability.

Status is derived from quantity when an entry is created. Updates keep the
stored status unless the caller sets one explicitly.
"""

from marketflow.core.aggregation import availability_status
from marketflow.core.exceptions import RecordNotFound
from marketflow.core.workflow import Clock, utc_now
from marketflow.core.workflow_config import WorkflowConfig
from marketflow.infra.draft_store import DraftStore
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import StatusCounts
from marketflow.schemas.requests import AvailabilityCreate, AvailabilityUpdate
from marketflow.schemas.workflow import AvailabilityStatus, ProductAvailability
from marketflow.services.base_workflow_service import BaseWorkflowService
from marketflow.services.record_store_client import RecordStoreClient

logger = get_logger(__name__)


class AvailabilityService(BaseWorkflowService[ProductAvailability]):
    model = ProductAvailability
    role = "farmer"
    entity_key = "availability"
    status_values = tuple(status.value for status in AvailabilityStatus)

    def __init__(
        self,
        drafts: DraftStore,
        workflows: WorkflowConfig,
        records: RecordStoreClient,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(drafts, workflows, clock)
        self.records = records

    async def add(self, farmer_id: str, data: AvailabilityCreate) -> ProductAvailability:
        """Record a harvest lot for a catalog product.

        Raises:
            RecordNotFound: If the product is not in the catalog
        """
        product = await self.records.get_by_id("products", data.product_id)
        if product is None:
            raise RecordNotFound(
                f"Product '{data.product_id}' not found",
                detail={"product_id": data.product_id},
            )

        entry = ProductAvailability(
            farmer_id=farmer_id,
            product_id=data.product_id,
            product_name=product.get("name") or "",
            quantity=data.quantity,
            price=data.price if data.price else product.get("price") or 0,
            harvest_date=data.harvest_date,
            expiry_date=data.expiry_date,
            status=availability_status(data.quantity),
            notes=data.notes,
            created_date=self.clock(),
        )
        return await self._append(farmer_id, entry)

    async def update(
        self, farmer_id: str, availability_id: str, data: AvailabilityUpdate
    ) -> ProductAvailability:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = await self._transition(
            farmer_id, availability_id, "update", changes, checked=False
        )
        if "quantity" in changes and "status" not in changes:
            derived = availability_status(updated.quantity)
            if derived != updated.status:
                logger.warning(
                    "Availability status differs from quantity",
                    availability_id=availability_id,
                    status=updated.status.value,
                    derived_status=derived.value,
                )
        return updated

    async def delete(self, farmer_id: str, availability_id: str) -> None:
        await self._remove(farmer_id, availability_id)

    async def stats(self, farmer_id: str) -> StatusCounts:
        return self.counts(await self.list_for(farmer_id))
