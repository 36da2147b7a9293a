"""Product request workflow: farmers submit, admins approve or reject.

Each farmer's collection (``farmer-requests-<farmerId>``) is the only copy
of their requests. The admin view is computed by reading every farmer
collection, so a review is a single write that both views see.
"""

from marketflow.core.exceptions import RecordNotFound, RecordStoreError
from marketflow.core.workflow import Clock, find_index, utc_now
from marketflow.core.workflow_config import WorkflowConfig
from marketflow.infra.draft_store import DraftStore
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import StatusCounts
from marketflow.schemas.requests import ProductRequestCreate, ProductRequestView
from marketflow.schemas.workflow import ProductRequest
from marketflow.services.base_workflow_service import BaseWorkflowService
from marketflow.services.record_store_client import RecordStoreClient

logger = get_logger(__name__)

UNKNOWN_CATEGORY = "Unknown"


class ProductRequestService(BaseWorkflowService[ProductRequest]):
    model = ProductRequest
    role = "farmer"
    entity_key = "requests"
    workflow_entity = "product_request"

    def __init__(
        self,
        drafts: DraftStore,
        workflows: WorkflowConfig,
        records: RecordStoreClient | None = None,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(drafts, workflows, clock)
        self.records = records

    async def submit(self, farmer_id: str, data: ProductRequestCreate) -> ProductRequest:
        request = ProductRequest(
            farmer_id=farmer_id,
            created_date=self.clock(),
            **data.model_dump(),
        )
        await self._append(farmer_id, request)
        logger.info(
            "Product request submitted",
            farmer_id=farmer_id,
            request_id=request.id,
            product_name=request.product_name,
        )
        return request

    async def list_all(self, status: str | None = None) -> list[ProductRequest]:
        """Requests of every farmer, oldest first."""
        requests: list[ProductRequest] = []
        for key in await self.store.keys(self.key_prefix):
            requests.extend(await self.store.load(key))

        if status is not None:
            requests = [r for r in requests if r.status.value == status]
        return sorted(requests, key=lambda r: r.created_date)

    async def find_owner(self, request_id: str) -> str:
        """Farmer id owning a request.

        Raises:
            RecordNotFound: If no farmer has the request
        """
        for key in await self.store.keys(self.key_prefix):
            records = await self.store.load(key)
            index = find_index(records, request_id)
            if index is not None:
                return records[index].farmer_id
        raise RecordNotFound(
            f"ProductRequest '{request_id}' not found",
            detail={"record_id": request_id},
        )

    async def review(self, request_id: str, decision: str, notes: str = "") -> ProductRequest:
        """Approve or reject a pending request, recording the admin's notes."""
        farmer_id = await self.find_owner(request_id)
        updated = await self._transition(farmer_id, request_id, decision, {"notes": notes})
        logger.info(
            "Product request reviewed",
            request_id=request_id,
            farmer_id=farmer_id,
            status=updated.status.value,
        )
        return updated

    async def stats(self, farmer_id: str | None = None) -> StatusCounts:
        if farmer_id is None:
            return self.counts(await self.list_all())
        return self.counts(await self.list_for(farmer_id))

    async def category_names(self) -> dict[str, str]:
        """Category id to name, from the record store.

        Returns an empty mapping when no client is configured or the store
        is unreachable, so every category renders as "Unknown".
        """
        if self.records is None:
            return {}
        try:
            page = await self.records.get_all("productcategories")
        except RecordStoreError as e:
            logger.warning("Category lookup failed", error=str(e))
            return {}
        return {
            item["_id"]: item.get("name") or UNKNOWN_CATEGORY
            for item in page.items
            if item.get("_id")
        }

    async def with_category_names(
        self, requests: list[ProductRequest]
    ) -> list[ProductRequestView]:
        names = await self.category_names()
        return [
            ProductRequestView(
                **request.model_dump(),
                category_name=names.get(request.category, UNKNOWN_CATEGORY),
            )
            for request in requests
        ]
