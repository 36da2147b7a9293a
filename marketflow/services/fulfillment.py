"""Farmer order fulfillment: pending -> confirmed -> packed -> shipped -> delivered."""

from collections import defaultdict

from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import StatusCounts
from marketflow.schemas.workflow import FarmerOrder, Order, OrderItem
from marketflow.services.base_workflow_service import BaseWorkflowService

logger = get_logger(__name__)


class FulfillmentService(BaseWorkflowService[FarmerOrder]):
    model = FarmerOrder
    role = "farmer"
    entity_key = "orders"
    workflow_entity = "farmer_order"

    async def receive(self, order: Order) -> list[FarmerOrder]:
        """Split a customer order into one pending FarmerOrder per farmer."""
        by_farmer: dict[str, list[OrderItem]] = defaultdict(list)
        for item in order.items:
            by_farmer[item.farmer_id].append(item)

        created = []
        for farmer_id, items in by_farmer.items():
            farmer_order = FarmerOrder(
                order_id=order.id,
                farmer_id=farmer_id,
                items=items,
                created_date=self.clock(),
            )
            created.append(await self._append(farmer_id, farmer_order))

        logger.info(
            "Order distributed to farmers",
            order_id=order.id,
            farmers=sorted(by_farmer),
        )
        return created

    async def apply(self, farmer_id: str, farmer_order_id: str, transition: str) -> FarmerOrder:
        return await self._transition(farmer_id, farmer_order_id, transition)

    async def stats(self, farmer_id: str) -> StatusCounts:
        return self.counts(await self.list_for(farmer_id))
