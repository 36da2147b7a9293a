"""Delivery agent assignments: pending -> in-transit -> delivered."""

from marketflow.core.aggregation import format_inr
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import EarningsSummary, StatusCounts
from marketflow.schemas.requests import DeliveryAssign
from marketflow.schemas.workflow import DeliveryAssignment, DeliveryStatus
from marketflow.services.base_workflow_service import BaseWorkflowService

logger = get_logger(__name__)


class DeliveryService(BaseWorkflowService[DeliveryAssignment]):
    model = DeliveryAssignment
    role = "agent"
    entity_key = "deliveries"
    workflow_entity = "delivery"

    async def assign(self, data: DeliveryAssign) -> DeliveryAssignment:
        assignment = DeliveryAssignment(created_date=self.clock(), **data.model_dump())
        await self._append(data.agent_id, assignment)
        logger.info(
            "Delivery assigned",
            agent_id=data.agent_id,
            order_id=data.order_id,
            delivery_id=assignment.id,
        )
        return assignment

    async def apply(self, agent_id: str, delivery_id: str, transition: str) -> DeliveryAssignment:
        return await self._transition(agent_id, delivery_id, transition)

    async def stats(self, agent_id: str) -> StatusCounts:
        return self.counts(await self.list_for(agent_id))

    async def earnings(self, agent_id: str) -> EarningsSummary:
        deliveries = await self.list_for(agent_id)
        completed = [d for d in deliveries if d.status == DeliveryStatus.DELIVERED]
        total = sum(d.amount for d in completed)
        return EarningsSummary(
            deliveries_completed=len(completed),
            total_amount=total,
            total_amount_display=format_inr(total),
            counts=self.counts(deliveries).counts,
        )
