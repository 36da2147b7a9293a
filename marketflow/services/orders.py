"""Customer orders.

``total_amount`` is frozen when the order is placed. Summaries also report
each order's live item sum so a drift between the two is visible.
"""

from marketflow.core.aggregation import format_inr, order_status_groups, sum_item_value
from marketflow.core.workflow import Clock, utc_now
from marketflow.core.workflow_config import WorkflowConfig
from marketflow.infra.draft_store import DraftStore
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import OrderSummary, OrderView, StatusCounts
from marketflow.schemas.requests import OrderCreate
from marketflow.schemas.workflow import Order, OrderStatus
from marketflow.services.base_workflow_service import BaseWorkflowService
from marketflow.services.fulfillment import FulfillmentService

logger = get_logger(__name__)


class OrderService(BaseWorkflowService[Order]):
    model = Order
    role = "customer"
    entity_key = "orders"
    workflow_entity = "order"

    def __init__(
        self,
        drafts: DraftStore,
        workflows: WorkflowConfig,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(drafts, workflows, clock)
        self.fulfillment = FulfillmentService(drafts, workflows, clock)

    async def place_order(self, customer_id: str, data: OrderCreate) -> Order:
        """Store a pending order and hand each farmer their share."""
        order = Order(
            customer_id=customer_id,
            items=data.items,
            total_amount=sum_item_value(data),
            created_date=self.clock(),
            estimated_delivery=data.estimated_delivery,
            notes=data.notes,
        )
        await self._append(customer_id, order)
        await self.fulfillment.receive(order)

        logger.info(
            "Order placed",
            customer_id=customer_id,
            order_id=order.id,
            items=len(order.items),
            total_amount=order.total_amount,
        )
        return order

    async def cancel(self, customer_id: str, order_id: str) -> Order:
        return await self._transition(customer_id, order_id, "cancel")

    async def advance(self, customer_id: str, order_id: str, transition: str) -> Order:
        """Move an order along its workflow on behalf of the marketplace."""
        return await self._transition(customer_id, order_id, transition)

    async def stats(self, customer_id: str) -> StatusCounts:
        return self.counts(await self.list_for(customer_id))

    async def summary(self, customer_id: str) -> OrderSummary:
        orders = await self.list_for(customer_id)
        total_spent = sum(
            order.total_amount for order in orders if order.status == OrderStatus.DELIVERED
        )
        return OrderSummary(
            groups=order_status_groups(orders),
            total_spent=total_spent,
            total_spent_display=format_inr(total_spent),
            orders=[
                OrderView(**order.model_dump(), live_total=sum_item_value(order))
                for order in sorted(orders, key=lambda o: o.created_date, reverse=True)
            ],
        )
