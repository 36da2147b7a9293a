"""FastAPI dependencies for dependency injection.

Provides:
- Member identity and role gating from request headers
- Draft store, workflow tables, record store client and clock
- Workflow services wired from the above
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from marketflow.core.workflow import Clock, utc_now
from marketflow.core.workflow_config import WorkflowConfig, load_workflow_config
from marketflow.infra.draft_store import DraftStore, get_draft_store
from marketflow.infra.logging import get_logger
from marketflow.services.availability import AvailabilityService
from marketflow.services.deliveries import DeliveryService
from marketflow.services.fulfillment import FulfillmentService
from marketflow.services.orders import OrderService
from marketflow.services.product_requests import ProductRequestService
from marketflow.services.record_store_client import RecordStoreClient, get_record_store_client

logger = get_logger(__name__)

ROLES = frozenset({"admin", "farmer", "customer", "delivery_agent"})


@dataclass(frozen=True)
class Member:
    """Authenticated marketplace member."""

    member_id: str
    role: str
    email: str | None = None


async def get_member(
    x_member_id: Annotated[str | None, Header()] = None,
    x_member_role: Annotated[str | None, Header()] = None,
    x_member_email: Annotated[str | None, Header()] = None,
) -> Member:
    """Resolve the calling member from identity headers.

    The member SDK in front of this service authenticates the user and
    forwards the id, role and email.

    Raises:
        HTTPException: 401 if no member id, 403 if the role is unknown
    """
    if not x_member_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    role = (x_member_role or "customer").lower()
    if role not in ROLES:
        logger.warning("Rejected request: unknown role", member_id=x_member_id, role=role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unknown member role: {role}",
        )

    return Member(member_id=x_member_id, role=role, email=x_member_email)


def require_role(*roles: str) -> Callable[..., Member]:
    """Dependency factory allowing only members with one of ``roles``."""

    async def check(member: Annotated[Member, Depends(get_member)]) -> Member:
        if member.role not in roles:
            logger.warning(
                "Rejected request: role not allowed",
                member_id=member.member_id,
                role=member.role,
                allowed=list(roles),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return member

    return check


CurrentMember = Annotated[Member, Depends(get_member)]
AdminMember = Annotated[Member, Depends(require_role("admin"))]
FarmerMember = Annotated[Member, Depends(require_role("farmer"))]
CustomerMember = Annotated[Member, Depends(require_role("customer"))]
AgentMember = Annotated[Member, Depends(require_role("delivery_agent"))]


def get_drafts() -> DraftStore:
    return get_draft_store()


def get_workflows() -> WorkflowConfig:
    return load_workflow_config()


def get_records() -> RecordStoreClient:
    return get_record_store_client()


def get_clock() -> Clock:
    return utc_now


Drafts = Annotated[DraftStore, Depends(get_drafts)]
Workflows = Annotated[WorkflowConfig, Depends(get_workflows)]
Records = Annotated[RecordStoreClient, Depends(get_records)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def get_product_request_service(
    drafts: Drafts, workflows: Workflows, records: Records, clock: ClockDep
) -> ProductRequestService:
    return ProductRequestService(drafts, workflows, records=records, clock=clock)


def get_order_service(drafts: Drafts, workflows: Workflows, clock: ClockDep) -> OrderService:
    return OrderService(drafts, workflows, clock=clock)


def get_fulfillment_service(
    drafts: Drafts, workflows: Workflows, clock: ClockDep
) -> FulfillmentService:
    return FulfillmentService(drafts, workflows, clock=clock)


def get_availability_service(
    drafts: Drafts, workflows: Workflows, records: Records, clock: ClockDep
) -> AvailabilityService:
    return AvailabilityService(drafts, workflows, records=records, clock=clock)


def get_delivery_service(drafts: Drafts, workflows: Workflows, clock: ClockDep) -> DeliveryService:
    return DeliveryService(drafts, workflows, clock=clock)


ProductRequests = Annotated[ProductRequestService, Depends(get_product_request_service)]
Orders = Annotated[OrderService, Depends(get_order_service)]
Fulfillment = Annotated[FulfillmentService, Depends(get_fulfillment_service)]
Availability = Annotated[AvailabilityService, Depends(get_availability_service)]
Deliveries = Annotated[DeliveryService, Depends(get_delivery_service)]
