"""Delivery agent endpoints."""

from fastapi import APIRouter, status

from marketflow.api.deps import AdminMember, AgentMember, Deliveries
from marketflow.schemas.insights import EarningsSummary, StatusCounts
from marketflow.schemas.requests import DeliveryAssign
from marketflow.schemas.workflow import DeliveryAssignment

router = APIRouter()


@router.post("", response_model=DeliveryAssignment, status_code=status.HTTP_201_CREATED)
async def assign_delivery(
    payload: DeliveryAssign,
    _: AdminMember,
    service: Deliveries,
) -> DeliveryAssignment:
    return await service.assign(payload)


@router.get("", response_model=list[DeliveryAssignment])
async def list_deliveries(member: AgentMember, service: Deliveries) -> list[DeliveryAssignment]:
    return await service.list_for(member.member_id)


@router.get("/stats", response_model=StatusCounts)
async def delivery_stats(member: AgentMember, service: Deliveries) -> StatusCounts:
    return await service.stats(member.member_id)


@router.get("/earnings", response_model=EarningsSummary)
async def delivery_earnings(member: AgentMember, service: Deliveries) -> EarningsSummary:
    return await service.earnings(member.member_id)


@router.post("/{delivery_id}/{transition}", response_model=DeliveryAssignment)
async def transition_delivery(
    delivery_id: str,
    transition: str,
    member: AgentMember,
    service: Deliveries,
) -> DeliveryAssignment:
    return await service.apply(member.member_id, delivery_id, transition)
