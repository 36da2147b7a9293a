"""Farmer order fulfillment endpoints."""

from fastapi import APIRouter

from marketflow.api.deps import FarmerMember, Fulfillment
from marketflow.schemas.insights import StatusCounts
from marketflow.schemas.workflow import FarmerOrder

router = APIRouter()


@router.get("", response_model=list[FarmerOrder])
async def list_farmer_orders(member: FarmerMember, service: Fulfillment) -> list[FarmerOrder]:
    return await service.list_for(member.member_id)


@router.get("/stats", response_model=StatusCounts)
async def farmer_order_stats(member: FarmerMember, service: Fulfillment) -> StatusCounts:
    return await service.stats(member.member_id)


@router.post(
    "/{farmer_order_id}/{transition}",
    response_model=FarmerOrder,
    summary="Confirm, pack, ship or deliver a farmer order",
)
async def transition_farmer_order(
    farmer_order_id: str,
    transition: str,
    member: FarmerMember,
    service: Fulfillment,
) -> FarmerOrder:
    return await service.apply(member.member_id, farmer_order_id, transition)
