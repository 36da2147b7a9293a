"""Farmer product availability endpoints."""

from fastapi import APIRouter, Response, status

from marketflow.api.deps import Availability, FarmerMember
from marketflow.schemas.insights import StatusCounts
from marketflow.schemas.requests import AvailabilityCreate, AvailabilityUpdate
from marketflow.schemas.workflow import ProductAvailability

router = APIRouter()


@router.post("", response_model=ProductAvailability, status_code=status.HTTP_201_CREATED)
async def add_availability(
    payload: AvailabilityCreate,
    member: FarmerMember,
    service: Availability,
) -> ProductAvailability:
    return await service.add(member.member_id, payload)


@router.get("", response_model=list[ProductAvailability])
async def list_availability(member: FarmerMember, service: Availability) -> list[ProductAvailability]:
    return await service.list_for(member.member_id)


@router.get("/stats", response_model=StatusCounts)
async def availability_stats(member: FarmerMember, service: Availability) -> StatusCounts:
    return await service.stats(member.member_id)


@router.put("/{availability_id}", response_model=ProductAvailability)
async def update_availability(
    availability_id: str,
    payload: AvailabilityUpdate,
    member: FarmerMember,
    service: Availability,
) -> ProductAvailability:
    return await service.update(member.member_id, availability_id, payload)


@router.delete("/{availability_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(
    availability_id: str,
    member: FarmerMember,
    service: Availability,
) -> Response:
    await service.delete(member.member_id, availability_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
