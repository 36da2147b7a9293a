"""Customer order endpoints."""

from fastapi import APIRouter, status

from marketflow.api.deps import AdminMember, CustomerMember, Orders
from marketflow.schemas.insights import OrderSummary, StatusCounts
from marketflow.schemas.requests import OrderCreate
from marketflow.schemas.workflow import Order

router = APIRouter()


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def place_order(payload: OrderCreate, member: CustomerMember, service: Orders) -> Order:
    return await service.place_order(member.member_id, payload)


@router.get("", response_model=list[Order])
async def list_orders(member: CustomerMember, service: Orders) -> list[Order]:
    return await service.list_for(member.member_id)


@router.get("/summary", response_model=OrderSummary)
async def order_summary(member: CustomerMember, service: Orders) -> OrderSummary:
    return await service.summary(member.member_id)


@router.get("/stats", response_model=StatusCounts)
async def order_stats(member: CustomerMember, service: Orders) -> StatusCounts:
    return await service.stats(member.member_id)


@router.post("/{order_id}/cancel", response_model=Order)
async def cancel_order(order_id: str, member: CustomerMember, service: Orders) -> Order:
    return await service.cancel(member.member_id, order_id)


@router.post(
    "/{customer_id}/{order_id}/{transition}",
    response_model=Order,
    summary="Advance a customer's order (confirm, ship, deliver, cancel)",
)
async def advance_order(
    customer_id: str,
    order_id: str,
    transition: str,
    _: AdminMember,
    service: Orders,
) -> Order:
    return await service.advance(customer_id, order_id, transition)
