"""Product request endpoints.

Farmers submit and track their requests; admins review them.
"""

from fastapi import APIRouter, Query, status

from marketflow.api.deps import AdminMember, FarmerMember, ProductRequests
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import StatusCounts
from marketflow.schemas.requests import ProductRequestCreate, ProductRequestView, ReviewDecision
from marketflow.schemas.workflow import ProductRequest, ProductRequestStatus

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "",
    response_model=ProductRequest,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a new product request",
)
async def submit_request(
    payload: ProductRequestCreate,
    member: FarmerMember,
    service: ProductRequests,
) -> ProductRequest:
    return await service.submit(member.member_id, payload)


@router.get("/mine", response_model=list[ProductRequestView])
async def list_my_requests(member: FarmerMember, service: ProductRequests) -> list[ProductRequestView]:
    requests = await service.list_for(member.member_id)
    return await service.with_category_names(requests)


@router.get("/mine/stats", response_model=StatusCounts)
async def my_request_stats(member: FarmerMember, service: ProductRequests) -> StatusCounts:
    return await service.stats(member.member_id)


@router.get("", response_model=list[ProductRequestView])
async def list_all_requests(
    _: AdminMember,
    service: ProductRequests,
    status_filter: ProductRequestStatus | None = Query(default=None, alias="status"),
) -> list[ProductRequestView]:
    """All farmers' requests, optionally filtered by status."""
    requests = await service.list_all(status_filter.value if status_filter else None)
    return await service.with_category_names(requests)


@router.get("/stats", response_model=StatusCounts)
async def request_stats(_: AdminMember, service: ProductRequests) -> StatusCounts:
    return await service.stats()


@router.post(
    "/{request_id}/review",
    response_model=ProductRequest,
    summary="Approve or reject a pending request",
)
async def review_request(
    request_id: str,
    payload: ReviewDecision,
    member: AdminMember,
    service: ProductRequests,
) -> ProductRequest:
    logger.info(
        "Review requested",
        request_id=request_id,
        decision=payload.decision,
        admin_id=member.member_id,
    )
    return await service.review(request_id, payload.decision, payload.notes)
