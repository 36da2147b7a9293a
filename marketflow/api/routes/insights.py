"""Derived statistics endpoints: loyalty tiers and nutrition scores."""

from fastapi import APIRouter, Query

from marketflow.api.deps import CurrentMember, Records
from marketflow.core.aggregation import loyalty_summary, nutrition_score
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import LoyaltySummary, NutritionInfo, NutritionScore

router = APIRouter()
logger = get_logger(__name__)


@router.get("/loyalty", response_model=LoyaltySummary)
async def loyalty_for_spend(total_spent: float = Query(ge=0)) -> LoyaltySummary:
    """Tier, progress and benefits for a given total spend."""
    return loyalty_summary(total_spent)


@router.get("/loyalty/me", response_model=LoyaltySummary)
async def my_loyalty(member: CurrentMember, records: Records) -> LoyaltySummary:
    """Loyalty standing of the calling member.

    Loyalty accounts are keyed by the member's login email; the member id is
    used only when no email is forwarded. Members without a loyalty account
    are reported at bronze with no spend.
    """
    account_key = member.email or member.member_id
    account = await records.find_one("loyaltyprogram", "memberId", account_key)
    if account is None:
        logger.info("No loyalty account yet", member_id=member.member_id, account_key=account_key)
        return loyalty_summary(0.0, points_balance=0)

    return loyalty_summary(
        float(account.get("totalSpent") or 0),
        points_balance=int(account.get("pointsBalance") or 0),
    )


@router.post("/nutrition-score", response_model=NutritionScore)
async def score_nutrition(payload: NutritionInfo) -> NutritionScore:
    return NutritionScore(product_id=payload.product_id, score=nutrition_score(payload))


@router.get("/nutrition", response_model=list[NutritionScore])
async def catalog_nutrition(records: Records) -> list[NutritionScore]:
    """Score every nutrition record in the catalog."""
    page = await records.get_all("nutritioninfo")
    scores = []
    for item in page.items:
        info = NutritionInfo.model_validate(item)
        scores.append(NutritionScore(product_id=info.product_id, score=nutrition_score(info)))
    return scores
