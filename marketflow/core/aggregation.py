"""Derived statistics over collection snapshots.

All functions are pure: they read records (pydantic models or mappings)
and never modify them.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from marketflow.core.workflow import field_value
from marketflow.schemas.insights import LoyaltySummary, LoyaltyTier, NutritionInfo, OrderGroups
from marketflow.schemas.workflow import AvailabilityStatus

# Minimum total spend for each tier, ascending
TIER_THRESHOLDS: dict[LoyaltyTier, float] = {
    LoyaltyTier.BRONZE: 0,
    LoyaltyTier.SILVER: 500,
    LoyaltyTier.GOLD: 1500,
    LoyaltyTier.PLATINUM: 3000,
}

TIER_BENEFITS: dict[LoyaltyTier, list[str]] = {
    LoyaltyTier.BRONZE: [
        "5% discount on all purchases",
        "Free shipping on orders over $50",
        "Early access to new products",
    ],
    LoyaltyTier.SILVER: [
        "10% discount on all purchases",
        "Free shipping on all orders",
        "Exclusive member events",
        "Birthday bonus points",
    ],
    LoyaltyTier.GOLD: [
        "15% discount on all purchases",
        "Free express shipping",
        "Priority customer support",
        "Double points on purchases",
        "Exclusive product previews",
    ],
    LoyaltyTier.PLATINUM: [
        "20% discount on all purchases",
        "Free express shipping",
        "VIP customer support",
        "Triple points on purchases",
        "Exclusive events & tastings",
        "Personal shopping assistant",
    ],
}

LOW_STOCK_ABOVE = 10


def bucket_counts(
    collection: Iterable[Any],
    status_field: str = "status",
    statuses: Sequence[str] | None = None,
) -> dict[str, int]:
    """Count records per status value.

    Args:
        collection: Records to partition
        status_field: Field holding the status
        statuses: Statuses that must appear in the result even with a zero count

    Returns:
        Mapping of status to count; values sum to the number of records
    """
    counter = Counter(field_value(record, status_field) for record in collection)
    counts = {status: 0 for status in statuses or ()}
    for status, count in counter.items():
        counts[status] = counts.get(status, 0) + count
    return counts


def sum_item_value(order: Any) -> float:
    """Sum of price x quantity over an order's line items."""
    items = field_value(order, "items") or []
    return float(sum(field_value(item, "price") * field_value(item, "quantity") for item in items))


def loyalty_tier(total_spent: float) -> LoyaltyTier:
    tier = LoyaltyTier.BRONZE
    for candidate, threshold in TIER_THRESHOLDS.items():
        if total_spent >= threshold:
            tier = candidate
    return tier


def next_tier(tier: LoyaltyTier) -> LoyaltyTier | None:
    tiers = list(TIER_THRESHOLDS)
    position = tiers.index(tier)
    if position + 1 < len(tiers):
        return tiers[position + 1]
    return None


def tier_progress(total_spent: float) -> float:
    """Percent progress toward the next tier threshold, capped at 100."""
    upcoming = next_tier(loyalty_tier(total_spent))
    if upcoming is None:
        return 100.0
    return min(100.0, total_spent / TIER_THRESHOLDS[upcoming] * 100)


def tier_benefits(tier: LoyaltyTier | str | None) -> list[str]:
    """Benefits of a tier; unknown or missing tiers get bronze benefits."""
    if isinstance(tier, LoyaltyTier):
        return list(TIER_BENEFITS[tier])
    try:
        resolved = LoyaltyTier(tier.lower()) if tier else LoyaltyTier.BRONZE
    except ValueError:
        resolved = LoyaltyTier.BRONZE
    return list(TIER_BENEFITS[resolved])


def loyalty_summary(total_spent: float, points_balance: int | None = None) -> LoyaltySummary:
    tier = loyalty_tier(total_spent)
    upcoming = next_tier(tier)
    return LoyaltySummary(
        tier=tier,
        total_spent=total_spent,
        progress=tier_progress(total_spent),
        next_tier=upcoming,
        next_threshold=TIER_THRESHOLDS[upcoming] if upcoming else None,
        benefits=tier_benefits(tier),
        points_balance=points_balance,
    )


def nutrition_score(info: NutritionInfo) -> int:
    """Additive 0-5 score from fiber, protein, vitamins, minerals and allergens."""
    score = 0
    if (info.fiber or 0) > 3:
        score += 2
    if (info.protein or 0) > 5:
        score += 2
    if info.vitamins:
        score += 1
    if info.minerals:
        score += 1
    if not info.allergens:
        score += 1
    return min(5, score)


def availability_status(quantity: int) -> AvailabilityStatus:
    if quantity > LOW_STOCK_ABOVE:
        return AvailabilityStatus.AVAILABLE
    if quantity > 0:
        return AvailabilityStatus.LOW_STOCK
    return AvailabilityStatus.OUT_OF_STOCK


def order_status_groups(orders: Iterable[Any]) -> OrderGroups:
    """Customer order tabs: pending, active (confirmed or shipped), delivered, cancelled."""
    counts = bucket_counts(orders)
    return OrderGroups(
        pending=counts.get("pending", 0),
        active=counts.get("confirmed", 0) + counts.get("shipped", 0),
        delivered=counts.get("delivered", 0),
        cancelled=counts.get("cancelled", 0),
    )


def format_inr(amount: float | None) -> str:
    """Format an amount as whole Indian Rupees with lakh/crore grouping.

    >>> format_inr(1000000)
    '₹10,00,000'
    """
    if amount is None:
        return "₹0"

    sign = "-" if amount < 0 else ""
    digits = str(Decimal(str(abs(amount))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups) + "," + tail
    return f"{sign}₹{digits}"


def format_inr_range(min_price: float | None, max_price: float | None) -> str:
    return f"{format_inr(min_price)} - {format_inr(max_price)}"
