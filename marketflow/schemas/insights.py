"""Derived statistics schemas (dashboard counters, loyalty, nutrition)."""

from enum import Enum

from pydantic import Field

from marketflow.schemas.workflow import CamelModel, Order


class LoyaltyTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class LoyaltySummary(CamelModel):
    tier: LoyaltyTier
    total_spent: float
    progress: float = Field(description="Percent of the way to the next tier, 0-100")
    next_tier: LoyaltyTier | None = None
    next_threshold: float | None = None
    benefits: list[str] = Field(default_factory=list)
    points_balance: int | None = None


class NutritionInfo(CamelModel):
    """Nutrition facts as stored in the ``nutritioninfo`` collection.

    Vitamins, minerals and allergens are free text in the record store;
    lists are accepted as well.
    """

    id: str | None = Field(default=None, alias="_id")
    product_id: str | None = None
    calories: float | None = None
    protein: float | None = None
    fiber: float | None = None
    vitamins: str | list[str] | None = None
    minerals: str | list[str] | None = None
    allergens: str | list[str] | None = None


class NutritionScore(CamelModel):
    product_id: str | None = None
    score: int = Field(ge=0, le=5)


class StatusCounts(CamelModel):
    total: int
    counts: dict[str, int]


class OrderGroups(CamelModel):
    pending: int = 0
    active: int = 0
    delivered: int = 0
    cancelled: int = 0


class OrderView(Order):
    """Order with its item sum computed at read time."""

    live_total: float


class OrderSummary(CamelModel):
    groups: OrderGroups
    total_spent: float
    total_spent_display: str
    orders: list[OrderView]


class EarningsSummary(CamelModel):
    deliveries_completed: int
    total_amount: float
    total_amount_display: str
    counts: dict[str, int]
