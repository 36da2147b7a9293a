"""Request payloads accepted by the API."""

from datetime import date, datetime
from typing import Literal

from pydantic import Field, model_validator

from marketflow.schemas.workflow import AvailabilityStatus, CamelModel, OrderItem, ProductRequest


class ProductRequestCreate(CamelModel):
    """Farmer submission; every field but the description is required."""

    product_name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    price: float = Field(gt=0)
    description: str = ""


class ReviewDecision(CamelModel):
    decision: Literal["approve", "reject"]
    notes: str = ""


class ProductRequestView(ProductRequest):
    """Product request with its category resolved to a display name."""

    category_name: str = "Unknown"


class OrderCreate(CamelModel):
    items: list[OrderItem] = Field(min_length=1)
    estimated_delivery: datetime | None = None
    notes: str | None = None


class AvailabilityCreate(CamelModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=0)
    price: float | None = Field(default=None, ge=0)
    harvest_date: date
    expiry_date: date
    notes: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "AvailabilityCreate":
        if self.expiry_date < self.harvest_date:
            raise ValueError("expiry_date must not be before harvest_date")
        return self


class AvailabilityUpdate(CamelModel):
    """Partial update; ``status`` is only changed when given explicitly."""

    quantity: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    harvest_date: date | None = None
    expiry_date: date | None = None
    status: AvailabilityStatus | None = None
    notes: str | None = None


class DeliveryAssign(CamelModel):
    agent_id: str = Field(min_length=1)
    order_id: str = Field(min_length=1)
    customer_name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    items_count: int = Field(default=0, ge=0)
    amount: float = Field(default=0.0, ge=0)
