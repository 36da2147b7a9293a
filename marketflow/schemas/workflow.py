"""Workflow record schemas.

Stored collections and API payloads use the marketplace's camelCase keys
(``farmerId``, ``createdDate``); attributes stay snake_case in Python and
both spellings are accepted on input.
"""

from datetime import date, datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Statuses
# =============================================================================


class ProductRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class FarmerOrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PACKED = "packed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"


# =============================================================================
# Records
# =============================================================================


class ProductRequest(CamelModel):
    """Farmer's request to list a new product, reviewed by an admin."""

    id: str = Field(default_factory=new_id)
    farmer_id: str
    product_name: str
    category: str
    quantity: int = Field(ge=0)
    price: float = Field(ge=0)
    description: str = ""
    status: ProductRequestStatus = ProductRequestStatus.PENDING
    created_date: datetime = Field(default_factory=utcnow)
    reviewed_date: datetime | None = None
    notes: str | None = None


class OrderItem(CamelModel):
    product_id: str
    product_name: str
    quantity: int = Field(ge=0)
    price: float = Field(ge=0)
    farmer_id: str


class Order(CamelModel):
    """Customer order. ``total_amount`` is frozen when the order is placed."""

    id: str = Field(default_factory=new_id)
    customer_id: str
    items: list[OrderItem] = Field(default_factory=list)
    total_amount: float = 0.0
    status: OrderStatus = OrderStatus.PENDING
    created_date: datetime = Field(default_factory=utcnow)
    estimated_delivery: datetime | None = None
    notes: str | None = None


class FarmerOrder(CamelModel):
    """One farmer's share of a customer order."""

    id: str = Field(default_factory=new_id)
    order_id: str
    farmer_id: str
    items: list[OrderItem] = Field(default_factory=list)
    status: FarmerOrderStatus = FarmerOrderStatus.PENDING
    created_date: datetime = Field(default_factory=utcnow)
    confirmed_date: datetime | None = None
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None
    notes: str | None = None


class ProductAvailability(CamelModel):
    id: str = Field(default_factory=new_id)
    farmer_id: str
    product_id: str
    product_name: str
    quantity: int = Field(ge=0)
    price: float = Field(ge=0)
    harvest_date: date
    expiry_date: date
    status: AvailabilityStatus
    notes: str | None = None
    created_date: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_dates(self) -> "ProductAvailability":
        if self.expiry_date < self.harvest_date:
            raise ValueError("expiry_date must not be before harvest_date")
        return self


class DeliveryAssignment(CamelModel):
    """Order handed to a delivery agent."""

    id: str = Field(default_factory=new_id)
    agent_id: str
    order_id: str
    customer_name: str
    address: str
    items_count: int = Field(default=0, ge=0)
    amount: float = Field(default=0.0, ge=0)
    status: DeliveryStatus = DeliveryStatus.PENDING
    created_date: datetime = Field(default_factory=utcnow)
    picked_up_date: datetime | None = None
    delivered_date: datetime | None = None
