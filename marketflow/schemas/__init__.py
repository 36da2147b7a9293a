"""Pydantic schemas for workflow records, request/response validation and statistics."""

from marketflow.schemas.common import ErrorResponse, HealthResponse
from marketflow.schemas.workflow import (
    AvailabilityStatus,
    DeliveryAssignment,
    DeliveryStatus,
    FarmerOrder,
    FarmerOrderStatus,
    Order,
    OrderItem,
    OrderStatus,
    ProductAvailability,
    ProductRequest,
    ProductRequestStatus,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "AvailabilityStatus",
    "DeliveryAssignment",
    "DeliveryStatus",
    "FarmerOrder",
    "FarmerOrderStatus",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ProductAvailability",
    "ProductRequest",
    "ProductRequestStatus",
]
