"""API routes module."""

from marketflow.api.routes.availability import router as availability_router
from marketflow.api.routes.deliveries import router as deliveries_router
from marketflow.api.routes.farmer_orders import router as farmer_orders_router
from marketflow.api.routes.health import router as health_router
from marketflow.api.routes.insights import router as insights_router
from marketflow.api.routes.orders import router as orders_router
from marketflow.api.routes.product_requests import router as product_requests_router

__all__ = [
    "availability_router",
    "deliveries_router",
    "farmer_orders_router",
    "health_router",
    "insights_router",
    "orders_router",
    "product_requests_router",
]
