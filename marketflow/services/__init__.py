"""Business logic services."""

from marketflow.services.availability import AvailabilityService
from marketflow.services.deliveries import DeliveryService
from marketflow.services.fulfillment import FulfillmentService
from marketflow.services.orders import OrderService
from marketflow.services.product_requests import ProductRequestService
from marketflow.services.record_store_client import RecordStoreClient, get_record_store_client

__all__ = [
    "AvailabilityService",
    "DeliveryService",
    "FulfillmentService",
    "OrderService",
    "ProductRequestService",
    "RecordStoreClient",
    "get_record_store_client",
]
