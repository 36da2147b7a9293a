"""Record Store Client - HTTP client for the hosted CRUD record store.

Catalog and content collections (products, categories, nutrition facts,
loyalty accounts, ...) live in the hosted store and are read through this
client. Failures are logged and raised as RecordStoreError.
"""

from typing import Any

import httpx

from marketflow.config import settings
from marketflow.core.exceptions import RecordStoreError
from marketflow.infra.logging import get_logger
from marketflow.schemas.records import PagedItems

logger = get_logger(__name__)

COLLECTIONS = frozenset({
    "products",
    "productcategories",
    "blogposts",
    "certifications",
    "communityposts",
    "productreviews",
    "recipes",
    "nutritioninfo",
    "farmerprofiles",
    "deliveryagents",
    "deliverytracking",
    "loyaltyprogram",
    "userroles",
})


class RecordStoreClient:
    """HTTP client for the hosted record store API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
    ) -> None:
        """Initialize record store client.

        Args:
            base_url: Record store base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            api_key: API key header value (defaults to settings)
        """
        self.base_url = base_url or settings.record_store_url
        self.timeout = timeout if timeout is not None else settings.record_store_timeout
        self.api_key = api_key if api_key is not None else settings.record_store_api_key
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown record store collection: {collection}")

    async def _request(
        self,
        method: str,
        path: str,
        collection: str,
        **kwargs: Any,
    ) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            logger.error(
                "Record store returned error",
                method=method,
                collection=collection,
                status_code=e.response.status_code,
                response_text=e.response.text[:500],
            )
            raise RecordStoreError(
                f"Record store {method} {collection} failed with {e.response.status_code}",
                detail={"collection": collection, "status_code": e.response.status_code},
            ) from e

        except httpx.HTTPError as e:
            logger.error(
                "Record store request failed",
                method=method,
                collection=collection,
                error=str(e),
            )
            raise RecordStoreError(
                f"Record store {method} {collection} failed: {e}",
                detail={"collection": collection},
            ) from e

    async def get_all(
        self,
        collection: str,
        limit: int | None = None,
        skip: int = 0,
    ) -> PagedItems:
        """List items of a collection.

        Args:
            collection: Collection name (e.g. "products")
            limit: Page size; the store default when omitted
            skip: Number of items to skip

        Returns:
            Page of raw items
        """
        self._check_collection(collection)
        params: dict[str, Any] = {"skip": skip}
        if limit is not None:
            params["limit"] = limit

        response = await self._request(
            "GET", f"/collections/{collection}/items", collection, params=params
        )
        page = PagedItems.model_validate(response.json())
        logger.debug("Record store items fetched", collection=collection, items=len(page.items))
        return page

    async def get_by_id(self, collection: str, item_id: str) -> dict[str, Any] | None:
        """Get one item; None when the store answers 404."""
        self._check_collection(collection)
        try:
            response = await self._request(
                "GET", f"/collections/{collection}/items/{item_id}", collection
            )
        except RecordStoreError as e:
            if e.detail and e.detail.get("status_code") == 404:
                return None
            raise
        return response.json()

    async def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        self._check_collection(collection)
        response = await self._request(
            "POST", f"/collections/{collection}/items", collection, json=record
        )
        logger.info("Record created", collection=collection)
        return response.json()

    async def update(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Replace an item; ``record`` must carry its ``_id``."""
        self._check_collection(collection)
        item_id = record.get("_id")
        if not item_id:
            raise ValueError("Record to update has no _id")
        response = await self._request(
            "PUT", f"/collections/{collection}/items/{item_id}", collection, json=record
        )
        logger.info("Record updated", collection=collection, item_id=item_id)
        return response.json()

    async def delete(self, collection: str, item_id: str) -> None:
        self._check_collection(collection)
        await self._request("DELETE", f"/collections/{collection}/items/{item_id}", collection)
        logger.info("Record deleted", collection=collection, item_id=item_id)

    async def find_one(self, collection: str, field: str, value: Any) -> dict[str, Any] | None:
        """First item of the first page whose ``field`` equals ``value``."""
        page = await self.get_all(collection)
        for item in page.items:
            if item.get(field) == value:
                return item
        return None


# Singleton instance
_record_store_client: RecordStoreClient | None = None


def get_record_store_client() -> RecordStoreClient:
    """Get record store client singleton."""
    global _record_store_client
    if _record_store_client is None:
        _record_store_client = RecordStoreClient()
    return _record_store_client
