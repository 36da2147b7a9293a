"""Namespaced storage for workflow collections.

Each namespace key (``<role>-<entity>-<identity>``) maps to one JSON array
that is rewritten whole on every save.

Provides:
- DraftStore interface with an in-memory and a database backend
- WorkflowStore typed repository over a DraftStore
- Per-key asyncio locks for read-modify-write sequences
"""

import asyncio
import json
import weakref
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from marketflow.config import settings
from marketflow.core.exceptions import DeserializationError
from marketflow.infra.database import get_db_session
from marketflow.infra.logging import get_logger
from marketflow.models.draft_collection import DraftCollection

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def namespace_key(role: str, entity: str, identity: str) -> str:
    """Build a namespace key, e.g. ``farmer-requests-f1``."""
    return f"{role}-{entity}-{identity}"


def decode_collection(key: str, raw: str) -> list[Any]:
    """Parse stored JSON text into a list.

    Raises:
        DeserializationError: If the text is not JSON or not a JSON array
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Malformed collection JSON", namespace_key=key, error=str(e))
        raise DeserializationError(key, f"invalid JSON ({e.msg})") from e

    if not isinstance(data, list):
        logger.error("Collection is not an array", namespace_key=key, found=type(data).__name__)
        raise DeserializationError(key, f"expected a JSON array, found {type(data).__name__}")
    return data


class DraftStore(ABC):
    """Key-value store of JSON arrays."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def lock(self, key: str) -> asyncio.Lock:
        """Lock guarding a load-modify-save sequence on ``key``.

        Only serializes writers inside this process. A lock is dropped once
        no holder or waiter references it.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def load(self, key: str) -> list[Any]:
        """Load the collection stored under ``key``; empty if absent.

        Raises:
            DeserializationError: If the stored value is malformed
        """
        raw = await self._read(key)
        if raw is None:
            return []
        return decode_collection(key, raw)

    async def save(self, key: str, collection: Sequence[Any]) -> None:
        """Overwrite the collection stored under ``key``."""
        items = list(collection)
        await self._write(key, json.dumps(items), len(items))
        logger.debug("Collection saved", namespace_key=key, items=len(items))

    @abstractmethod
    async def _read(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def _write(self, key: str, raw: str, item_count: int) -> None:
        ...

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """Namespace keys starting with ``prefix``, sorted."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def ping(self) -> bool:
        ...


class MemoryDraftStore(DraftStore):
    """Process-local store holding serialized JSON text."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__()
        self._data: dict[str, str] = dict(initial or {})

    async def _read(self, key: str) -> str | None:
        return self._data.get(key)

    async def _write(self, key: str, raw: str, item_count: int) -> None:
        self._data[key] = raw

    async def keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self._data if key.startswith(prefix))

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def ping(self) -> bool:
        return True


SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class DatabaseDraftStore(DraftStore):
    """Store backed by the ``draft_collections`` table."""

    def __init__(self, session_factory: SessionFactory = get_db_session) -> None:
        super().__init__()
        self._session = session_factory

    async def _read(self, key: str) -> str | None:
        async with self._session() as session:
            row = await session.get(DraftCollection, key)
            return row.payload if row is not None else None

    async def _write(self, key: str, raw: str, item_count: int) -> None:
        async with self._session() as session:
            row = await session.get(DraftCollection, key)
            if row is None:
                session.add(
                    DraftCollection(namespace_key=key, payload=raw, item_count=item_count)
                )
            else:
                row.payload = raw
                row.item_count = item_count

    async def keys(self, prefix: str = "") -> list[str]:
        async with self._session() as session:
            result = await session.execute(
                select(DraftCollection.namespace_key)
                .where(DraftCollection.namespace_key.startswith(prefix))
                .order_by(DraftCollection.namespace_key)
            )
            return list(result.scalars().all())

    async def delete(self, key: str) -> None:
        async with self._session() as session:
            row = await session.get(DraftCollection, key)
            if row is not None:
                await session.delete(row)

    async def ping(self) -> bool:
        try:
            async with self._session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Draft store ping failed", error=str(e))
            return False


class WorkflowStore(Generic[T]):
    """Typed repository of one record type over a DraftStore."""

    def __init__(self, drafts: DraftStore, model: type[T]) -> None:
        self._drafts = drafts
        self._model = model
        self._adapter: TypeAdapter[list[T]] = TypeAdapter(list[model])  # type: ignore[valid-type]

    @property
    def drafts(self) -> DraftStore:
        return self._drafts

    def lock(self, key: str) -> asyncio.Lock:
        return self._drafts.lock(key)

    async def keys(self, prefix: str) -> list[str]:
        return await self._drafts.keys(prefix)

    async def load(self, key: str) -> list[T]:
        """Load and validate records.

        Raises:
            DeserializationError: If the stored value is malformed or a record is invalid
        """
        items = await self._drafts.load(key)
        try:
            return self._adapter.validate_python(items)
        except ValidationError as e:
            logger.error(
                "Stored records failed validation",
                namespace_key=key,
                model=self._model.__name__,
                errors=e.error_count(),
            )
            raise DeserializationError(
                key, f"{e.error_count()} invalid {self._model.__name__} field(s)"
            ) from e

    async def save(self, key: str, records: Sequence[T]) -> None:
        await self._drafts.save(
            key, self._adapter.dump_python(list(records), mode="json", by_alias=True)
        )


# Singleton store
_store: DraftStore | None = None


def get_draft_store() -> DraftStore:
    """Get the draft store selected by settings.draft_store_backend."""
    global _store
    if _store is None:
        if settings.draft_store_backend == "database":
            _store = DatabaseDraftStore()
        else:
            _store = MemoryDraftStore()
        logger.info("Draft store initialized", backend=settings.draft_store_backend)
    return _store


def reset_draft_store() -> None:
    """Drop the store singleton so the next call rebuilds it from settings."""
    global _store
    _store = None
