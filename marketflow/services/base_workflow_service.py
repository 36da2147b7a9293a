"""Base Workflow Service - shared load/transition/save plumbing.

Every workflow service keeps its records in namespaced collections
(``<role>-<entity>-<identity>``). Mutations follow the same sequence under
the collection's lock: load the whole collection, build the new one, save
it whole.
"""

from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from marketflow.core.aggregation import bucket_counts
from marketflow.core.exceptions import RecordNotFound
from marketflow.core.workflow import Clock, apply_transition, find_index, utc_now
from marketflow.core.workflow_config import StatusWorkflow, WorkflowConfig
from marketflow.infra.draft_store import DraftStore, WorkflowStore, namespace_key
from marketflow.infra.logging import get_logger
from marketflow.schemas.insights import StatusCounts

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseWorkflowService(Generic[T]):
    """Common operations over one record type's namespaced collections.

    Subclasses set:
        model: Record schema
        role: Namespace role (farmer, customer, agent)
        entity_key: Namespace entity (requests, orders, ...)
        workflow_entity: Name of the transition table, or None when the
            records have no workflow
    """

    model: ClassVar[type[BaseModel]]
    role: ClassVar[str]
    entity_key: ClassVar[str]
    workflow_entity: ClassVar[str | None] = None
    status_values: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        drafts: DraftStore,
        workflows: WorkflowConfig,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize workflow service.

        Args:
            drafts: Namespaced collection store
            workflows: Loaded transition tables
            clock: Source of timestamps
        """
        self.store: WorkflowStore[T] = WorkflowStore(drafts, self.model)  # type: ignore[arg-type]
        self.workflow: StatusWorkflow | None = (
            workflows.get_workflow(self.workflow_entity) if self.workflow_entity else None
        )
        self.clock = clock

    def key(self, identity: str) -> str:
        return namespace_key(self.role, self.entity_key, identity)

    @property
    def key_prefix(self) -> str:
        return f"{self.role}-{self.entity_key}-"

    def statuses(self) -> tuple[str, ...]:
        if self.workflow is not None:
            return self.workflow.statuses
        return self.status_values

    async def list_for(self, identity: str) -> list[T]:
        return await self.store.load(self.key(identity))

    async def get(self, identity: str, record_id: str) -> T:
        records = await self.list_for(identity)
        index = find_index(records, record_id)
        if index is None:
            raise self._not_found(identity, record_id)
        return records[index]

    async def _append(self, identity: str, record: T) -> T:
        key = self.key(identity)
        async with self.store.lock(key):
            records = await self.store.load(key)
            await self.store.save(key, [*records, record])
        logger.info(
            "Record created",
            namespace_key=key,
            record_id=getattr(record, "id", None),
            model=type(record).__name__,
        )
        return record

    async def _transition(
        self,
        identity: str,
        record_id: str,
        transition: str,
        extra_fields: dict[str, Any] | None = None,
        checked: bool = True,
    ) -> T:
        """Apply a transition to one record and persist the collection.

        Args:
            identity: Owner of the collection
            record_id: Record to change
            transition: Transition name
            extra_fields: Additional fields to set
            checked: Validate against the service's workflow

        Raises:
            RecordNotFound: If the owner's collection has no such record
        """
        key = self.key(identity)
        async with self.store.lock(key):
            records = await self.store.load(key)
            if find_index(records, record_id) is None:
                raise self._not_found(identity, record_id)

            updated = apply_transition(
                records,
                record_id,
                transition,
                extra_fields,
                workflow=self.workflow if checked else None,
                now=self.clock,
            )
            await self.store.save(key, updated)

        return updated[find_index(updated, record_id)]  # type: ignore[index]

    async def _remove(self, identity: str, record_id: str) -> None:
        key = self.key(identity)
        async with self.store.lock(key):
            records = await self.store.load(key)
            remaining = [record for record in records if getattr(record, "id") != record_id]
            if len(remaining) == len(records):
                raise self._not_found(identity, record_id)
            await self.store.save(key, remaining)
        logger.info("Record deleted", namespace_key=key, record_id=record_id)

    def counts(self, records: Sequence[T]) -> StatusCounts:
        return StatusCounts(
            total=len(records),
            counts=bucket_counts(records, statuses=self.statuses()),
        )

    def _not_found(self, identity: str, record_id: str) -> RecordNotFound:
        return RecordNotFound(
            f"{self.model.__name__} '{record_id}' not found",
            detail={"namespace_key": self.key(identity), "record_id": record_id},
        )
