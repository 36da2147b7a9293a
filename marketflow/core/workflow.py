"""Status workflow engine.

Applies one named transition to one record of a collection and returns a
new collection. The engine never performs I/O; callers persist the result.
"""

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from marketflow.core.exceptions import ValidationFailed
from marketflow.core.workflow_config import StatusWorkflow
from marketflow.infra.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R", BaseModel, dict)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def field_value(record: Any, name: str) -> Any:
    """Read a field from a pydantic model or a plain mapping."""
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    if isinstance(value, Enum):
        return value.value
    return value


def find_index(collection: Sequence[Any], record_id: str) -> int | None:
    for index, record in enumerate(collection):
        if field_value(record, "id") == record_id:
            return index
    return None


def merge_fields(record: R, fields: Mapping[str, Any]) -> R:
    """Return a copy of ``record`` with ``fields`` laid over its own.

    Pydantic records are re-validated so enum and date fields keep their types.
    """
    if isinstance(record, BaseModel):
        try:
            return type(record).model_validate({**record.model_dump(), **fields})
        except ValidationError as e:
            raise ValidationFailed(
                f"Invalid fields for {type(record).__name__}",
                detail={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e
    return {**record, **fields}


def apply_transition(
    collection: Sequence[R],
    record_id: str,
    transition: str,
    extra_fields: Mapping[str, Any] | None = None,
    workflow: StatusWorkflow | None = None,
    now: Clock = utc_now,
) -> list[R]:
    """Apply ``transition`` to the record with ``record_id``.

    Without a workflow the record's fields are simply replaced by the union
    of its fields and ``extra_fields``. With a workflow the current status
    must be an allowed predecessor; the target status and the transition's
    timestamp field are set by the engine.

    Args:
        collection: Current records, in order
        record_id: Id of the record to change
        transition: Transition name (confirm, ship, approve, ...)
        extra_fields: Additional fields to set (notes, ...)
        workflow: Transition table to validate against
        now: Clock used for timestamp stamps

    Returns:
        New list of the same length; equal to ``collection`` when no record
        has ``record_id``

    Raises:
        UnknownTransition: If the workflow has no such transition
        InvalidTransition: If the record's status does not allow it
        ValidationFailed: If ``extra_fields`` tries to set the status field
            of a workflow-checked record
    """
    index = find_index(collection, record_id)
    if index is None:
        logger.debug("Transition target not in collection", record_id=record_id, transition=transition)
        return list(collection)

    record = collection[index]
    fields = dict(extra_fields or {})

    if workflow is not None:
        if workflow.status_field in fields:
            raise ValidationFailed(
                f"'{workflow.status_field}' is set by the transition, not by the caller",
                detail={"transition": transition},
            )
        current = field_value(record, workflow.status_field)
        rule = workflow.rule_for(record_id, current, transition)
        fields[workflow.status_field] = rule.target
        if rule.stamp:
            fields[rule.stamp] = now()

        logger.info(
            "Transition applied",
            entity=workflow.entity,
            record_id=record_id,
            transition=transition,
            from_status=current,
            to_status=rule.target,
        )

    updated = list(collection)
    updated[index] = merge_fields(record, fields)
    return updated
