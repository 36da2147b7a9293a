"""Error types raised by the workflow layer.

Each error carries the HTTP status the API maps it to and an optional
``detail`` mapping that is returned to the client as-is.
"""

from typing import Any


class MarketflowError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    @property
    def error_type(self) -> str:
        return type(self).__name__


# Workflow errors
class WorkflowError(MarketflowError):
    status_code = 400


class UnknownTransition(WorkflowError):
    """Transition name is not defined for the entity."""

    status_code = 400


class InvalidTransition(WorkflowError):
    """Record's current status is not an allowed predecessor."""

    status_code = 409

    def __init__(
        self,
        entity: str,
        record_id: str,
        current_status: str,
        transition: str,
        allowed: list[str],
    ) -> None:
        super().__init__(
            f"Cannot {transition} {entity} '{record_id}' from status '{current_status}'",
            detail={
                "entity": entity,
                "record_id": record_id,
                "current_status": current_status,
                "transition": transition,
                "allowed_transitions": allowed,
            },
        )
        self.entity = entity
        self.record_id = record_id
        self.current_status = current_status
        self.transition = transition
        self.allowed = allowed


class RecordNotFound(WorkflowError):
    status_code = 404


class ValidationFailed(WorkflowError):
    """Submitted data is incomplete or out of range."""

    status_code = 422


# Storage errors
class StoreError(MarketflowError):
    pass


class DeserializationError(StoreError):
    """Stored collection is not a JSON array of valid records."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Collection '{key}' could not be deserialized: {reason}",
            detail={"namespace_key": key},
        )
        self.key = key
        self.reason = reason


class RecordStoreError(MarketflowError):
    """Hosted record store request failed."""

    status_code = 502
