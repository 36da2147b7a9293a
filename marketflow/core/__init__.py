"""Core module - status workflows, transition tables and derived statistics."""

from marketflow.core.exceptions import (
    DeserializationError,
    InvalidTransition,
    MarketflowError,
    RecordNotFound,
    UnknownTransition,
)
from marketflow.core.workflow import apply_transition
from marketflow.core.workflow_config import (
    StatusWorkflow,
    TransitionRule,
    WorkflowConfig,
    load_workflow_config,
)

__all__ = [
    "DeserializationError",
    "InvalidTransition",
    "MarketflowError",
    "RecordNotFound",
    "UnknownTransition",
    "apply_transition",
    "StatusWorkflow",
    "TransitionRule",
    "WorkflowConfig",
    "load_workflow_config",
]
