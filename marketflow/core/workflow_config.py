"""Workflow Configuration - Load and manage status transition tables.

Configuration is loaded from (first match wins):
1. ``settings.workflow_config_path``
2. ``workflows.yaml`` shipped inside this package

The built-in tables are used only when neither file exists.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from marketflow.config import settings
from marketflow.core.exceptions import InvalidTransition, UnknownTransition
from marketflow.infra.logging import get_logger

logger = get_logger(__name__)

BUNDLED_WORKFLOWS = Path(__file__).parent / "workflows.yaml"


@dataclass(frozen=True)
class TransitionRule:
    """A single named transition of a status workflow."""

    name: str
    sources: tuple[str, ...]
    target: str
    stamp: str | None = None

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "TransitionRule":
        """Create from dictionary."""
        sources = data.get("from", [])
        if isinstance(sources, str):
            sources = [sources]
        return cls(
            name=name,
            sources=tuple(sources),
            target=data.get("to", ""),
            stamp=data.get("stamp"),
        )


@dataclass(frozen=True)
class StatusWorkflow:
    """Closed set of statuses and the transitions allowed between them."""

    entity: str
    statuses: tuple[str, ...]
    transitions: dict[str, TransitionRule]
    terminal: tuple[str, ...] = field(default_factory=tuple)
    status_field: str = "status"

    @classmethod
    def from_dict(cls, entity: str, data: dict[str, Any]) -> "StatusWorkflow":
        """Create from dictionary.

        Raises:
            ValueError: If a transition references an undeclared status or
                leaves a terminal status
        """
        statuses = tuple(data.get("statuses", []))
        terminal = tuple(data.get("terminal", []))
        transitions = {
            name: TransitionRule.from_dict(name, rule)
            for name, rule in (data.get("transitions") or {}).items()
        }

        if not statuses:
            raise ValueError(f"Workflow '{entity}' declares no statuses")

        unknown_terminal = set(terminal) - set(statuses)
        if unknown_terminal:
            raise ValueError(
                f"Workflow '{entity}' has undeclared terminal statuses: {sorted(unknown_terminal)}"
            )

        for rule in transitions.values():
            if not rule.sources:
                raise ValueError(f"Transition '{entity}.{rule.name}' has no source status")
            undeclared = {*rule.sources, rule.target} - set(statuses)
            if undeclared:
                raise ValueError(
                    f"Transition '{entity}.{rule.name}' uses undeclared statuses: {sorted(undeclared)}"
                )
            leaving = set(rule.sources) & set(terminal)
            if leaving:
                raise ValueError(
                    f"Transition '{entity}.{rule.name}' leaves terminal statuses: {sorted(leaving)}"
                )

        return cls(
            entity=entity,
            statuses=statuses,
            transitions=transitions,
            terminal=terminal,
            status_field=data.get("status_field", "status"),
        )

    def allowed_next(self, status: str) -> list[str]:
        """Transition names that may be applied from ``status``."""
        return [name for name, rule in self.transitions.items() if status in rule.sources]

    def next_statuses(self, status: str) -> list[str]:
        """Statuses reachable from ``status`` in one transition."""
        return [rule.target for rule in self.transitions.values() if status in rule.sources]

    def is_terminal(self, status: str) -> bool:
        return status in self.terminal

    def rule_for(self, record_id: str, current_status: str, transition: str) -> TransitionRule:
        """Resolve a transition for a record in ``current_status``.

        Raises:
            UnknownTransition: If the workflow has no such transition
            InvalidTransition: If ``current_status`` is not an allowed predecessor
        """
        rule = self.transitions.get(transition)
        if rule is None:
            raise UnknownTransition(
                f"Unknown transition '{transition}' for {self.entity}",
                detail={"entity": self.entity, "available": list(self.transitions)},
            )
        if current_status not in rule.sources:
            raise InvalidTransition(
                entity=self.entity,
                record_id=record_id,
                current_status=current_status,
                transition=transition,
                allowed=self.allowed_next(current_status),
            )
        return rule


@dataclass(frozen=True)
class WorkflowConfig:
    """All status workflows known to the service."""

    version: str
    workflows: dict[str, StatusWorkflow]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowConfig":
        workflows = {
            entity: StatusWorkflow.from_dict(entity, workflow_data)
            for entity, workflow_data in (data.get("workflows") or {}).items()
        }
        return cls(version=str(data.get("version", "0.0.0")), workflows=workflows)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "WorkflowConfig":
        """Parse YAML content into WorkflowConfig.

        Raises:
            ValueError: If the document is not a mapping or a workflow is invalid
        """
        data = yaml.safe_load(yaml_content)
        if not isinstance(data, dict):
            raise ValueError("Workflow config must be a YAML mapping")
        return cls.from_dict(data)

    def get_workflow(self, entity: str) -> StatusWorkflow:
        """Get the workflow for an entity.

        Raises:
            KeyError: If no workflow is configured for the entity
        """
        if entity not in self.workflows:
            raise KeyError(f"No workflow configured for entity: {entity}")
        return self.workflows[entity]

    def get_available_workflows(self) -> list[str]:
        return list(self.workflows.keys())


DEFAULT_WORKFLOWS: dict[str, Any] = {
    "version": "1.0.0",
    "workflows": {
        "product_request": {
            "statuses": ["pending", "approved", "rejected"],
            "terminal": ["approved", "rejected"],
            "transitions": {
                "approve": {"from": ["pending"], "to": "approved", "stamp": "reviewed_date"},
                "reject": {"from": ["pending"], "to": "rejected", "stamp": "reviewed_date"},
            },
        },
        "order": {
            "statuses": ["pending", "confirmed", "shipped", "delivered", "cancelled"],
            "terminal": ["delivered", "cancelled"],
            "transitions": {
                "confirm": {"from": ["pending"], "to": "confirmed"},
                "ship": {"from": ["confirmed"], "to": "shipped"},
                "deliver": {"from": ["shipped"], "to": "delivered"},
                "cancel": {"from": ["pending", "confirmed"], "to": "cancelled"},
            },
        },
        "farmer_order": {
            "statuses": ["pending", "confirmed", "packed", "shipped", "delivered"],
            "terminal": ["delivered"],
            "transitions": {
                "confirm": {"from": ["pending"], "to": "confirmed", "stamp": "confirmed_date"},
                "pack": {"from": ["confirmed"], "to": "packed"},
                "ship": {"from": ["packed"], "to": "shipped", "stamp": "shipped_date"},
                "deliver": {"from": ["shipped"], "to": "delivered", "stamp": "delivered_date"},
            },
        },
        "delivery": {
            "statuses": ["pending", "in-transit", "delivered"],
            "terminal": ["delivered"],
            "transitions": {
                "pick_up": {"from": ["pending"], "to": "in-transit", "stamp": "picked_up_date"},
                "deliver": {"from": ["in-transit"], "to": "delivered", "stamp": "delivered_date"},
            },
        },
    },
}


class WorkflowConfigLoader:
    """Loads workflow configuration from the local file system."""

    def __init__(self) -> None:
        self._cache: dict[str, WorkflowConfig] = {}

    def load(self, path: str | None = None) -> WorkflowConfig:
        """Load workflow configuration.

        Args:
            path: YAML file path. Defaults to settings.workflow_config_path.

        Returns:
            Loaded WorkflowConfig

        Raises:
            ValueError: If the file exists but is invalid
        """
        path = path or settings.workflow_config_path

        if path in self._cache:
            logger.debug("Using cached workflow config", path=path)
            return self._cache[path]

        config = self._load_from_local(path)

        self._cache[path] = config
        logger.info(
            "Workflow config loaded",
            version=config.version,
            workflows=config.get_available_workflows(),
        )
        return config

    def _load_from_local(self, path: str) -> WorkflowConfig:
        search_paths = [
            Path(path),
            BUNDLED_WORKFLOWS,
        ]

        for candidate in search_paths:
            if candidate.exists():
                logger.info("Loading workflow config from local file", path=str(candidate))
                return WorkflowConfig.from_yaml(candidate.read_text())

        logger.warning(
            "Workflow config not found, using built-in defaults",
            searched=[str(candidate) for candidate in search_paths],
        )
        return WorkflowConfig.from_dict(DEFAULT_WORKFLOWS)

    def clear_cache(self) -> None:
        """Clear the config cache."""
        self._cache.clear()
        logger.info("Workflow config cache cleared")


# Singleton loader
_loader: WorkflowConfigLoader | None = None


def get_workflow_loader() -> WorkflowConfigLoader:
    """Get the singleton config loader."""
    global _loader
    if _loader is None:
        _loader = WorkflowConfigLoader()
    return _loader


def load_workflow_config(path: str | None = None) -> WorkflowConfig:
    """Convenience function to load workflow config."""
    return get_workflow_loader().load(path)
