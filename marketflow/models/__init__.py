"""SQLAlchemy models for Marketflow.

Workflow entities are not mapped individually: each namespaced collection
is stored as a single JSON document.
"""

from marketflow.models.base import Base, TimestampMixin
from marketflow.models.draft_collection import DraftCollection

__all__ = [
    "Base",
    "TimestampMixin",
    "DraftCollection",
]
