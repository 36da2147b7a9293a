"""DraftCollection model - one serialized workflow collection per namespace key."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketflow.models.base import Base, TimestampMixin


class DraftCollection(Base, TimestampMixin):
    """Whole-array snapshot of a namespaced workflow collection.

    The payload is kept as raw JSON text so a corrupted row surfaces as a
    deserialization error instead of being silently coerced.
    """

    __tablename__ = "draft_collections"

    namespace_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    item_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<DraftCollection(key='{self.namespace_key}', items={self.item_count})>"
