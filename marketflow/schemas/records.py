"""Schemas for hosted record store responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PagedItems(BaseModel):
    """Page of raw items returned by the record store."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[dict[str, Any]] = Field(default_factory=list)
    total_count: int | None = Field(default=None, alias="totalCount")
