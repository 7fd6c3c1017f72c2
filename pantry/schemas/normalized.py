"""Normalized pantry item schemas"""

import uuid
from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

DEFAULT_PLACEMENT = "Unknown"
SKIP_EMPTY_NAME = "empty name"

ItemName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class NormalizedItem(BaseModel):
    """Fully typed, default-filled record ready for a single create call."""

    model_config = ConfigDict(frozen=True)

    name: ItemName
    expiration_date: Optional[date] = None
    quantity: int = Field(default=1, ge=0, strict=True)
    keywords: list[str] = Field(default_factory=list)
    placement: str = DEFAULT_PLACEMENT
    hidden: bool = False
    image_url: Optional[str] = None  # the CSV export carries no image data

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class Skip(BaseModel):
    """Row excluded before any write was attempted."""

    model_config = ConfigDict(frozen=True)

    row_number: int
    reason: str = SKIP_EMPTY_NAME


class StoredItem(NormalizedItem):
    """What the storage collaborator hands back after a successful create."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    created_at: Optional[datetime] = None
