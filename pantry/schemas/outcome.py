"""Run-scoped import bookkeeping. Never persisted."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from pantry.schemas.normalized import Skip, StoredItem


class CreatedRow(BaseModel):
    row_number: int
    id: uuid.UUID
    name: str


class FailedRow(BaseModel):
    row_number: int
    name: Optional[str] = None
    error: str


class BatchOutcome(BaseModel):
    """Counters and per-row records for one run.

    ``skip_count`` is derived so that rows_seen == success + error + skip
    holds by construction.
    """

    rows_seen: int = 0
    success_count: int = 0
    error_count: int = 0

    created: list[CreatedRow] = Field(default_factory=list)
    failed: list[FailedRow] = Field(default_factory=list)
    skipped: list[Skip] = Field(default_factory=list)

    @property
    def skip_count(self) -> int:
        return self.rows_seen - self.success_count - self.error_count

    def record_success(self, row_number: int, stored: StoredItem) -> CreatedRow:
        created = CreatedRow(row_number=row_number, id=stored.id, name=stored.name)
        self.created.append(created)
        self.success_count += 1
        return created

    def record_failure(self, row_number: int, name: Optional[str], error: str) -> FailedRow:
        failed = FailedRow(row_number=row_number, name=name, error=error)
        self.failed.append(failed)
        self.error_count += 1
        return failed

    def record_skip(self, skip: Skip) -> None:
        self.skipped.append(skip)
