"""Storage collaborator: the single create operation the import writes through."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pantry.core.errors import PantryImportError, StorageWriteError
from pantry.core.logging import get_logger
from pantry.models.food_item import FoodItem
from pantry.schemas.normalized import NormalizedItem, StoredItem

log = get_logger("storage")


def describe_error(exc: BaseException) -> str:
    """Short one-line description of a write failure."""
    if isinstance(exc, PantryImportError):
        return str(exc)
    detail = getattr(exc, "orig", None) or exc
    lines = str(detail).strip().splitlines()
    message = lines[0] if lines else ""
    return f"{type(detail).__name__}: {message}" if message else type(detail).__name__


class FoodItemStore(Protocol):
    """Anything that can persist one NormalizedItem and hand back its stored form."""

    def create(self, item: NormalizedItem) -> StoredItem:
        ...


class SQLAlchemyFoodItemStore:
    """Writes each item in its own transaction so one bad row cannot poison the next."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, item: NormalizedItem) -> StoredItem:
        row = FoodItem(**item.to_record())
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except Exception as exc:  # noqa: BLE001
            # Driver errors such as sqlite3 OverflowError are not wrapped by SQLAlchemy
            self._rollback()
            raise StorageWriteError(describe_error(exc)) from exc
        return StoredItem.model_validate(row)

    def _rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError as exc:
            log.warning(f"Rollback after failed write also failed: {exc}")
