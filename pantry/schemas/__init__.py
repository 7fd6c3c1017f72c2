from pantry.schemas.normalized import NormalizedItem, Skip, StoredItem
from pantry.schemas.outcome import BatchOutcome, CreatedRow, FailedRow
from pantry.schemas.raw import RawRow

__all__ = [
    "RawRow",
    "NormalizedItem",
    "Skip",
    "StoredItem",
    "BatchOutcome",
    "CreatedRow",
    "FailedRow",
]
