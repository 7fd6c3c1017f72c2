"""Batch loader: normalizes raw rows and creates one stored item per row."""

from __future__ import annotations

from typing import Iterable, Optional

from pantry.core.config import settings
from pantry.core.logging import get_logger
from pantry.ingestion.normalize import normalize_row
from pantry.schemas.normalized import NormalizedItem, Skip
from pantry.schemas.outcome import BatchOutcome
from pantry.schemas.raw import RawRow
from pantry.services import reporting
from pantry.services.storage import FoodItemStore, describe_error

log = get_logger("import_service")


class ImportService:
    """Runs the sequential normalize -> create loop for one import.

    Responsibilities:
    - Normalize each raw row independently
    - Issue exactly one create per normalized row, blocking until it returns
    - Count successes and per-row errors; record skips separately
    - Never let one failed write stop the remaining rows

    Ingestion is append-only: running the same source twice stores every
    row twice.
    """

    def __init__(self, store: FoodItemStore, two_digit_year_pivot: Optional[int] = None):
        self.store = store
        self.pivot = settings.TWO_DIGIT_YEAR_PIVOT if two_digit_year_pivot is None else two_digit_year_pivot

    def run(self, rows: Iterable[RawRow]) -> BatchOutcome:
        outcome = BatchOutcome()
        for row in rows:
            outcome.rows_seen += 1
            result = normalize_row(row, self.pivot)
            if isinstance(result, Skip):
                outcome.record_skip(result)
                reporting.report_skip(result)
                continue
            self._load(row.row_number, result, outcome)

        log.debug(
            f"Batch finished | seen={outcome.rows_seen} created={outcome.success_count} "
            f"errors={outcome.error_count} skipped={outcome.skip_count}"
        )
        return outcome

    def _load(self, row_number: int, item: NormalizedItem, outcome: BatchOutcome) -> None:
        try:
            stored = self.store.create(item)
        except Exception as exc:  # noqa: BLE001
            failed = outcome.record_failure(row_number, item.name, describe_error(exc))
            reporting.report_failure(failed)
            return

        created = outcome.record_success(row_number, stored)
        reporting.report_created(created)
