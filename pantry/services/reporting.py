"""Human-readable run output. Line oriented, not a machine contract."""

from pantry.core.errors import PantryFatalError
from pantry.core.logging import get_logger
from pantry.schemas.normalized import Skip
from pantry.schemas.outcome import BatchOutcome, CreatedRow, FailedRow

log = get_logger("reporter")


def report_created(row: CreatedRow) -> None:
    log.success(f"Created: {row.name} (ID: {row.id})")


def report_failure(row: FailedRow) -> None:
    log.error(f"Error processing row {row.row_number} ({row.name}): {row.error}")


def report_skip(skip: Skip) -> None:
    log.info(f"Skipping row {skip.row_number}: {skip.reason}")


def report_summary(outcome: BatchOutcome) -> None:
    log.info("=== Import Summary ===")
    log.info(f"Rows seen: {outcome.rows_seen}")
    log.info(f"Successfully imported: {outcome.success_count} items")
    log.info(f"Errors: {outcome.error_count} items")
    log.info(f"Skipped: {outcome.skip_count} rows")


def report_fatal(exc: PantryFatalError) -> None:
    log.error(f"Fatal error during import, no rows processed past this point: {exc}")
