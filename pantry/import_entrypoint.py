"""Import entrypoint - standalone script for loading a pantry CSV export.

Usage:
    python -m pantry.import_entrypoint                  # Import PANTRY_CSV_PATH (default food.csv)
    python -m pantry.import_entrypoint exports/food.csv # Import a specific file

Exit status is 0 once the run completes, even with per-row errors, and 1
on a fatal error.
"""

import sys
from typing import Optional, Sequence

from pantry.core.config import settings
from pantry.core.db import dispose_engine, init_db, session_scope
from pantry.core.errors import PantryFatalError
from pantry.core.logging import get_logger
from pantry.ingestion.base import BaseSource
from pantry.ingestion.csv_source import CSVSource
from pantry.schemas.outcome import BatchOutcome
from pantry.services.import_service import ImportService
from pantry.services.reporting import report_fatal, report_summary
from pantry.services.storage import SQLAlchemyFoodItemStore

logger = get_logger("import_entrypoint")


def run_import(source: BaseSource, database_url: Optional[str] = None) -> BatchOutcome:
    """Run one import against the SQL store.

    The storage session is held for the whole run and released on every
    path. Fatal errors propagate to the caller once it is released.
    """
    try:
        if settings.CREATE_TABLES:
            init_db(database_url)

        with session_scope(database_url) as db:
            rows = source.rows()
            service = ImportService(SQLAlchemyFoodItemStore(db))
            outcome = service.run(rows)
    finally:
        dispose_engine(database_url)

    report_summary(outcome)
    return outcome


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the pantry import."""
    args = list(sys.argv[1:] if argv is None else argv)
    csv_path = args[0] if args else settings.CSV_PATH

    logger.info(f"Pantry import starting from {csv_path}")
    try:
        run_import(CSVSource(csv_path))
    except PantryFatalError as exc:
        report_fatal(exc)
        return 1

    logger.info("Import completed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
