"""End-to-end import tests through the SQL store"""

from datetime import date

import pytest
from sqlalchemy import select

from pantry import import_entrypoint
from pantry.core import db as db_module
from pantry.core.config import settings
from pantry.core.db import session_scope
from pantry.core.errors import SourceReadError, StorageConnectionError
from pantry.ingestion.base import BaseSource
from pantry.ingestion.csv_source import CSVSource
from pantry.models.food_item import FoodItem

FOOD_CSV = (
    "name , expirationDate , quantity , keywords , placement , hidden\n"
    'Milk,3/5/27,2.5," dairy, cold ,,","""Fridge""",TRUE\n'
    "\n"
    "   ,1/1/25,1,,,\n"
    "Beans,soon,-3,canned,,yes\n"
)


class ExplodingSource(BaseSource):
    """Source that cannot be read at all"""

    name = "exploding"

    def rows(self):
        raise SourceReadError("Failed to read CSV source at food.csv: No such file or directory")


def stored_items(database_url):
    with session_scope(database_url) as db:
        return db.scalars(select(FoodItem).order_by(FoodItem.created_at, FoodItem.name)).all()


@pytest.fixture
def food_csv(tmp_path):
    path = tmp_path / "food.csv"
    path.write_text(FOOD_CSV, encoding="utf-8")
    return path


class TestRunImport:
    """Test a full run against SQLite"""

    def test_import_counts_and_rows(self, food_csv, database_url):
        outcome = import_entrypoint.run_import(CSVSource(food_csv), database_url)

        assert outcome.rows_seen == 3
        assert outcome.success_count == 2
        assert outcome.error_count == 0
        assert outcome.skip_count == 1

        items = {item.name: item for item in stored_items(database_url)}
        assert set(items) == {"Milk", "Beans"}

        milk = items["Milk"]
        assert milk.expiration_date == date(2027, 3, 5)
        assert milk.quantity == 2
        assert milk.keywords == ["dairy", "cold"]
        assert milk.placement == "Fridge"
        assert milk.hidden is True
        assert milk.image_url is None

        beans = items["Beans"]
        assert beans.expiration_date is None
        assert beans.quantity == 1
        assert beans.placement == "Unknown"
        assert beans.hidden is False

    def test_running_twice_duplicates_records(self, food_csv, database_url):
        """Test a repeated import appends a second set of records"""
        import_entrypoint.run_import(CSVSource(food_csv), database_url)
        import_entrypoint.run_import(CSVSource(food_csv), database_url)

        names = sorted(item.name for item in stored_items(database_url))
        assert names == ["Beans", "Beans", "Milk", "Milk"]

    def test_unreadable_source_is_fatal_and_releases_session(self, database_url, release_calls):
        """Test a source failure aborts before any row and still releases storage"""
        with pytest.raises(SourceReadError):
            import_entrypoint.run_import(ExplodingSource(), database_url)

        assert release_calls == [False]
        assert stored_items(database_url) == []

    def test_oversized_quantity_fails_only_its_row(self, tmp_path, database_url):
        """Test a value the database cannot hold fails one row and the run continues"""
        path = tmp_path / "huge.csv"
        path.write_text("name,quantity\nMilk,1\nHuge,1e20\nEggs,2\nBread,3\n", encoding="utf-8")

        outcome = import_entrypoint.run_import(CSVSource(path), database_url)

        assert outcome.success_count == 3
        assert outcome.error_count == 1
        assert outcome.failed[0].row_number == 2
        assert outcome.failed[0].name == "Huge"
        assert {item.name for item in stored_items(database_url)} == {"Milk", "Eggs", "Bread"}

    def test_engine_disposed_after_run(self, food_csv, database_url):
        """Test the connection pool is closed once the import finishes"""
        import_entrypoint.run_import(CSVSource(food_csv), database_url)
        assert database_url not in db_module._engines

    def test_engine_disposed_after_fatal_error(self, database_url):
        with pytest.raises(SourceReadError):
            import_entrypoint.run_import(ExplodingSource(), database_url)
        assert database_url not in db_module._engines

    def test_unreachable_storage_is_fatal(self, food_csv, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing' / 'pantry.db'}"
        with pytest.raises(StorageConnectionError):
            import_entrypoint.run_import(CSVSource(food_csv), url)

    def test_summary_is_reported(self, food_csv, database_url, log_messages):
        import_entrypoint.run_import(CSVSource(food_csv), database_url)
        assert "=== Import Summary ===" in log_messages
        assert "Rows seen: 3" in log_messages
        assert "Successfully imported: 2 items" in log_messages
        assert "Errors: 0 items" in log_messages
        assert "Skipped: 1 rows" in log_messages


class TestMain:
    """Test the command-line entry point"""

    def test_success_exit_code(self, food_csv, database_url, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", database_url)
        assert import_entrypoint.main([str(food_csv)]) == 0
        assert len(stored_items(database_url)) == 2

    def test_default_csv_path_from_settings(self, food_csv, database_url, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", database_url)
        monkeypatch.setattr(settings, "CSV_PATH", str(food_csv))
        assert import_entrypoint.main([]) == 0

    def test_missing_file_exit_code(self, tmp_path, database_url, monkeypatch, log_messages):
        monkeypatch.setattr(settings, "DATABASE_URL", database_url)
        assert import_entrypoint.main([str(tmp_path / "nope.csv")]) == 1
        assert any(message.startswith("Fatal error during import") for message in log_messages)
        assert not any(message.startswith("Error processing row") for message in log_messages)

    def test_unreachable_database_exit_code(self, food_csv, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'pantry.db'}")
        assert import_entrypoint.main([str(food_csv)]) == 1
