import os
import sys
import uuid

import pytest

os.environ["PANTRY_ENV"] = "test"
os.environ.setdefault("PANTRY_LOG_LEVEL", "DEBUG")

from loguru import logger  # noqa: E402

from pantry.core import db as db_module  # noqa: E402
from pantry.core.errors import StorageWriteError  # noqa: E402
from pantry.ingestion.csv_source import parse_rows  # noqa: E402
from pantry.schemas.normalized import NormalizedItem, StoredItem  # noqa: E402

# Resolve sys.stderr at write time so pytest's capture swapping is respected
logger.remove()
logger.add(lambda message: sys.stderr.write(message), level="DEBUG", format="{level} | {extra[name]} | {message}")


class InMemoryFoodItemStore:
    """Stand-in for the storage collaborator; keeps created items in a list."""

    def __init__(self):
        self.items: list[StoredItem] = []

    def create(self, item: NormalizedItem) -> StoredItem:
        stored = StoredItem(id=uuid.uuid4(), **item.to_record())
        self.items.append(stored)
        return stored


class FlakyFoodItemStore(InMemoryFoodItemStore):
    """Fails the write for selected item names."""

    def __init__(self, fail_names, exc_type=StorageWriteError):
        super().__init__()
        self.fail_names = set(fail_names)
        self.exc_type = exc_type
        self.attempts: list[str] = []

    def create(self, item: NormalizedItem) -> StoredItem:
        self.attempts.append(item.name)
        if item.name in self.fail_names:
            raise self.exc_type(f"constraint violation for {item.name}")
        return super().create(item)


@pytest.fixture(autouse=True)
def reset_db_engines():
    yield
    db_module.reset_engines()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'pantry.db'}"


@pytest.fixture
def memory_store():
    return InMemoryFoodItemStore()


@pytest.fixture
def flaky_store_factory():
    return FlakyFoodItemStore


@pytest.fixture
def rows_from():
    """Parse CSV text into a list of RawRows."""

    def _rows(text: str):
        return list(parse_rows(text))

    return _rows


@pytest.fixture
def log_messages():
    """Collect rendered loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def release_calls(monkeypatch):
    """Record every storage session release performed by session_scope."""
    calls: list[bool] = []
    original = db_module._release

    def _spy(session, *, raise_errors):
        calls.append(raise_errors)
        original(session, raise_errors=raise_errors)

    monkeypatch.setattr(db_module, "_release", _spy)
    return calls
