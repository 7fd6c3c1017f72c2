from pantry.ingestion.base import BaseSource
from pantry.ingestion.csv_source import CSVSource, parse_rows
from pantry.ingestion.normalize import normalize_row

__all__ = [
    "BaseSource",
    "CSVSource",
    "parse_rows",
    "normalize_row",
]
