"""CSV source: reads a pantry export and splits it into header-keyed raw rows."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import IO, Iterator, List, Optional, Union

from pantry.core.config import settings
from pantry.core.errors import SourceReadError
from pantry.core.logging import get_logger
from pantry.schemas.raw import RawRow

from .base import BaseSource

log = get_logger("ingestion.csv")

SourceInput = Union[str, Path, IO[str], IO[bytes]]


def _is_blank(fields: List[str]) -> bool:
    return not fields or (len(fields) == 1 and not fields[0].strip())


def parse_rows(text: str) -> Iterator[RawRow]:
    """Split CSV text into RawRows.

    The first non-blank line is the header; headers are trimmed. Blank
    lines never produce a row and do not advance the row number. Short
    lines leave trailing headers absent; extra fields are dropped. A
    structurally broken record is logged and skipped, parsing resumes
    with the next one.
    """
    text = text.lstrip("\ufeff").replace("\x00", "")
    reader = csv.reader(io.StringIO(text, newline=""))

    headers: Optional[List[str]] = None
    row_number = 0
    while True:
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            log.warning(f"Dropping malformed CSV record near line {reader.line_num}: {exc}")
            continue

        if _is_blank(fields):
            continue

        if headers is None:
            headers = [header.strip() for header in fields]
            log.debug(f"CSV headers: {headers}")
            continue

        row_number += 1
        if len(fields) > len(headers):
            log.debug(f"Row {row_number} has {len(fields)} fields for {len(headers)} headers; extras dropped")
        yield RawRow(row_number=row_number, data=dict(zip(headers, fields)))


class CSVSource(BaseSource):
    """Pantry CSV export from a filesystem path or an open stream."""

    name = "csv"

    def __init__(self, source: SourceInput, encoding: Optional[str] = None):
        self.source = source
        self.encoding = encoding or settings.CSV_ENCODING

    @property
    def label(self) -> str:
        if isinstance(self.source, (str, Path)):
            return str(self.source)
        return getattr(self.source, "name", "<stream>")

    def read_text(self) -> str:
        """Read the whole source up front so that an unreadable file is fatal before any row."""
        if isinstance(self.source, (str, Path)):
            path = Path(self.source).expanduser()
            try:
                raw: Union[str, bytes] = path.read_bytes()
            except OSError as exc:
                raise SourceReadError(f"Failed to read CSV source at {path}: {exc.strerror or exc}") from exc
        else:
            try:
                raw = self.source.read()
            except (OSError, ValueError) as exc:
                raise SourceReadError(f"Failed to read CSV stream {self.label}: {exc}") from exc

        if isinstance(raw, bytes):
            try:
                return raw.decode(self.encoding)
            except (UnicodeDecodeError, LookupError) as exc:
                raise SourceReadError(f"CSV source {self.label} is not valid {self.encoding} text: {exc}") from exc
        return raw

    def rows(self) -> Iterator[RawRow]:
        text = self.read_text()
        log.info(f"Read {len(text)} characters from {self.label}")
        return parse_rows(text)
