"""Row normalization: loosely formatted spreadsheet text -> NormalizedItem.

Each tolerant coercion is a pure function returning a ``Coerced`` result
so the defaulting policy is explicit. Nothing here raises for malformed
input; anomalies come back as a notice that ``normalize_row`` logs.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar, Union

from dateutil import parser as date_parser

from pantry.core.logging import get_logger
from pantry.schemas.normalized import DEFAULT_PLACEMENT, NormalizedItem, Skip
from pantry.schemas.raw import RawRow

log = get_logger("ingestion.normalize")

T = TypeVar("T")

# CSV column headers of the pantry export
NAME = "name"
EXPIRATION_DATE = "expirationDate"
QUANTITY = "quantity"
KEYWORDS = "keywords"
PLACEMENT = "placement"
HIDDEN = "hidden"

DEFAULT_QUANTITY = 1
TWO_DIGIT_YEAR_PIVOT = 50

_MONTH_OR_DAY = re.compile(r"^\d{1,2}$")
_YEAR = re.compile(r"^(\d{2}|\d{4})$")
_ISO_YEAR_MONTH = re.compile(r"^(\d{4})(?:-(\d{2}))?$")
# Leading number the way a lenient float parse reads "3.5 cans"
_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_TRUTHY = {"true", "1"}
_FALSY = {"false", "0"}

# Two unrelated defaults: a component missing from the text shows up as a mismatch
_CHECK_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


@dataclass(frozen=True)
class Coerced(Generic[T]):
    value: T
    defaulted: bool = False
    notice: Optional[str] = None


def clean(raw: Optional[str]) -> Optional[str]:
    """Trim a raw cell; blank or missing cells become None."""
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def expand_two_digit_year(year: str, pivot: int = TWO_DIGIT_YEAR_PIVOT) -> str:
    return f"20{year}" if int(year) < pivot else f"19{year}"


def _parse_slash_date(text: str, pivot: int) -> Optional[date]:
    parts = [part.strip() for part in text.split("/")]
    if len(parts) != 3:
        return None
    month, day, year = parts
    if not (_MONTH_OR_DAY.match(month) and _MONTH_OR_DAY.match(day) and _YEAR.match(year)):
        return None
    if len(year) == 2:
        year = expand_two_digit_year(year, pivot)
    try:
        return date.fromisoformat(f"{year}-{month.zfill(2)}-{day.zfill(2)}")
    except ValueError:
        return None


def _parse_direct_date(text: str) -> Optional[date]:
    partial = _ISO_YEAR_MONTH.match(text)
    if partial:
        # "2007" and "2007-03" mean the first day of that year or month
        year, month = partial.groups()
        try:
            return date(int(year), int(month or 1), 1)
        except ValueError:
            return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    try:
        first = date_parser.parse(text, default=_CHECK_DEFAULTS[0])
        second = date_parser.parse(text, default=_CHECK_DEFAULTS[1])
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        # Year, month or day was filled in from the default
        return None
    return first.date()


def coerce_expiration_date(raw: Optional[str], pivot: int = TWO_DIGIT_YEAR_PIVOT) -> Coerced[Optional[date]]:
    """Parse M/D/YY(YY), ISO year or year-month, or any full calendar date; anything else is absent."""
    text = clean(raw)
    if text is None:
        return Coerced(None, defaulted=True)

    parsed = _parse_slash_date(text, pivot) if "/" in text else _parse_direct_date(text)
    if parsed is None:
        return Coerced(None, defaulted=True, notice=f'Invalid date "{raw}", expiration date left empty')
    return Coerced(parsed)


def coerce_quantity(raw: Optional[str]) -> Coerced[int]:
    text = clean(raw)
    if text is None:
        return Coerced(DEFAULT_QUANTITY, defaulted=True)

    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return Coerced(DEFAULT_QUANTITY, defaulted=True, notice=f'Non-numeric quantity "{text}", using {DEFAULT_QUANTITY}')

    number = float(match.group())
    if not math.isfinite(number) or number < 0:
        return Coerced(DEFAULT_QUANTITY, defaulted=True, notice=f'Out of range quantity "{text}", using {DEFAULT_QUANTITY}')
    return Coerced(math.trunc(number))


def split_keywords(raw: Optional[str]) -> List[str]:
    text = clean(raw)
    if text is None:
        return []
    return [piece.strip() for piece in text.split(",") if piece.strip()]


def clean_placement(raw: Optional[str]) -> str:
    text = clean(raw)
    if text is None:
        return DEFAULT_PLACEMENT
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def coerce_hidden(raw: Optional[str]) -> Coerced[bool]:
    text = clean(raw)
    if text is None:
        return Coerced(False, defaulted=True)

    flag = text.lower()
    if flag in _TRUTHY:
        return Coerced(True)
    if flag in _FALSY:
        return Coerced(False)
    return Coerced(False, defaulted=True, notice=f'Unrecognized hidden flag "{text}", treating as visible')


def normalize_row(row: RawRow, pivot: int = TWO_DIGIT_YEAR_PIVOT) -> Union[NormalizedItem, Skip]:
    """Map one raw row to a NormalizedItem, or a Skip when it has no usable name."""
    name = clean(row.get(NAME))
    if name is None:
        return Skip(row_number=row.row_number)

    expiration = coerce_expiration_date(row.get(EXPIRATION_DATE), pivot)
    quantity = coerce_quantity(row.get(QUANTITY))
    hidden = coerce_hidden(row.get(HIDDEN))

    for coerced in (expiration, quantity, hidden):
        if coerced.notice:
            log.warning(f"Row {row.row_number} ({name}): {coerced.notice}")

    return NormalizedItem(
        name=name,
        expiration_date=expiration.value,
        quantity=quantity.value,
        keywords=split_keywords(row.get(KEYWORDS)),
        placement=clean_placement(row.get(PLACEMENT)),
        hidden=hidden.value,
        image_url=None,
    )
