"""Date parsing for OCR API fields."""

import re
from datetime import date, datetime

from ..core.errors import NormalizationError

# Order matters: ISO first, then day-first formats used on Brazilian statements.
_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
)

_ISO_DATETIME = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]")


def parse_date(value: str | None, field: str) -> date:
    """
    Parse a date string into a calendar date.

    Supports YYYY-MM-DD (with optional time suffix), YYYY/MM/DD,
    DD/MM/YYYY, DD-MM-YYYY and DD.MM.YYYY.

    Raises:
        NormalizationError: If the value is empty, in an unknown format or
            not a valid calendar date (e.g. 31/02/2024)
    """
    if value is None or not value.strip():
        raise NormalizationError("Date is missing", field, value)

    cleaned = value.strip()
    match = _ISO_DATETIME.match(cleaned)
    if match:
        cleaned = match.group(1)

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    raise NormalizationError(f"Unrecognized date: {value!r}", field, value)


def parse_optional_date(value: str | None, field: str) -> date | None:
    """Like parse_date, but an absent or blank value yields None."""
    if value is None or not value.strip():
        return None
    return parse_date(value, field)


def previous_month(day: date) -> tuple[int, int]:
    """(month, year) of the month before ``day``."""
    if day.month == 1:
        return 12, day.year - 1
    return day.month - 1, day.year
