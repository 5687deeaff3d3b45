"""Monetary amount parsing."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..core.errors import NormalizationError

CENTS = Decimal("0.01")
MAX_INTEGER_DIGITS = 12

_CURRENCY_MARKS = re.compile(r"(R\$|US\$|BRL|USD|EUR|[$€£\s ])", re.IGNORECASE)
_NUMERIC = re.compile(r"^\d+(\.\d+)?$")


def _unify_separators(text: str) -> str:
    """
    Rewrite a number with "." / "," separators into plain "1234.56" form.

    When both separators occur, the right-most one is the decimal separator.
    A lone separator is a thousands separator when it repeats ("1.234.567")
    or is followed by exactly three digits ("1.234"); otherwise it is decimal.
    """
    has_dot = "." in text
    has_comma = "," in text

    if has_dot and has_comma:
        decimal_sep = "." if text.rfind(".") > text.rfind(",") else ","
        thousands_sep = "," if decimal_sep == "." else "."
        return text.replace(thousands_sep, "").replace(decimal_sep, ".")

    if not has_dot and not has_comma:
        return text

    sep = "." if has_dot else ","
    parts = text.split(sep)
    if len(parts) > 2 or len(parts[1]) == 3:
        return "".join(parts)
    return ".".join(parts)


def parse_amount(value: Any, field: str, allow_negative: bool = False) -> Decimal:
    """
    Parse an amount from the OCR API into a Decimal with two places.

    Args:
        value: int, float or string as returned by the API
        field: Dotted path of the raw field, reported on failure
        allow_negative: Keep the sign instead of rejecting negative values

    Raises:
        NormalizationError: If the value is not a finite number, or is
            negative and ``allow_negative`` is False
    """
    if isinstance(value, bool) or value is None:
        raise NormalizationError(f"Amount is missing or not numeric: {value!r}", field, value)

    if isinstance(value, (int, float)):
        text = repr(value) if isinstance(value, float) else str(value)
    else:
        text = _CURRENCY_MARKS.sub("", str(value))

    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative, text = True, text[1:-1]
    if text.startswith("-"):
        negative, text = True, text[1:]
    elif text.startswith("+"):
        text = text[1:]
    if text.endswith("-"):
        # Statement style trailing minus ("12,50-")
        negative, text = True, text[:-1]

    if isinstance(value, float):
        # repr() may use exponent notation; Decimal handles it directly
        normalized = text
    else:
        normalized = _unify_separators(text)
        if not _NUMERIC.match(normalized):
            raise NormalizationError(f"Amount is not a number: {value!r}", field, value)

    try:
        amount = Decimal(normalized)
    except InvalidOperation:
        raise NormalizationError(f"Amount is not a number: {value!r}", field, value) from None

    if not amount.is_finite():
        raise NormalizationError(f"Amount is not finite: {value!r}", field, value)
    if amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise NormalizationError(f"Amount is out of range: {value!r}", field, value)

    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if negative:
        amount = -amount
    if amount < 0 and not allow_negative:
        raise NormalizationError(f"Amount must not be negative: {value!r}", field, value)
    return amount
