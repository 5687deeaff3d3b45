"""Fallback transaction parsing from the OCR raw text."""

import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..core.errors import NormalizationError
from .amounts import parse_amount

logger = logging.getLogger(__name__)

MONTHS = {
    "JAN": 1, "FEV": 2, "MAR": 3, "ABR": 4, "MAI": 5, "JUN": 6,
    "JUL": 7, "AGO": 8, "SET": 9, "OUT": 10, "NOV": 11, "DEZ": 12,
}
_MONTH_ALT = "|".join(MONTHS)

# "05 NOV •••• 1234 Padaria Central R$ 23,90"
STATEMENT_LINE = re.compile(
    rf"^(\d{{1,2}})\s+({_MONTH_ALT})\s+[•*]+\s*\d{{4}}\s+(.+?)\s+R\$\s*([\d.,]+)$",
    re.IGNORECASE,
)
# "05 NOV Padaria Central R$ 23,90"
SIMPLE_LINE = re.compile(
    rf"^(\d{{1,2}})\s+({_MONTH_ALT})\s+(.*?)\s*R\$\s*([\d.,]+)",
    re.IGNORECASE,
)

MASKED_CARD = re.compile(r"[•*]{4}\s*\d{4}")
SKIP_MARKERS = (
    "TRANSAÇÕES",
    "Pagamentos e Financiamentos",
    "---",
)
SKIP_PATTERNS = (
    re.compile(r"^Página", re.IGNORECASE),
    re.compile(r"^Total de compras", re.IGNORECASE),
    re.compile(r"cartões.*R\$", re.IGNORECASE),
)
# Fragments such as "a 17 NOV" spilled over from period headers
PERIOD_FRAGMENT = re.compile(rf"^(a|de|em|para)\s+\d{{1,2}}\s+({_MONTH_ALT})", re.IGNORECASE)


@dataclass
class StatementLine:
    """A transaction recovered from raw statement text."""

    date: date
    description: str
    amount: Decimal


def _should_skip(line: str) -> bool:
    if len(line) < 10:
        return True
    if any(marker in line for marker in SKIP_MARKERS):
        return True
    return any(pattern.search(line) for pattern in SKIP_PATTERNS)


def document_year(raw_text: str, fallback: int) -> int:
    """First 20xx year mentioned in the statement, else ``fallback``."""
    match = re.search(r"\b(20\d{2})\b", raw_text)
    return int(match.group(1)) if match else fallback


def parse_statement_lines(raw_text: str, year: int) -> list[StatementLine]:
    """
    Recover card transactions from statement text.

    Used when the OCR API returns text but no structured items. Lines that do
    not look like "DD MMM [•••• NNNN] description R$ amount" are ignored, as
    are lines whose day/month do not form a valid date in ``year``.
    """
    transactions: list[StatementLine] = []

    for index, line in enumerate(raw_text.splitlines()):
        stripped = line.strip()
        if _should_skip(stripped):
            continue

        match = STATEMENT_LINE.match(stripped) or SIMPLE_LINE.match(stripped)
        if not match:
            continue

        day, month_abbr, description, amount_text = match.groups()
        description = MASKED_CARD.sub("", description)
        description = re.sub(r"\s+", " ", description).strip()
        if len(description) < 3 or PERIOD_FRAGMENT.search(description):
            continue

        try:
            amount = parse_amount(amount_text, field=f"raw_text[{index}]")
            when = date(year, MONTHS[month_abbr.upper()], int(day))
        except (NormalizationError, ValueError):
            logger.debug(f"Skipping unparseable statement line {index}: {stripped!r}")
            continue

        if amount <= 0:
            continue
        transactions.append(StatementLine(date=when, description=description, amount=amount))

    logger.info(f"Recovered {len(transactions)} transactions from raw text")
    return transactions
