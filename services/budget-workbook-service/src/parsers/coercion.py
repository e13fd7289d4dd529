"""
Permissive cell coercion for hand-edited budget workbooks.

Every function here is total over the Cell variants: malformed values degrade to
`None` (dates, notes) or `0.0` (amounts) instead of raising.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Optional

from openpyxl.utils.datetime import from_excel

from settings import CurrencyFormat
from workbook.cells import Cell, EmptyCell, NumberCell, TextCell
from workbook.layout import MISSING_DATE_TOKEN

CurrencySymbols = ("R", "$", "€", "£")
DateFormats = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)

_WHITESPACE = re.compile(r"\s+")


def parse_date(cell: Cell) -> Optional[str]:
    """Return an ISO `YYYY-MM-DD` string, or None when the cell holds no usable date."""

    if isinstance(cell, NumberCell):
        return _date_from_serial(cell.value)
    if not isinstance(cell, TextCell):
        return None

    text = cell.value.strip()
    if not text or text == MISSING_DATE_TOKEN:
        return None

    for fmt in DateFormats:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue

    try:
        # Full timestamps, e.g. 2025-01-15T08:30:00+02:00.
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None


def parse_amount(cell: Cell, currency: Optional[CurrencyFormat] = None) -> float:
    """Numbers pass through; text is stripped of currency decoration and parsed, else 0."""

    if isinstance(cell, NumberCell):
        return cell.value
    if not isinstance(cell, TextCell):
        return 0.0

    currency = currency or CurrencyFormat()
    cleaned = _WHITESPACE.sub("", cell.value)
    for token in (*CurrencySymbols, *currency.strip_tokens()):
        cleaned = cleaned.replace(token, "")
    if currency.decimal_separator and currency.decimal_separator != ".":
        cleaned = cleaned.replace(currency.decimal_separator, ".")

    try:
        amount = float(cleaned)
    except ValueError:
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def parse_optional_amount(cell: Cell, currency: Optional[CurrencyFormat] = None) -> Optional[float]:
    if isinstance(cell, EmptyCell):
        return None
    return parse_amount(cell, currency)


def clean_text(cell: Cell) -> Optional[str]:
    """Trimmed text for name/notes cells; empty results normalize to None."""

    if isinstance(cell, TextCell):
        text = cell.value.strip()
    elif isinstance(cell, NumberCell):
        text = _number_text(cell.value)
    else:
        return None
    return text or None


def _date_from_serial(serial: float) -> Optional[str]:
    # Serials below 1 are time-of-day fractions, not calendar dates.
    if not math.isfinite(serial) or serial < 1:
        return None
    try:
        converted = from_excel(serial)
    except (OverflowError, ValueError):
        return None
    if isinstance(converted, datetime):
        return converted.date().isoformat()
    if isinstance(converted, date):
        return converted.isoformat()
    return None


def _number_text(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)
