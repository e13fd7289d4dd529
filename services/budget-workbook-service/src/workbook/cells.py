from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, List, Sequence, Union

from openpyxl.utils.datetime import to_excel
from openpyxl.worksheet.worksheet import Worksheet


@dataclass(frozen=True, slots=True)
class EmptyCell:
    pass


@dataclass(frozen=True, slots=True)
class TextCell:
    value: str


@dataclass(frozen=True, slots=True)
class NumberCell:
    value: float


Cell = Union[EmptyCell, TextCell, NumberCell]
CellRow = List[Cell]

EMPTY = EmptyCell()


def to_cell(raw_value: Any) -> Cell:
    """
    Convert a raw openpyxl value into the closed Cell variant set.

    Date-like values come back from openpyxl as datetime objects when a cell
    carries a date number format; they are turned back into date serials so
    callers only ever handle text and numbers.
    """

    if raw_value is None:
        return EMPTY
    if isinstance(raw_value, str):
        return TextCell(raw_value) if raw_value != "" else EMPTY
    if isinstance(raw_value, (bool, int, float)):
        return NumberCell(float(raw_value))
    if isinstance(raw_value, (datetime, date, time, timedelta)):
        return NumberCell(float(to_excel(raw_value)))
    return TextCell(str(raw_value))


def cell_at(row: Sequence[Cell], index: int) -> Cell:
    if index < len(row):
        return row[index]
    return EMPTY


def read_sheet_grid(sheet: Worksheet) -> list[CellRow]:
    """Read every row of a worksheet as a list of Cell values (no header binding)."""

    return [to_row(values) for values in sheet.iter_rows(values_only=True)]


def to_row(values: Iterable[Any]) -> CellRow:
    return [to_cell(value) for value in values]


def money_value(raw_value: Any) -> float:
    """Coerce a caller-supplied amount into a float without raising."""

    if raw_value is None:
        return 0.0
    try:
        return float(raw_value)
    except (TypeError, ValueError):
        return 0.0


def iso_date_text(raw_value: Any, missing: str) -> str:
    """Render a caller-supplied date as `YYYY-MM-DD`, or `missing` when absent."""

    if raw_value is None:
        return missing
    if isinstance(raw_value, datetime):
        return raw_value.date().isoformat()
    if isinstance(raw_value, date):
        return raw_value.isoformat()

    text = str(raw_value).strip()
    if not text:
        return missing
    # Timestamps such as 2025-01-15T08:30:00Z keep only their calendar part.
    if len(text) > 10 and text[4:5] == "-" and text[10:11] in ("T", " "):
        return text[:10]
    return text
