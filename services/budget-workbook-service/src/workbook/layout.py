"""
Sheet names, structural tokens and column layouts shared by the exporter,
importer and template generator.

These literals are the compatibility contract for round-tripping budgets:
the importer locates data by them, so changing any of them breaks files that
were exported earlier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Tuple

SUMMARY_SHEET = "Summary"
DETAILED_BREAKDOWN_SHEET = "Detailed Breakdown"
INCOME_SHEET = "Income Items"
DEDUCTIONS_SHEET = "Deductions"
EXPENSES_SHEET = "Expenses"

ITEM_NAME_HEADER = "Item Name"
DATE_HEADER = "Date"
AMOUNT_HEADER = "Amount"
FULL_AMOUNT_HEADER = "Full Amount"
AMOUNT_USED_HEADER = "Amount Used"
REMAINING_HEADER = "Remaining"
NOTES_HEADER = "Notes"

TOTAL_TOKEN = "TOTAL"
MISSING_DATE_TOKEN = "N/A"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLSX_SUFFIX = ".xlsx"


@dataclass(frozen=True)
class CategoryLayout:
    """Column layout of one per-category sheet."""

    key: str
    sheet_name: str
    label: str
    headers: Tuple[str, ...]
    money_columns: Tuple[int, ...]
    column_widths: Tuple[int, ...]
    amount_token: str

    @property
    def notes_column(self) -> int:
        return self.headers.index(NOTES_HEADER)


INCOME_LAYOUT = CategoryLayout(
    key="income",
    sheet_name=INCOME_SHEET,
    label="Income",
    headers=(ITEM_NAME_HEADER, DATE_HEADER, AMOUNT_HEADER, NOTES_HEADER),
    money_columns=(2,),
    column_widths=(25, 15, 15, 30),
    amount_token=AMOUNT_HEADER,
)

DEDUCTION_LAYOUT = CategoryLayout(
    key="deduction",
    sheet_name=DEDUCTIONS_SHEET,
    label="Deduction",
    headers=(ITEM_NAME_HEADER, DATE_HEADER, AMOUNT_HEADER, NOTES_HEADER),
    money_columns=(2,),
    column_widths=(25, 15, 15, 30),
    amount_token=AMOUNT_HEADER,
)

# Remaining (index 4) is display-only and never read back.
EXPENSE_LAYOUT = CategoryLayout(
    key="expense",
    sheet_name=EXPENSES_SHEET,
    label="Expense",
    headers=(ITEM_NAME_HEADER, DATE_HEADER, FULL_AMOUNT_HEADER, AMOUNT_USED_HEADER, REMAINING_HEADER, NOTES_HEADER),
    money_columns=(2, 3, 4),
    column_widths=(25, 15, 15, 15, 15, 30),
    amount_token=FULL_AMOUNT_HEADER,
)

# Detailed Breakdown sections drop the Remaining column.
BREAKDOWN_INCOME_HEADERS = INCOME_LAYOUT.headers
BREAKDOWN_EXPENSE_HEADERS = (ITEM_NAME_HEADER, DATE_HEADER, FULL_AMOUNT_HEADER, AMOUNT_USED_HEADER, NOTES_HEADER)
# Column B carries the Financial Summary figures; item dates there are text and stay unformatted.
BREAKDOWN_MONEY_COLUMNS = (1, 2, 3)
BREAKDOWN_COLUMN_WIDTHS = (25, 15, 15, 15, 30)

EXPORT_SUMMARY_COLUMN_WIDTHS = (20, 25)
TEMPLATE_SUMMARY_COLUMN_WIDTHS = (30, 15)

_WHITESPACE_RUN = re.compile(r"\s+")


def build_export_filename(month_year: str, today: date | None = None) -> str:
    """`Budget_<month_year, whitespace runs as underscores>_<YYYY-MM-DD>.xlsx`"""

    stamp = (today or date.today()).isoformat()
    stem = _WHITESPACE_RUN.sub("_", month_year or "")
    return f"Budget_{stem}_{stamp}{XLSX_SUFFIX}"


def build_template_filename(today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"Budget_Template_{stamp}{XLSX_SUFFIX}"
