"""
Starter workbooks seeded from a user's saved recurring items.

The generator performs no I/O: callers fetch the recurring snapshots and pass
them in (empty lists when the fetch failed), and every category falls back to a
single illustrative sample row when it has nothing usable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Sequence

from openpyxl import Workbook

from models.budget import RecurringDeduction, RecurringExpense, RecurringIncome
from settings import CurrencyFormat
from workbook.cells import money_value
from workbook.layout import (
    DEDUCTION_LAYOUT,
    EXPENSE_LAYOUT,
    INCOME_LAYOUT,
    SUMMARY_SHEET,
    TEMPLATE_SUMMARY_COLUMN_WIDTHS,
    build_template_filename,
)
from workbook.sheets import (
    WorkbookFile,
    append_sheet,
    apply_number_format,
    category_sheet_rows,
    new_workbook,
    set_column_widths,
    workbook_to_bytes,
)

logger = logging.getLogger(__name__)

Row = List[Any]

PERSONALIZED_MESSAGE = "This template contains your saved recurring budget items"
GENERIC_MESSAGE = "This is a template file for importing budget data"

INSTRUCTIONS = (
    "1. Review and modify the data in the Income Items, Deductions, and Expenses sheets",
    "2. Keep the column headers exactly as they are",
    "3. Use the same date format and currency format",
    "4. Save the file and import it using the budget planner",
)

SHEET_DESCRIPTIONS = (
    "• Income Items: Your recurring income sources",
    "• Deductions: Your recurring deductions (taxes, etc.)",
    "• Expenses: Your recurring expenses with budgeted amounts",
)

SAMPLE_INCOME_AMOUNT = 1000.0
SAMPLE_DEDUCTION_AMOUNT = 500.0
SAMPLE_EXPENSE_AMOUNT = 1000.0


@dataclass(slots=True)
class TemplateTotals:
    total_income: float
    total_deductions: float
    total_expenses: float

    @property
    def net_income(self) -> float:
        return self.total_income - self.total_deductions

    @property
    def expected_savings(self) -> float:
        return self.net_income - self.total_expenses


def generate_template(
    recurring_incomes: Sequence[RecurringIncome],
    recurring_deductions: Sequence[RecurringDeduction],
    recurring_expenses: Sequence[RecurringExpense],
    currency: Optional[CurrencyFormat] = None,
    *,
    today: Optional[date] = None,
) -> bytes:
    """Return the `.xlsx` bytes of a starter workbook."""

    workbook = build_template_workbook(
        recurring_incomes,
        recurring_deductions,
        recurring_expenses,
        currency,
        today=today,
    )
    return workbook_to_bytes(workbook)


def generate_template_file(
    recurring_incomes: Sequence[RecurringIncome],
    recurring_deductions: Sequence[RecurringDeduction],
    recurring_expenses: Sequence[RecurringExpense],
    currency: Optional[CurrencyFormat] = None,
    *,
    today: Optional[date] = None,
) -> WorkbookFile:
    today = today or date.today()
    content = generate_template(recurring_incomes, recurring_deductions, recurring_expenses, currency, today=today)
    filename = build_template_filename(today)
    logger.info(
        {
            "event": "budget_template_generated",
            "workbook_filename": filename,
            "size_bytes": len(content),
            "personalized": _has_usable_items(recurring_incomes, recurring_deductions, recurring_expenses),
        }
    )
    return WorkbookFile(filename=filename, content=content)


def build_template_workbook(
    recurring_incomes: Sequence[RecurringIncome],
    recurring_deductions: Sequence[RecurringDeduction],
    recurring_expenses: Sequence[RecurringExpense],
    currency: Optional[CurrencyFormat] = None,
    *,
    today: Optional[date] = None,
) -> Workbook:
    """
    Build the template workbook: three category sheets followed by a Summary sheet.

    Args:
        recurring_*: Caller-owned snapshots; blank descriptions are ignored.
        currency: Display format for money cells; defaults to Rand with two decimals.
        today: Date stamped on every generated row; defaults to the current date.
    Returns:
        An openpyxl Workbook ready to be saved.
    """

    number_format = (currency or CurrencyFormat()).number_format
    stamp = (today or date.today()).isoformat()

    income_rows = income_template_rows(recurring_incomes, stamp)
    deduction_rows = deduction_template_rows(recurring_deductions, stamp)
    expense_rows = expense_template_rows(recurring_expenses, stamp)

    workbook = new_workbook()
    for layout, item_rows in (
        (INCOME_LAYOUT, income_rows),
        (DEDUCTION_LAYOUT, deduction_rows),
        (EXPENSE_LAYOUT, expense_rows),
    ):
        title = f"{layout.label} Items - Template"
        sheet = append_sheet(workbook, layout.sheet_name, category_sheet_rows(layout, title, item_rows))
        apply_number_format(sheet, layout.money_columns, number_format)
        set_column_widths(sheet, layout.column_widths)

    totals = TemplateTotals(
        total_income=_sum_column(income_rows, 2),
        total_deductions=_sum_column(deduction_rows, 2),
        total_expenses=_sum_column(expense_rows, 2),
    )
    personalized = _has_usable_items(recurring_incomes, recurring_deductions, recurring_expenses)
    summary_sheet = append_sheet(workbook, SUMMARY_SHEET, template_summary_rows(totals, personalized))
    apply_number_format(summary_sheet, (1,), number_format)
    set_column_widths(summary_sheet, TEMPLATE_SUMMARY_COLUMN_WIDTHS)
    return workbook


def income_template_rows(recurring_incomes: Sequence[RecurringIncome], stamp: str) -> list[Row]:
    rows = [
        [item.description.strip(), stamp, money_value(item.amount), None]
        for item in recurring_incomes
        if _usable(item.description)
    ]
    return rows or [["Sample Income", stamp, SAMPLE_INCOME_AMOUNT, "Sample Income Description (Optional)"]]


def deduction_template_rows(recurring_deductions: Sequence[RecurringDeduction], stamp: str) -> list[Row]:
    rows = [
        [item.description.strip(), stamp, money_value(item.amount), None]
        for item in recurring_deductions
        if _usable(item.description)
    ]
    return rows or [["Sample Deduction", stamp, SAMPLE_DEDUCTION_AMOUNT, "Sample Deduction Description (Optional)"]]


def expense_template_rows(recurring_expenses: Sequence[RecurringExpense], stamp: str) -> list[Row]:
    rows = []
    for item in recurring_expenses:
        if not _usable(item.description):
            continue
        full_amount = money_value(item.full_amount)
        rows.append([item.description.strip(), stamp, full_amount, 0.0, full_amount, None])
    if rows:
        return rows
    return [
        [
            "Sample Expense",
            stamp,
            SAMPLE_EXPENSE_AMOUNT,
            0.0,
            SAMPLE_EXPENSE_AMOUNT,
            "Sample Expense Description (Optional)",
        ]
    ]


def template_summary_rows(totals: TemplateTotals, personalized: bool) -> list[Row]:
    return [
        ["Budget Template Summary"],
        [],
        [PERSONALIZED_MESSAGE if personalized else GENERIC_MESSAGE],
        [],
        ["Instructions:"],
        *[[line] for line in INSTRUCTIONS],
        [],
        ["Sheet Descriptions:"],
        *[[line] for line in SHEET_DESCRIPTIONS],
        [],
        ["Current Totals:"],
        ["Total Income", totals.total_income],
        ["Total Deductions", totals.total_deductions],
        ["Net Income", totals.net_income],
        ["Total Expenses", totals.total_expenses],
        ["Expected Savings", totals.expected_savings],
    ]


def _has_usable_items(*snapshots: Sequence[Any]) -> bool:
    return any(_usable(item.description) for snapshot in snapshots for item in snapshot)


def _usable(description: Optional[str]) -> bool:
    return bool(description and description.strip())


def _sum_column(rows: Sequence[Row], column: int) -> float:
    return float(sum(money_value(row[column]) for row in rows))
