"""
Serialize a fully-populated monthly budget into a multi-sheet workbook.

Sheets, in order: `Summary`, `Detailed Breakdown`, then one standalone sheet per
non-empty category (`Income Items`, `Deductions`, `Expenses`). The per-category
sheets follow the layout the importer reads back.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from openpyxl import Workbook

from models.budget import BudgetDocument, DeductionItem, ExpenseItem, IncomeItem
from settings import CurrencyFormat
from workbook.cells import iso_date_text, money_value
from workbook.layout import (
    BREAKDOWN_COLUMN_WIDTHS,
    BREAKDOWN_EXPENSE_HEADERS,
    BREAKDOWN_INCOME_HEADERS,
    BREAKDOWN_MONEY_COLUMNS,
    DEDUCTION_LAYOUT,
    DETAILED_BREAKDOWN_SHEET,
    EXPENSE_LAYOUT,
    EXPORT_SUMMARY_COLUMN_WIDTHS,
    INCOME_LAYOUT,
    MISSING_DATE_TOKEN,
    SUMMARY_SHEET,
    build_export_filename,
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


def export_budget(document: BudgetDocument, currency: Optional[CurrencyFormat] = None) -> bytes:
    """Return the `.xlsx` bytes for `document`."""

    return workbook_to_bytes(build_export_workbook(document, currency))


def export_budget_file(
    document: BudgetDocument,
    currency: Optional[CurrencyFormat] = None,
    *,
    today: Optional[date] = None,
) -> WorkbookFile:
    """Export `document` and pair the bytes with its user-facing download name."""

    content = export_budget(document, currency)
    filename = build_export_filename(document.month_year, today)
    logger.info(
        {
            "event": "budget_exported",
            "workbook_filename": filename,
            "size_bytes": len(content),
            "income_items": len(document.income_items),
            "deduction_items": len(document.deduction_items),
            "expense_items": len(document.expense_items),
        }
    )
    return WorkbookFile(filename=filename, content=content)


def build_export_workbook(document: BudgetDocument, currency: Optional[CurrencyFormat] = None) -> Workbook:
    """
    Build the export workbook in memory.

    Args:
        document: Budget whose summary figures are written verbatim.
        currency: Display format for money cells; defaults to Rand with two decimals.
    Returns:
        An openpyxl Workbook ready to be saved.
    """

    number_format = (currency or CurrencyFormat()).number_format
    workbook = new_workbook()

    summary_sheet = append_sheet(workbook, SUMMARY_SHEET, _summary_rows(document))
    apply_number_format(summary_sheet, (1,), number_format)
    set_column_widths(summary_sheet, EXPORT_SUMMARY_COLUMN_WIDTHS)

    breakdown_sheet = append_sheet(workbook, DETAILED_BREAKDOWN_SHEET, _breakdown_rows(document))
    apply_number_format(breakdown_sheet, BREAKDOWN_MONEY_COLUMNS, number_format)
    set_column_widths(breakdown_sheet, BREAKDOWN_COLUMN_WIDTHS)

    category_sheets = (
        (INCOME_LAYOUT, [_simple_item_row(item) for item in document.income_items]),
        (DEDUCTION_LAYOUT, [_simple_item_row(item) for item in document.deduction_items]),
        (EXPENSE_LAYOUT, [_expense_item_row(item) for item in document.expense_items]),
    )
    for layout, item_rows in category_sheets:
        if not item_rows:
            logger.debug("Skipping %s sheet; category has no items", layout.sheet_name)
            continue
        title = f"{layout.label} Items - {document.month_year}"
        sheet = append_sheet(workbook, layout.sheet_name, category_sheet_rows(layout, title, item_rows))
        apply_number_format(sheet, layout.money_columns, number_format)
        set_column_widths(sheet, layout.column_widths)

    return workbook


def _summary_rows(document: BudgetDocument) -> list[Row]:
    return [
        ["Budget Summary"],
        ["Month/Year", document.month_year],
        ["Created", iso_date_text(document.created_at, "")],
        [],
        ["Financial Overview"],
        ["Primary Income", money_value(document.primary_income)],
        ["Total Expenses", money_value(document.total_expenses)],
        ["Savings", money_value(document.savings)],
    ]


def _breakdown_rows(document: BudgetDocument) -> list[Row]:
    rows: list[Row] = [[f"Budget Breakdown - {document.month_year}"], []]

    income_rows = [_simple_item_row(item) for item in document.income_items]
    income_total = _column_total(income_rows, 2)
    rows.extend(_breakdown_section("INCOME ITEMS", BREAKDOWN_INCOME_HEADERS, income_rows, "income"))
    rows.append([])
    rows.append(["TOTAL INCOME", None, income_total, None])
    rows.append([])

    deduction_rows = [_simple_item_row(item) for item in document.deduction_items]
    deduction_total = _column_total(deduction_rows, 2)
    rows.extend(_breakdown_section("DEDUCTION ITEMS", BREAKDOWN_INCOME_HEADERS, deduction_rows, "deduction"))
    rows.append([])
    rows.append(["TOTAL DEDUCTIONS", None, deduction_total, None])
    rows.append([])

    # The breakdown omits the Remaining column, so drop index 4 of each expense row.
    expense_rows = [row[:4] + row[5:] for row in (_expense_item_row(item) for item in document.expense_items)]
    expense_total = _column_total(expense_rows, 2)
    expense_used_total = _column_total(expense_rows, 3)
    rows.extend(_breakdown_section("EXPENSE ITEMS", BREAKDOWN_EXPENSE_HEADERS, expense_rows, "expense"))
    rows.append([])
    rows.append(["TOTAL EXPENSES", None, expense_total, expense_used_total, None])
    rows.append([])

    primary_income = money_value(document.primary_income)
    total_income = primary_income + income_total
    net_income = total_income - deduction_total
    rows.extend(
        [
            ["FINANCIAL SUMMARY"],
            ["Primary Income", primary_income],
            ["Additional Income", income_total],
            ["Total Income", total_income],
            ["Total Deductions", deduction_total],
            ["Total Expenses", expense_total],
            ["Net Income (after deductions)", net_income],
            ["Remaining after expenses", net_income - expense_total],
            ["Savings", money_value(document.savings)],
        ]
    )
    return rows


def _breakdown_section(heading: str, headers: Sequence[str], item_rows: list[Row], noun: str) -> list[Row]:
    if not item_rows:
        return [[heading], [f"No {noun} items"]]
    return [[heading], list(headers), *item_rows]


def _simple_item_row(item: IncomeItem | DeductionItem) -> Row:
    return [
        item.item_name,
        iso_date_text(item.date, MISSING_DATE_TOKEN),
        money_value(item.full_amount),
        item.notes or None,
    ]


def _expense_item_row(item: ExpenseItem) -> Row:
    full_amount = money_value(item.full_amount)
    amount_used = money_value(item.amount_used)
    return [
        item.item_name,
        iso_date_text(item.date, MISSING_DATE_TOKEN),
        full_amount,
        amount_used,
        full_amount - amount_used,
        item.notes or None,
    ]


def _column_total(rows: Sequence[Row], column: int) -> float:
    return float(sum(money_value(row[column]) for row in rows))
