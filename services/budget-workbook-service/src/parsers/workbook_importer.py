from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from io import BytesIO
from typing import Optional, TypeVar
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from models.budget import DeductionItem, ExpenseItem, ImportedBudgetData, IncomeItem
from parsers.coercion import clean_text, parse_amount, parse_date, parse_optional_amount
from parsers.header_detection import locate_header_row
from settings import CurrencyFormat
from workbook.cells import CellRow, TextCell, cell_at, read_sheet_grid
from workbook.layout import (
    DEDUCTION_LAYOUT,
    EXPENSE_LAYOUT,
    INCOME_LAYOUT,
    ITEM_NAME_HEADER,
    TOTAL_TOKEN,
    CategoryLayout,
)

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Failed to parse Excel file. Please ensure it's a valid budget export file."

# openpyxl surfaces a broken container through several unrelated exception types;
# SyntaxError covers xml.etree.ElementTree.ParseError.
_CONTAINER_ERRORS = (InvalidFileException, BadZipFile, KeyError, OSError, ValueError, TypeError, SyntaxError)

ItemT = TypeVar("ItemT")
RowMapper = Callable[[str, CellRow, CurrencyFormat], ItemT]


class WorkbookParseError(ValueError):
    """Raised when uploaded bytes cannot be opened as a workbook at all."""


def import_budget_workbook(file_bytes: bytes, currency: Optional[CurrencyFormat] = None) -> ImportedBudgetData:
    """
    Recover income, deduction and expense items from a budget workbook.

    Args:
        file_bytes: Raw `.xlsx` bytes, usually a previous export or a filled-in template.
        currency: Currency settings whose symbol/separators are stripped from text amounts.
    Returns:
        ImportedBudgetData whose lists are empty for every category whose sheet or
        header row is missing.
    Raises:
        WorkbookParseError: the bytes are not a readable workbook.
    """

    currency = currency or CurrencyFormat()
    if not file_bytes:
        raise WorkbookParseError(PARSE_ERROR_MESSAGE)

    try:
        workbook = load_workbook(BytesIO(file_bytes), read_only=True, data_only=True)
    except _CONTAINER_ERRORS as exc:
        logger.warning({"event": "workbook_unreadable", "error_type": type(exc).__name__})
        raise WorkbookParseError(PARSE_ERROR_MESSAGE) from exc

    try:
        sheet_names = list(workbook.sheetnames)
        # Read-only sheets stream from the archive, so a broken part only surfaces here.
        grids = {
            layout.sheet_name: read_sheet_grid(workbook[layout.sheet_name])
            for layout in (INCOME_LAYOUT, DEDUCTION_LAYOUT, EXPENSE_LAYOUT)
            if layout.sheet_name in sheet_names
        }
    except _CONTAINER_ERRORS as exc:
        logger.warning({"event": "workbook_unreadable", "error_type": type(exc).__name__})
        raise WorkbookParseError(PARSE_ERROR_MESSAGE) from exc
    finally:
        # Read-only workbooks keep the archive handle open until closed.
        workbook.close()

    result = ImportedBudgetData(
        income_items=_read_category(grids, INCOME_LAYOUT, _to_income_item, currency),
        deduction_items=_read_category(grids, DEDUCTION_LAYOUT, _to_deduction_item, currency),
        expense_items=_read_category(grids, EXPENSE_LAYOUT, _to_expense_item, currency),
    )

    logger.info({"event": "budget_workbook_imported", "sheets": sheet_names, **result.counts()})
    return result


def read_category_rows(grid: Sequence[CellRow], layout: CategoryLayout) -> Iterator[tuple[str, CellRow]]:
    """
    Yield `(item_name, row)` for every data row below the category's header row.

    Rows whose first cell is not non-empty text, and `TOTAL` rows, are skipped
    without ending the scan.
    """

    header_index = locate_header_row(grid, (ITEM_NAME_HEADER, layout.amount_token))
    if header_index is None:
        logger.debug("No header row found on %s sheet", layout.sheet_name)
        return

    for row in grid[header_index + 1 :]:
        first = cell_at(row, 0)
        if not isinstance(first, TextCell):
            continue
        item_name = first.value.strip()
        if not item_name or item_name == TOTAL_TOKEN:
            continue
        yield item_name, row


def _read_category(
    grids: Mapping[str, Sequence[CellRow]],
    layout: CategoryLayout,
    mapper: RowMapper,
    currency: CurrencyFormat,
) -> list:
    grid = grids.get(layout.sheet_name)
    if grid is None:
        logger.debug("Workbook has no %s sheet", layout.sheet_name)
        return []

    return [mapper(item_name, row, currency) for item_name, row in read_category_rows(grid, layout)]


def _to_income_item(item_name: str, row: CellRow, currency: CurrencyFormat) -> IncomeItem:
    return IncomeItem(
        item_name=item_name,
        date=parse_date(cell_at(row, 1)),
        full_amount=parse_amount(cell_at(row, 2), currency),
        notes=clean_text(cell_at(row, INCOME_LAYOUT.notes_column)),
    )


def _to_deduction_item(item_name: str, row: CellRow, currency: CurrencyFormat) -> DeductionItem:
    return DeductionItem(
        item_name=item_name,
        date=parse_date(cell_at(row, 1)),
        full_amount=parse_amount(cell_at(row, 2), currency),
        notes=clean_text(cell_at(row, DEDUCTION_LAYOUT.notes_column)),
    )


def _to_expense_item(item_name: str, row: CellRow, currency: CurrencyFormat) -> ExpenseItem:
    # Column 4 (Remaining) is derived on export and not read back; notes sit at 5.
    return ExpenseItem(
        item_name=item_name,
        date=parse_date(cell_at(row, 1)),
        full_amount=parse_amount(cell_at(row, 2), currency),
        amount_used=parse_optional_amount(cell_at(row, 3), currency),
        notes=clean_text(cell_at(row, EXPENSE_LAYOUT.notes_column)),
    )
