from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Any, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from workbook.cells import money_value
from workbook.layout import TOTAL_TOKEN, XLSX_MEDIA_TYPE, CategoryLayout


@dataclass(frozen=True, slots=True)
class WorkbookFile:
    """Workbook bytes paired with the download name a user should save them under."""

    filename: str
    content: bytes
    media_type: str = XLSX_MEDIA_TYPE


def new_workbook() -> Workbook:
    """Return an empty workbook; sheets are created in the order they are appended."""

    workbook = Workbook()
    workbook.remove(workbook.active)
    return workbook


def append_sheet(workbook: Workbook, title: str, rows: Iterable[Sequence[Any]]) -> Worksheet:
    sheet = workbook.create_sheet(title=title)
    for row in rows:
        sheet.append([_literal_value(sheet, value) for value in row])
    return sheet


def _literal_value(sheet: Worksheet, value: Any) -> Any:
    # openpyxl binds any "=..." string as a formula; user text must stay text.
    if isinstance(value, str) and value.startswith("="):
        cell = Cell(sheet, value=value)
        cell.data_type = "s"
        return cell
    return value


def apply_number_format(sheet: Worksheet, columns: Iterable[int], number_format: str) -> None:
    """Tag every numeric cell in the given zero-based columns with `number_format`."""

    column_indexes = tuple(columns)
    for row in sheet.iter_rows():
        for cell in row:
            if cell.column - 1 not in column_indexes:
                continue
            if isinstance(cell.value, (int, float)) and not isinstance(cell.value, bool):
                cell.number_format = number_format


def category_sheet_rows(layout: CategoryLayout, title: str, item_rows: Sequence[Sequence[Any]]) -> list[list[Any]]:
    """Title, blank, header, item rows, blank and a TOTAL row summing every money column."""

    total_row: list[Any] = [None] * len(layout.headers)
    total_row[0] = TOTAL_TOKEN
    for column in layout.money_columns:
        total_row[column] = float(sum(money_value(row[column]) for row in item_rows))

    return [
        [title],
        [],
        list(layout.headers),
        *[list(row) for row in item_rows],
        [],
        total_row,
    ]


def set_column_widths(sheet: Worksheet, widths: Sequence[int]) -> None:
    for index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width


def workbook_to_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
