from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

from workbook.cells import Cell, CellRow, TextCell


def locate_header_row(grid: Sequence[CellRow], required_tokens: Iterable[str]) -> Optional[int]:
    """
    Find the row that starts a block of line items.

    Scans top-to-bottom and returns the index of the first row whose text cells
    include every required token (e.g. `Item Name` and `Full Amount`). Title rows,
    blank rows and stray notes above the table are skipped, which lets hand-edited
    workbooks move the table down or add their own preamble.

    Returns None when no row qualifies.
    """

    tokens = {token.strip() for token in required_tokens}
    if not tokens:
        return None

    for index, row in enumerate(grid):
        if tokens <= row_tokens(row):
            return index
    return None


def row_tokens(row: Sequence[Cell]) -> set[str]:
    return {cell.value.strip() for cell in row if isinstance(cell, TextCell)}
