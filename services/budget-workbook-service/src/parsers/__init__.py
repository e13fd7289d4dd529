"""Workbook-to-budget parsing and cell coercion."""

from .workbook_importer import WorkbookParseError, import_budget_workbook

__all__ = ["WorkbookParseError", "import_budget_workbook"]
