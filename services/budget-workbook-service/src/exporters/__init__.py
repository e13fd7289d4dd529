"""Budget-to-workbook serialization."""

from .budget_exporter import build_export_workbook, export_budget, export_budget_file

__all__ = ["build_export_workbook", "export_budget", "export_budget_file"]
