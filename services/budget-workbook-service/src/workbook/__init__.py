"""Tabular layout convention and cell helpers shared by every workbook component."""
