"""Starter workbook generation from recurring items."""

from .template_generator import build_template_workbook, generate_template, generate_template_file

__all__ = ["build_template_workbook", "generate_template", "generate_template_file"]
