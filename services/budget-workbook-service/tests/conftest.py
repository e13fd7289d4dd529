"""Pytest configuration for budget-workbook-service tests.

Ensures the service's own src directory takes precedence in sys.path and that
the shared package (observability helpers) is importable.
"""

import sys
from pathlib import Path

import pytest

SERVICES_ROOT = Path(__file__).resolve().parents[2]

# Ensure this service's src is first in sys.path
SERVICE_SRC = Path(__file__).resolve().parents[1] / "src"
if str(SERVICE_SRC) not in sys.path:
    sys.path.insert(0, str(SERVICE_SRC))

if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(1, str(SERVICES_ROOT))

from models.budget import BudgetDocument, DeductionItem, ExpenseItem, IncomeItem  # noqa: E402


@pytest.fixture
def sample_document() -> BudgetDocument:
    return BudgetDocument(
        month_year="January - 2026",
        created_at="2026-01-02T09:15:00Z",
        primary_income=15000.0,
        total_expenses=12000.0,
        savings=3000.0,
        income_items=[
            IncomeItem(item_name="Salary", date="2026-01-25", full_amount=20000.0, notes="Main job"),
            IncomeItem(item_name="Side gig", date=None, full_amount=1250.5, notes=None),
        ],
        deduction_items=[
            DeductionItem(item_name="PAYE", date="2026-01-25", full_amount=4500.0, notes=None),
        ],
        expense_items=[
            ExpenseItem(item_name="Rent", date="2026-01-01", full_amount=5000.0, amount_used=4500.0, notes="Flat"),
            ExpenseItem(item_name="Groceries", date=None, full_amount=2500.0, amount_used=0.0, notes=None),
        ],
    )
