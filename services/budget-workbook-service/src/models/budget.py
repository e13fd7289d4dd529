from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(slots=True)
class IncomeItem:
    item_name: str
    date: str | None
    full_amount: float
    notes: str | None = None


@dataclass(slots=True)
class DeductionItem:
    item_name: str
    date: str | None
    full_amount: float
    notes: str | None = None


@dataclass(slots=True)
class ExpenseItem:
    """
    A budgeted expense line.

    `full_amount` is the budgeted ceiling and `amount_used` the spend to date; the
    remaining balance is always derived from the two.
    """

    item_name: str
    date: str | None
    full_amount: float
    amount_used: float | None = None
    notes: str | None = None

    @property
    def remaining(self) -> float:
        return self.full_amount - (self.amount_used or 0.0)


@dataclass(slots=True)
class BudgetDocument:
    """
    A fully-populated monthly budget as supplied by the caller.

    Summary figures are trusted verbatim; the workbook layer never recomputes or
    corrects them.
    """

    month_year: str
    created_at: datetime | date | str
    primary_income: float
    total_expenses: float
    savings: float
    income_items: list[IncomeItem] = field(default_factory=list)
    deduction_items: list[DeductionItem] = field(default_factory=list)
    expense_items: list[ExpenseItem] = field(default_factory=list)


@dataclass(slots=True)
class RecurringIncome:
    description: str
    amount: float


@dataclass(slots=True)
class RecurringDeduction:
    description: str
    amount: float


@dataclass(slots=True)
class RecurringExpense:
    description: str
    full_amount: float


@dataclass(slots=True)
class ImportedBudgetData:
    """Line items recovered from a workbook, ready to pre-populate a new budget."""

    income_items: list[IncomeItem] = field(default_factory=list)
    deduction_items: list[DeductionItem] = field(default_factory=list)
    expense_items: list[ExpenseItem] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "income_items": len(self.income_items),
            "deduction_items": len(self.deduction_items),
            "expense_items": len(self.expense_items),
        }

    def is_empty(self) -> bool:
        return not (self.income_items or self.deduction_items or self.expense_items)
