from .budget import (
    BudgetDocument,
    DeductionItem,
    ExpenseItem,
    ImportedBudgetData,
    IncomeItem,
    RecurringDeduction,
    RecurringExpense,
    RecurringIncome,
)

__all__ = [
    "BudgetDocument",
    "DeductionItem",
    "ExpenseItem",
    "ImportedBudgetData",
    "IncomeItem",
    "RecurringDeduction",
    "RecurringExpense",
    "RecurringIncome",
]
