from datetime import date

import pytest
from workbook_test_helpers import find_row, open_workbook, sheet_rows

from models.budget import RecurringDeduction, RecurringExpense, RecurringIncome
from parsers.workbook_importer import import_budget_workbook
from templates.template_generator import (
    GENERIC_MESSAGE,
    PERSONALIZED_MESSAGE,
    generate_template,
    generate_template_file,
)
from workbook.layout import build_template_filename

TODAY = date(2026, 10, 17)


def test_personalized_income_with_sample_deductions_and_expenses():
    file_bytes = generate_template([RecurringIncome(description="Salary", amount=20000)], [], [], today=TODAY)

    income_rows = sheet_rows(file_bytes, "Income Items")
    assert income_rows[0][0] == "Income Items - Template"
    assert income_rows[2] == ("Item Name", "Date", "Amount", "Notes")
    assert income_rows[3] == ("Salary", "2026-10-17", 20000, None)
    assert find_row(income_rows, "TOTAL")[2] == pytest.approx(20000.0)

    deduction_row = sheet_rows(file_bytes, "Deductions")[3]
    assert deduction_row[0] == "Sample Deduction"
    assert deduction_row[2] > 0
    assert deduction_row[3].endswith("(Optional)")

    expense_row = sheet_rows(file_bytes, "Expenses")[3]
    assert expense_row[0] == "Sample Expense"
    assert expense_row[2:5] == (1000, 0, 1000)
    assert expense_row[5].endswith("(Optional)")


def test_sheet_order_ends_with_summary():
    workbook = open_workbook(generate_template([], [], [], today=TODAY))

    assert workbook.sheetnames == ["Income Items", "Deductions", "Expenses", "Summary"]


def test_summary_totals_are_derived_from_emitted_rows():
    file_bytes = generate_template(
        [RecurringIncome(description="Salary", amount=20000), RecurringIncome(description="Rental", amount=3500)],
        [RecurringDeduction(description="PAYE", amount=4000)],
        [
            RecurringExpense(description="Rent", full_amount=8000),
            RecurringExpense(description="Groceries", full_amount=3000),
        ],
        today=TODAY,
    )

    rows = sheet_rows(file_bytes, "Summary")
    assert rows[2][0] == PERSONALIZED_MESSAGE
    assert find_row(rows, "Total Income")[1] == pytest.approx(23500.0)
    assert find_row(rows, "Total Deductions")[1] == pytest.approx(4000.0)
    assert find_row(rows, "Net Income")[1] == pytest.approx(19500.0)
    assert find_row(rows, "Total Expenses")[1] == pytest.approx(11000.0)
    assert find_row(rows, "Expected Savings")[1] == pytest.approx(8500.0)

    expense_total = find_row(sheet_rows(file_bytes, "Expenses"), "TOTAL")
    assert expense_total[2:5] == (pytest.approx(11000.0), 0, pytest.approx(11000.0))


def test_generic_template_when_no_recurring_items():
    rows = sheet_rows(generate_template([], [], [], today=TODAY), "Summary")

    assert rows[2][0] == GENERIC_MESSAGE
    assert find_row(rows, "Total Income")[1] == pytest.approx(1000.0)
    assert find_row(rows, "Total Deductions")[1] == pytest.approx(500.0)
    assert find_row(rows, "Net Income")[1] == pytest.approx(500.0)
    assert find_row(rows, "Total Expenses")[1] == pytest.approx(1000.0)
    assert find_row(rows, "Expected Savings")[1] == pytest.approx(-500.0)
    assert "Instructions:" in [row[0] for row in rows]


def test_blank_descriptions_fall_back_to_sample_rows():
    file_bytes = generate_template(
        [RecurringIncome(description="   ", amount=100)],
        [],
        [RecurringExpense(description="", full_amount=50)],
        today=TODAY,
    )

    assert sheet_rows(file_bytes, "Income Items")[3][0] == "Sample Income"
    assert sheet_rows(file_bytes, "Expenses")[3][0] == "Sample Expense"
    assert sheet_rows(file_bytes, "Summary")[2][0] == GENERIC_MESSAGE


def test_blank_descriptions_are_dropped_next_to_usable_ones():
    file_bytes = generate_template(
        [RecurringIncome(description="Salary", amount=100), RecurringIncome(description=" ", amount=999)],
        [],
        [],
        today=TODAY,
    )

    rows = sheet_rows(file_bytes, "Income Items")
    assert [row[0] for row in rows[3:-2]] == ["Salary"]
    assert find_row(rows, "TOTAL")[2] == pytest.approx(100.0)


def test_money_cells_are_currency_formatted():
    workbook = open_workbook(generate_template([], [], [], today=TODAY))

    assert workbook["Income Items"]["C4"].number_format == '"R"#,##0.00'
    assert workbook["Expenses"]["E4"].number_format == '"R"#,##0.00'
    assert workbook["Summary"]["B17"].number_format == '"R"#,##0.00'


def test_template_imports_back_into_items():
    file_bytes = generate_template(
        [RecurringIncome(description="Salary", amount=20000)],
        [],
        [RecurringExpense(description="Rent", full_amount=8000)],
        today=TODAY,
    )

    imported = import_budget_workbook(file_bytes)

    assert [(item.item_name, item.date, item.full_amount, item.notes) for item in imported.income_items] == [
        ("Salary", "2026-10-17", 20000.0, None)
    ]
    assert imported.deduction_items[0].notes == "Sample Deduction Description (Optional)"
    assert imported.expense_items[0].amount_used == 0.0
    assert imported.expense_items[0].full_amount == pytest.approx(8000.0)


def test_template_file_name():
    workbook_file = generate_template_file([], [], [], today=TODAY)

    assert workbook_file.filename == "Budget_Template_2026-10-17.xlsx"
    assert build_template_filename(TODAY) == workbook_file.filename
