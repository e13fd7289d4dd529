from datetime import datetime

import pytest

from parsers.coercion import clean_text, parse_amount, parse_date, parse_optional_amount
from settings import CurrencyFormat
from workbook.cells import EMPTY, NumberCell, TextCell, to_cell


class TestParseDate:
    def test_empty_cell_is_none(self):
        assert parse_date(EMPTY) is None

    def test_missing_date_token_is_none(self):
        assert parse_date(TextCell("N/A")) is None

    def test_date_serial_converts_to_iso(self):
        assert parse_date(NumberCell(45672.0)) == "2025-01-15"

    def test_fractional_serial_keeps_calendar_day(self):
        assert parse_date(NumberCell(45672.75)) == "2025-01-15"

    def test_time_fraction_is_not_a_date(self):
        assert parse_date(NumberCell(0.5)) is None

    @pytest.mark.parametrize(
        "text",
        ["2025-01-15", "2025/01/15", "01/15/2025", "15/01/2025", "15 January 2025", "Jan 15, 2025"],
    )
    def test_text_formats(self, text):
        assert parse_date(TextCell(text)) == "2025-01-15"

    def test_iso_timestamp_keeps_calendar_day(self):
        assert parse_date(TextCell("2025-01-15T08:30:00Z")) == "2025-01-15"

    def test_unparseable_text_is_none(self):
        assert parse_date(TextCell("sometime soon")) is None

    def test_datetime_cell_follows_serial_path(self):
        assert parse_date(to_cell(datetime(2025, 1, 15))) == "2025-01-15"


class TestParseAmount:
    def test_number_passes_through(self):
        assert parse_amount(NumberCell(1234.5)) == pytest.approx(1234.5)

    def test_rand_text_is_cleaned(self):
        assert parse_amount(TextCell("R1,234.50")) == pytest.approx(1234.50)

    def test_other_currency_symbols_and_spaces(self):
        assert parse_amount(TextCell(" $ 2,000 ")) == pytest.approx(2000.0)
        assert parse_amount(TextCell("€99.99")) == pytest.approx(99.99)

    def test_garbage_text_defaults_to_zero(self):
        assert parse_amount(TextCell("abc")) == 0.0

    def test_non_finite_text_defaults_to_zero(self):
        assert parse_amount(TextCell("nan")) == 0.0

    def test_empty_cell_defaults_to_zero(self):
        assert parse_amount(EMPTY) == 0.0

    def test_configured_separators(self):
        currency = CurrencyFormat(symbol="kr", thousands_separator=".", decimal_separator=",")

        assert parse_amount(TextCell("kr 1.234,50"), currency) == pytest.approx(1234.50)

    def test_negative_amount(self):
        assert parse_amount(TextCell("-R500")) == pytest.approx(-500.0)


def test_optional_amount_keeps_blank_as_none():
    assert parse_optional_amount(EMPTY) is None
    assert parse_optional_amount(NumberCell(0.0)) == 0.0
    assert parse_optional_amount(TextCell("R10")) == pytest.approx(10.0)


def test_clean_text_trims_and_normalizes():
    assert clean_text(TextCell("  Rent  ")) == "Rent"
    assert clean_text(TextCell("   ")) is None
    assert clean_text(EMPTY) is None
    assert clean_text(NumberCell(42.0)) == "42"


def test_to_cell_variants():
    assert to_cell(None) == EMPTY
    assert to_cell("") == EMPTY
    assert to_cell("Rent") == TextCell("Rent")
    assert to_cell(12) == NumberCell(12.0)
    assert to_cell(True) == NumberCell(1.0)
    assert to_cell(datetime(2025, 1, 15)) == NumberCell(45672.0)
