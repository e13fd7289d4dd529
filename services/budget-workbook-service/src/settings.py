"""
Configuration for the workbook interchange layer.

Money cells are tagged with a currency display format instead of a hard-coded
locale string, so the exporter and template generator receive a
`CurrencyFormat` explicitly. `load_workbook_settings` builds one from the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_CURRENCY_SYMBOL = "R"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class WorkbookSettingsError(RuntimeError):
    """Raised when workbook configuration cannot be constructed."""


@dataclass(frozen=True, slots=True)
class CurrencyFormat:
    symbol: str = DEFAULT_CURRENCY_SYMBOL
    thousands_separator: str = ","
    decimal_separator: str = "."
    decimals: int = 2

    @property
    def number_format(self) -> str:
        """
        Spreadsheet display format, e.g. `"R"#,##0.00` for the default Rand settings.

        Format codes always use `,` and `.`; the spreadsheet application swaps in
        the reader's locale separators when it renders the cell.
        """

        integer_part = "#,##0" if self.thousands_separator else "0"
        fraction_part = "." + "0" * self.decimals if self.decimals > 0 else ""
        prefix = f'"{self.symbol}"' if self.symbol else ""
        return f"{prefix}{integer_part}{fraction_part}"

    def strip_tokens(self) -> tuple[str, ...]:
        """Characters the importer removes from text amounts before parsing."""

        tokens = [self.symbol, self.thousands_separator]
        return tuple(token for token in tokens if token and token != self.decimal_separator)


@dataclass(frozen=True, slots=True)
class WorkbookSettings:
    currency: CurrencyFormat = field(default_factory=CurrencyFormat)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


def load_workbook_settings(
    *,
    symbol_env: str = "WORKBOOK_CURRENCY_SYMBOL",
    thousands_env: str = "WORKBOOK_THOUSANDS_SEPARATOR",
    decimal_env: str = "WORKBOOK_DECIMAL_SEPARATOR",
    decimals_env: str = "WORKBOOK_CURRENCY_DECIMALS",
    max_upload_env: str = "WORKBOOK_MAX_UPLOAD_BYTES",
) -> WorkbookSettings:
    """
    Construct WorkbookSettings from environment variables.

    Args:
        symbol_env: Env var holding the currency symbol shown in money cells.
        thousands_env: Env var holding the thousands separator.
        decimal_env: Env var holding the decimal separator.
        decimals_env: Env var holding the number of displayed decimals.
        max_upload_env: Env var capping accepted upload sizes in bytes.
    """

    defaults = CurrencyFormat()
    symbol = _read_text(os.getenv(symbol_env), defaults.symbol)
    thousands_separator = _read_text(os.getenv(thousands_env), defaults.thousands_separator)
    decimal_separator = _read_text(os.getenv(decimal_env), defaults.decimal_separator)
    decimals = _parse_int(os.getenv(decimals_env), defaults.decimals, decimals_env)
    max_upload_bytes = _parse_int(os.getenv(max_upload_env), DEFAULT_MAX_UPLOAD_BYTES, max_upload_env)

    if decimals < 0:
        raise WorkbookSettingsError(f"{decimals_env} must not be negative (received '{decimals}')")
    if max_upload_bytes <= 0:
        raise WorkbookSettingsError(f"{max_upload_env} must be positive (received '{max_upload_bytes}')")
    if thousands_separator and thousands_separator == decimal_separator:
        raise WorkbookSettingsError(
            f"{thousands_env} and {decimal_env} must differ (both '{decimal_separator}')"
        )

    return WorkbookSettings(
        currency=CurrencyFormat(
            symbol=symbol,
            thousands_separator=thousands_separator,
            decimal_separator=decimal_separator,
            decimals=decimals,
        ),
        max_upload_bytes=max_upload_bytes,
    )


def _read_text(raw_value: Optional[str], default: str) -> str:
    if raw_value is None:
        return default
    # An explicitly empty value disables the token (e.g. no thousands separator).
    return raw_value.strip()


def _parse_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return int(raw_value)
    except ValueError as exc:
        raise WorkbookSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc
