"""
Utility functions for the RAB report generator.

This module is the single place where numbers are coerced and turned
into display strings, so the spreadsheet, the document and the console
preview never disagree on rounding or currency symbols.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Optional


# Report layout constants shared by every output format
REPORT_TITLE = "LAPORAN RENCANA ANGGARAN BIAYA"
DEFAULT_BASE_NAME = "RAB"
UNSPECIFIED_CATEGORY = "-"

COLUMN_HEADERS = [
    "No",
    "Kategori",
    "Keterangan",
    "Jumlah",
    "Satuan",
    "Harga Satuan",
    "Total",
]

DISCLAIMER_TEXT = "Catatan: Dokumen ini dihasilkan otomatis oleh sistem."
GRAND_TOTAL_LABEL = "Total Keseluruhan"

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(frozen=True)
class CurrencyFormat:
    """
    Currency display settings (defaults: Indonesian Rupiah, id-ID).
    
    Attributes:
        symbol: Currency symbol placed before the amount
        thousands_separator: Digit group separator
        decimal_separator: Separator between whole and fractional part
        fraction_digits: Number of fractional digits shown
        symbol_spacing: Text placed between the symbol and the amount
    """
    symbol: str = "Rp"
    thousands_separator: str = "."
    decimal_separator: str = ","
    fraction_digits: int = 0
    symbol_spacing: str = " "
    
    @property
    def excel_number_format(self) -> str:
        """Equivalent spreadsheet number format code."""
        fraction = "." + "0" * self.fraction_digits if self.fraction_digits else ""
        return f'"{self.symbol}{self.symbol_spacing}"#,##0{fraction}'


IDR = CurrencyFormat()


def coerce_number(value: Any) -> float:
    """
    Coerce a user-supplied quantity or price to a finite float.
    
    Blank, missing, unparseable and non-finite values all become 0.0 so
    that a report with a bad cell still exports completely.
    
    Args:
        value: Raw value (number, numeric string, None, '')
        
    Returns:
        Finite float value
        
    Examples:
        >>> coerce_number('12.5')
        12.5
        >>> coerce_number('')
        0.0
        >>> coerce_number('abc')
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def optional_number(value: Any) -> Optional[float]:
    """Like coerce_number, but keep blank input as None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_number(value)


def _group_digits(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_currency(amount: Any, fmt: CurrencyFormat = IDR) -> str:
    """
    Format an amount as currency.
    
    Args:
        amount: Amount to format (coerced with coerce_number)
        fmt: Currency display settings
        
    Returns:
        Formatted string (e.g., 'Rp 1.234.567')
        
    Examples:
        >>> format_currency(1234567)
        'Rp 1.234.567'
        >>> format_currency(-1500)
        '-Rp 1.500'
    """
    quantum = Decimal(1).scaleb(-fmt.fraction_digits)
    number = Decimal(repr(coerce_number(amount)))
    with localcontext() as ctx:
        # Precision covers every whole digit
        ctx.prec = max(number.adjusted(), 0) + fmt.fraction_digits + 2
        value = number.quantize(quantum, rounding=ROUND_HALF_UP)
        negative = value < 0
        whole, _, fraction = f"{abs(value):f}".partition(".")
    text = _group_digits(whole, fmt.thousands_separator)
    if fmt.fraction_digits:
        text = f"{text}{fmt.decimal_separator}{fraction}"
    text = f"{fmt.symbol}{fmt.symbol_spacing}{text}"
    return f"-{text}" if negative and value != 0 else text


def format_quantity(value: Any) -> str:
    """Render a quantity without a trailing '.0' for whole numbers."""
    number = coerce_number(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def format_percentage(fraction: float, digits: int = 2) -> str:
    """Render a 0..1 share as a percentage string like '85.71%'."""
    return f"{fraction * 100:.{digits}f}%"


def sanitize_filename(name: Optional[str], fallback: str = DEFAULT_BASE_NAME) -> str:
    """
    Make a report title safe to use as a file base name.
    
    Characters rejected by common filesystems are replaced with '_' and
    trailing dots/spaces are removed.
    
    Examples:
        >>> sanitize_filename('Proyek X')
        'Proyek X'
        >>> sanitize_filename('A/B: C')
        'A_B_ C'
        >>> sanitize_filename('   ')
        'RAB'
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", (name or "").strip())
    cleaned = cleaned.rstrip(". ")
    return cleaned or fallback
