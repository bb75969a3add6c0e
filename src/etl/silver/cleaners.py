"""Field-level cleaning functions for the silver layer.

All functions are total: any input yields a value or None, never an error.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

import pandas as pd

from src.config.normalization_config import PLACEHOLDER_TOKENS

# DECIMAL(18, 2): 18 significant digits, 2 of them after the point
DECIMAL_SCALE = Decimal("0.01")
DECIMAL_LIMIT = Decimal(10) ** 16

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_NUMBER_RE = re.compile(r'^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$')
_INT_RE = re.compile(r'^[+-]?[0-9]+$')


def clean_text(value: Any) -> Optional[str]:
    """ Trim whitespace; '..' and empty strings become None """
    if value is None:
        return None
    if not isinstance(value, str):
        if pd.isna(value):
            return None
        value = str(value)

    value = value.strip()
    if not value or value in PLACEHOLDER_TOKENS:
        return None
    return value


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse a statistical measure into DECIMAL(18, 2).

    Thousands separators (commas) are removed, the decimal point is kept.
    Anything that is not a plain decimal number yields None.
    """
    text = clean_text(value)
    if text is None:
        return None

    text = text.replace(',', '')
    if not _NUMBER_RE.match(text):
        return None

    try:
        number = Decimal(text).quantize(DECIMAL_SCALE, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None

    if abs(number) >= DECIMAL_LIMIT:
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """ Parse a 32-bit integer code (country / area code) """
    text = clean_text(value)
    if text is None or not _INT_RE.match(text):
        return None

    number = int(text)
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number


def parse_year_start(value: Any) -> Optional[date]:
    """ Reporting year -> January 1st of that year """
    year = parse_int(value)
    if year is None or not 1 <= year <= 9999:
        return None
    return date(year, 1, 1)
