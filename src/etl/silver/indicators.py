"""Indicator-code canonicalization.

Raw series codes arrive as '219', '2,19', '2.19' or '2'. They are mapped onto
one dotted-decimal form shared by every source table. The positional rule
below cannot tell '2' + '2' from '22', so short codes that mean a longer
series are fixed per table through override data.
"""
import re
from typing import Any, Mapping, Optional

from .cleaners import clean_text

_CANONICAL_RE = re.compile(r'^[0-9]+\.[0-9]+$')
_DIGITS_RE = re.compile(r'^[0-9]+$')


def normalize_indicator(value: Any, overrides: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Canonicalize a raw indicator code.

    Order: cleanup, ',' -> '.', table override, already dotted, single digit,
    then a point inserted after the first digit ('219' -> '2.19').
    """
    code = clean_text(value)
    if code is None:
        return None

    code = code.replace(',', '.')

    if overrides and code in overrides:
        return overrides[code]

    if '.' in code:
        return code if _CANONICAL_RE.match(code) else None

    if not _DIGITS_RE.match(code):
        return None

    if len(code) == 1:
        return code

    # First digit is the major group, never split elsewhere
    return f"{code[0]}.{code[1:]}"
