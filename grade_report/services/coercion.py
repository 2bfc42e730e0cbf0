from __future__ import annotations

import math
import numbers
import re
from typing import Any

import numpy as np

from ..models.row_data import MISSING_GROUP

"""Numeric coercion for spreadsheet cell values.

Cells arrive as whatever the spreadsheet reader produced: ints, floats, numpy
scalars, strings such as "1,234" or "85%", or None for blank cells. parse_number
turns each into a finite float or NaN; callers drop NaN rows (coercion skip).
"""

__all__ = [
    "parse_number",
    "is_gradable",
    "group_label",
]

# Longest leading decimal literal, the way a lenient float parser reads "12 pts".
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float:
    """Coerce a raw cell value into a finite float, or NaN when impossible.

    - None -> NaN
    - booleans -> NaN (a tick box is not a grade)
    - real numbers (incl. numpy scalars) -> float(value), NaN when not finite
    - anything else -> str(value) with ',' and '%' removed, whitespace trimmed,
      leading decimal literal parsed; NaN when there is none or it overflows

    >>> parse_number("85%")
    85.0
    >>> parse_number("1,234.5")
    1234.5
    >>> math.isnan(parse_number("N/A"))
    True
    """
    if value is None:
        return math.nan
    if isinstance(value, (bool, np.bool_)):
        return math.nan
    if isinstance(value, numbers.Real):
        v = float(value)
        return v if math.isfinite(v) else math.nan
    text = str(value).strip().replace(",", "").replace("%", "").strip()
    m = _LEADING_NUMBER.match(text)
    if m is None:
        return math.nan
    v = float(m.group(0))
    return v if math.isfinite(v) else math.nan


def is_gradable(value: Any) -> bool:
    """True when parse_number(value) yields a finite number."""
    return not math.isnan(parse_number(value))


def group_label(value: Any) -> str:
    """String form of a group cell; MISSING_GROUP for blank cells.

    Integral floats lose their fractional part ("1.0" -> "1") because numeric
    group columns with blanks come back from pandas as float64.
    """
    if value is None:
        return MISSING_GROUP
    if isinstance(value, float) and math.isnan(value):
        return MISSING_GROUP
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        v = float(value)
        if math.isfinite(v) and v.is_integer():
            return str(int(v))
        return repr(v) if math.isfinite(v) else str(v)
    return str(value)
