"""
Numeric Input Parsing

Converts raw form and spreadsheet values into floats before they reach the
calculation engine. Missing or unparseable values become the default rather
than raising, so a calculation always produces a result.
"""

import math
from typing import Any, Iterable, Mapping, Optional


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a user-entered number.

    Accepts ints, floats and strings such as "$250,000", "6.5%" or " 1200 ".
    None, empty strings, booleans, NaN and infinities return the default.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").replace("$", "").rstrip("%").strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default

    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_money(value: Any, default: float = 0.0) -> float:
    """Parse a money amount; negative amounts are clamped to 0."""
    return max(0.0, parse_number(value, default))


def parse_percent(value: Any, default: float = 0.0) -> float:
    """Parse a percent (6 means 6%), clamped to [0, 100]."""
    return min(100.0, max(0.0, parse_number(value, default)))


def parse_rate(value: Any, default: float = 0.0) -> float:
    """Parse a signed annual growth rate, clamped to [-100, 100]."""
    return min(100.0, max(-100.0, parse_number(value, default)))


def parse_int(value: Any, default: int = 0, maximum: Optional[int] = None) -> int:
    """Parse a whole count such as years or months; negatives become 0."""
    count = max(0, int(parse_number(value, default)))
    if maximum is not None:
        count = min(count, maximum)
    return count


def parse_years(value: Any, maximum: float, default: float = 0.0) -> float:
    """Parse a length of time in years, which may be fractional."""
    return min(maximum, max(0.0, parse_number(value, default)))


def pick_number(row: Mapping[str, Any], keys: Iterable[str], default: float = 0.0) -> float:
    """
    Return the first parseable value found under any of the given keys.

    Spreadsheet rows may label a column either "purchasePrice" or
    "Purchase Price"; a blank or zero value falls through to the next key.
    """
    for key in keys:
        number = parse_number(row.get(key), 0.0)
        if number:
            return number
    return default
