"""
Cell value coercion.

One numeric rule is shared by the CSV parser and the column type
inferrer, so a cell typed as text is never counted as a number.
"""

import math
import re
from collections.abc import Iterable
from typing import Any, Optional, Union

# Optional minus, digits with optional fraction (or a bare fraction),
# optional exponent. Surrounding whitespace is tolerated.
NUMBER_PATTERN = re.compile(r"^\s*(-?)(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")

# Integers beyond this lose precision as doubles and stay text
MAX_SAFE_INTEGER = 2**53 - 1


def parse_number(text: str) -> Optional[Union[int, float]]:
    """
    Parse a numeric literal, or return None when the text is not one.

    Rejected on purpose: blank strings, ``Infinity``/``NaN``, integers with
    a leading zero such as ``007`` (identifiers, not quantities) and
    integers too large to represent exactly.

    Example:
        >>> parse_number(" 42 ")
        42
        >>> parse_number("1.5e3")
        1500.0
        >>> parse_number("007") is None
        True
    """
    match = NUMBER_PATTERN.match(text)
    if match is None:
        return None

    mantissa, exponent = match.group(2), match.group(3)
    literal = text.strip()

    if exponent is None and "." not in mantissa:
        if len(mantissa) > 1 and mantissa.startswith("0"):
            return None
        value = int(literal)
        if abs(value) > MAX_SAFE_INTEGER:
            return None
        return value

    number = float(literal)
    if not math.isfinite(number):
        return None
    return number


def coerce_cell(text: str) -> Union[int, float, str]:
    """Dynamically type a CSV cell: numbers when unambiguous, text otherwise."""
    number = parse_number(text)
    return text if number is None else number


def is_blank(value: Any) -> bool:
    """Null, empty and whitespace-only cells carry no value."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def is_blank_row(cells: Iterable[Any]) -> bool:
    """Rows made only of blank cells are skipped by every reader."""
    return all(is_blank(cell) for cell in cells)


def is_numeric(value: Any) -> bool:
    """Whether a cell holds a finite number, either typed or as text."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        return parse_number(value) is not None
    return False
