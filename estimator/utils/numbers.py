"""Numeric parsing and fixed-precision formatting helpers.

All money math in the engine runs on ``Decimal``; these helpers are the only
places where raw user input becomes a number and where a number becomes an
output string.
"""

import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from config.limits import PRECISION

ZERO = Decimal("0")

# Leading numeric prefix, the way a form field like "12.5 ft" is read.
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_number(value: Any) -> Optional[Decimal]:
    """Parse a number from user input.

    Accepts ints, floats, Decimals and strings with a leading numeric part.
    Booleans, non-finite values and anything else yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        try:
            return Decimal(match.group(0).strip())
        except InvalidOperation:
            return None
    return None


def parse_cost_string(value: str) -> Optional[Decimal]:
    """Parse a currency string such as ``"$1,250.50"``.

    Every character other than digits, ``.`` and ``-`` is stripped first.
    """
    return parse_number(_NON_NUMERIC.sub("", value))


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Lenient conversion used for settings and fees; unparseable -> default."""
    parsed = parse_number(value)
    return default if parsed is None else parsed


def clamp(value: Decimal, low: Decimal, high: Optional[Decimal] = None) -> Decimal:
    """Clamp value into [low, high] (no upper bound when high is None)."""
    if value < low:
        return low
    if high is not None and value > high:
        return high
    return value


def quantize(value: Decimal, places: int) -> Decimal:
    """Round half-up to a fixed number of fraction digits."""
    exponent = Decimal(1).scaleb(-places)
    result = Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)
    # Normalise -0.00 to 0.00
    return result if result != 0 else abs(result)


def format_money(value: Any) -> str:
    """Format a monetary amount with exactly two fraction digits."""
    return format(quantize(to_decimal(value), PRECISION.currency), "f")


def format_rate(value: Any) -> str:
    """Format a per-unit rate with exactly four fraction digits."""
    return format(quantize(to_decimal(value), PRECISION.rates), "f")


def round_units(value: Any, places: int = PRECISION.area) -> float:
    """Round a unit quantity for output."""
    return float(quantize(to_decimal(value), places))
