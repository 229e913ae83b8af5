"""
Utility functions for the application.
"""
import math
import re
from typing import Any, Optional

_PRICE_JUNK = re.compile(r"[^0-9.+-]")
_LEADING_NUMBER = re.compile(r"[+-]?\d*\.?\d+")


def finite_number(value: Any) -> Optional[float]:
    """`value` as a finite float, or None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def coerce_quantity(value: Any, default: int = 1) -> int:
    """Whole units of at least 1; non-numeric or non-finite input becomes `default`"""
    number = finite_number(value)
    if number is None:
        return default
    return max(1, int(number))


def normalize_price_delta(value: Any) -> float:
    """
    Parse a price delta as printed on a product option

    Examples:
        "+$25.00"   -> 25.0
        "-10"       -> -10.0
        "$1,299.99" -> 1299.99
        "free"      -> 0.0
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else 0.0
    match = _LEADING_NUMBER.match(_PRICE_JUNK.sub("", str(value or "")))
    if not match:
        return 0.0
    return finite_number(match.group(0)) or 0.0
