"""
Money utilities.

Provides the rounding and formatting rules shared by every engine:
- round2: half-away-from-zero rounding to paise
- mul2 / percent2: products rounded to paise, computed in decimal
- format_currency: Indian (lakh/crore) digit grouping
- to_amount: lenient coercion of wire values
"""
from __future__ import annotations
import math
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, localcontext
from typing import Any, Optional
from loguru import logger

_PAISE = Decimal("0.01")
_HUNDRED = Decimal(100)

# Enough digits to quantize the largest finite float to paise
_PRECISION = 400


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Shortest decimal form of a float, or None for missing / non-finite input."""
    if _is_missing(value):
        return None
    try:
        d = Decimal(repr(float(value)))
    except (TypeError, ValueError, InvalidOperation):
        return None
    return d if d.is_finite() else None


def _quantize(d: Optional[Decimal]) -> float:
    if d is None:
        return 0.0
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(d.quantize(_PAISE, rounding=ROUND_HALF_UP)) + 0.0


def round2(amount: Any) -> float:
    """
    Round to 2 decimal places, halves away from zero.

    Works on the shortest decimal representation of the float (``repr``), so
    ``2.675`` rounds to ``2.68`` even though its binary value is slightly
    below it. None, NaN and infinities round to 0.0.
    """
    return _quantize(_to_decimal(amount))


def mul2(a: Any, b: Any) -> float:
    """
    ``round2(a * b)`` with the product taken in decimal.

    A float product can land just below a half paisa (3 x 0.145 is
    0.43499999999999994), so multiplying first and rounding after would
    round the wrong way.
    """
    da, db = _to_decimal(a), _to_decimal(b)
    if da is None or db is None:
        return 0.0
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return _quantize(da * db)


def percent2(amount: Any, rate: Any) -> float:
    """``rate`` percent of ``amount``, rounded to paise."""
    da, dr = _to_decimal(amount), _to_decimal(rate)
    if da is None or dr is None:
        return 0.0
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return _quantize(da * dr / _HUNDRED)


def to_amount(value: Any, default: float = 0.0) -> float:
    """
    Coerce a wire value to float.

    Handles:
    - Plain numbers
    - Numeric strings with comma separators or a rupee sign
    - None / empty strings (returns default)
    """
    if _is_missing(value):
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)

    s = str(value).strip()
    if not s:
        return default
    s = re.sub(r"[,₹\s]", "", s)
    s = s.removeprefix("Rs.").removeprefix("Rs")
    try:
        val = float(s)
    except ValueError:
        logger.warning(f"Could not parse amount: {value!r}")
        return default
    if math.isnan(val):
        return default
    return val


def _group_indian(digits: str) -> str:
    """Group an integer digit string as 12,34,56,789."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(amount: Any, symbol: str = "") -> str:
    """
    Format an amount with Indian digit grouping and exactly two decimals.

    >>> format_currency(1234567.891)
    '12,34,567.89'
    >>> format_currency(-1500, symbol="₹ ")
    '-₹ 1,500.00'

    None, NaN and unparseable input are shown as zero.
    """
    value = round2(to_amount(amount))
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    return f"{sign}{symbol}{_group_indian(whole)}.{frac}"
