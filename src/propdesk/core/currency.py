"""
PropDesk Risk - Currency Arithmetic
===================================

Fixed-precision helpers for monetary values. Every intermediate result is
rounded to cents so that summing thousands of trade P&L values does not
accumulate binary floating point drift.

Rounding is half-up on the decimal representation of the input, so
``round_currency(10.125) == 10.13`` and ``round_currency(1.005) == 1.01``.
Non-finite input (NaN, +/-Infinity, None) rounds to ``0.0``.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

import numpy as np

from propdesk.core.config import CURRENCY_DECIMALS, PNL_TOLERANCE

Number = Union[int, float, Decimal, np.number]

_QUANTUM = Decimal(1).scaleb(-CURRENCY_DECIMALS)  # Decimal('0.01')


def _to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    if not np.isfinite(value):
        return Decimal(0)
    if isinstance(value, (int, np.integer)):
        return Decimal(int(value))
    # repr() gives the shortest string that round-trips, 1.005 -> "1.005"
    return Decimal(repr(float(value)))


def round_currency(value: Optional[Number]) -> float:
    """Round a monetary value to cents (half-up). Non-finite input yields 0.0."""
    rounded = _to_decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    return float(rounded)


def add_currency(*values: Optional[Number]) -> float:
    """
    Sum monetary values, rounding after every addition.

    None entries count as zero.
    """
    total = Decimal(0)
    for value in values:
        total = (total + _to_decimal(round_currency(value))).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    return float(total)


def subtract_currency(a: Optional[Number], b: Optional[Number]) -> float:
    """Return ``a - b`` rounded to cents."""
    diff = _to_decimal(round_currency(a)) - _to_decimal(round_currency(b))
    return float(diff.quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def multiply_currency(amount: Optional[Number], factor: Optional[Number]) -> float:
    """Return ``amount * factor`` rounded to cents (fee per contract x quantity)."""
    product = _to_decimal(amount) * _to_decimal(factor)
    return float(product.quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def currency_equal(a: Optional[Number], b: Optional[Number], tolerance: float = PNL_TOLERANCE) -> bool:
    """True when two amounts differ by no more than ``tolerance`` after rounding."""
    return abs(subtract_currency(a, b)) <= tolerance
