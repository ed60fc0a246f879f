"""Currency normalization - every computed amount passes through here"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

EPSILON = Decimal("1e-8")
CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce an arbitrary input to a Decimal.

    Missing, non-numeric and non-finite values become zero. Strings may carry
    thousands separators, a pound sign or whitespace ("£1,250.50").
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)

    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        return Decimal(repr(value)) if math.isfinite(value) else Decimal(0)

    if isinstance(value, str):
        cleaned = value.replace(",", "").replace("£", "").strip().replace(" ", "")
        if not cleaned:
            return Decimal(0)
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation:
            return Decimal(0)
        return parsed if parsed.is_finite() else Decimal(0)

    return Decimal(0)


def normalize_currency(value: Any) -> Decimal:
    """
    Round a monetary value to 2 dp (half-up) with epsilon snap-to-zero.

    Examples:
        normalize_currency(3.0198)   -> Decimal("3.02")
        normalize_currency(1e-9)     -> Decimal("0.00")
        normalize_currency("n/a")    -> Decimal("0.00")
        normalize_currency("1e30")   -> Decimal("0.00")
    """
    amount = to_decimal(value)
    if abs(amount) < EPSILON:
        return ZERO
    try:
        rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the decimal context holds; not a real household amount
        return ZERO
    # Avoid Decimal("-0.00") leaking into equality checks and output
    return ZERO if rounded == 0 else rounded


def sum_currency(values) -> Decimal:
    """Normalized sum of an iterable of amounts"""
    total = ZERO
    for value in values:
        total = normalize_currency(total + to_decimal(value))
    return total


def clamp_non_negative(value: Any) -> Decimal:
    """Normalize and floor at zero"""
    return max(ZERO, normalize_currency(value))
