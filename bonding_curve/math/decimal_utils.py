"""High-precision Decimal helpers for curve calibration.

Calibration works on business inputs (market caps, percentages) that arrive
as floats, so it runs in Decimal with 78 significant digits and converts to
integers only at well-defined truncation points.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from bonding_curve.config import DEFAULT_ENGINE_CONFIG

# 78 digits of precision, enough for products of two u128 values
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=DEFAULT_ENGINE_CONFIG.decimal_precision)

# Places kept by a plain division
DIVISION_PLACES = 16


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a value to Decimal.

    Floats go through their shortest repr, so 0.1 becomes Decimal("0.1")
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def div_round(numerator: Decimal, denominator: Decimal, places: int) -> Decimal:
    """Divide and round half-up to a fixed number of decimal places.

    Raises:
        decimal.DivisionByZero: If denominator is zero
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT) as ctx:
        ctx.traps[decimal.DivisionByZero] = True
        quotient = numerator / denominator
        return quotient.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, keeping DIVISION_PLACES decimal places."""
    return div_round(numerator, denominator, DIVISION_PLACES)


def decimal_sqrt(value: Decimal) -> Decimal:
    """Square root in the high-precision context.

    Raises:
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"Cannot take square root of negative value: {value}")
    if value == 0:
        return Decimal(0)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return value.sqrt()


def decimal_root_pow2(value: Decimal, power: int) -> Decimal:
    """Apply decimal_sqrt power times, i.e. the 2^power-th root."""
    out = value
    for _ in range(power):
        out = decimal_sqrt(out)
    return out


def decimal_pow(base: Decimal, exponent: Decimal) -> Decimal:
    """Raise base to a possibly fractional exponent.

    Raises:
        ValueError: For 0 ** 0 or a negative base with a fractional exponent
    """
    if base == 0 and exponent == 0:
        raise ValueError("0 ** 0 is undefined")
    if base < 0 and exponent != exponent.to_integral_value():
        raise ValueError(f"Fractional power of negative value: {base} ** {exponent}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return base**exponent


def mul(*values: Decimal) -> Decimal:
    """Multiply Decimal values in the high-precision context."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        out = Decimal(1)
        for v in values:
            out *= v
        return out


def truncate_to_int(value: Decimal) -> int:
    """Drop the fractional part (toward zero)."""
    return int(value.to_integral_value(rounding=ROUND_DOWN))


def round_significant(value: Decimal, digits: int) -> Decimal:
    """Round half-up to (digits - coefficient length) decimal places.

    The coefficient includes trailing fractional zeros, so a value quantized
    to 16 places keeps fewer integer digits than one held as an integer.
    For integers this keeps `digits` significant digits.
    """
    if value == 0:
        return value
    places = digits - len(value.as_tuple().digits)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_lamports(amount: Decimal | int, token_decimal: int) -> int:
    """Scale a whole-token amount to base units, truncating."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return truncate_to_int(to_decimal(amount).scaleb(token_decimal))


__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "DIVISION_PLACES",
    "to_decimal",
    "div_round",
    "div",
    "decimal_sqrt",
    "decimal_root_pow2",
    "decimal_pow",
    "mul",
    "truncate_to_int",
    "round_significant",
    "to_lamports",
]
