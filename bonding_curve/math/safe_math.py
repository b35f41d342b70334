"""Checked integer arithmetic with explicit rounding.

Python integers are unbounded, so the only failures worth modelling are the
ones the on-chain program would hit: division by zero, negative results,
and values that do not fit the width they are stored in.
"""

from __future__ import annotations

from enum import IntEnum

from bonding_curve.config import DEFAULT_ENGINE_CONFIG
from bonding_curve.constants import (
    FEE_DENOMINATOR,
    MAX_BASIS_POINT,
    ONE_Q64,
    U64_MAX,
    U128_MAX,
)
from bonding_curve.errors import (
    DivisionByZero,
    ExponentTooLarge,
    MathOverflow,
    SqrtDidNotConverge,
    Underflow,
)


class Rounding(IntEnum):
    """Rounding direction for integer division."""

    UP = 0
    DOWN = 1


def add(a: int, b: int) -> int:
    """Add two non-negative integers."""
    return a + b


def sub(a: int, b: int) -> int:
    """Subtract b from a.

    Raises:
        Underflow: If b > a
    """
    if b > a:
        raise Underflow(f"{a} - {b} would be negative")
    return a - b


def div(a: int, b: int, rounding: Rounding = Rounding.DOWN) -> int:
    """Divide a by b with the given rounding.

    Raises:
        DivisionByZero: If b == 0
    """
    if b == 0:
        raise DivisionByZero(f"{a} / 0")
    if rounding == Rounding.UP:
        return (a + b - 1) // b
    return a // b


def mul_div(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """Compute x * y / denominator rounded in the given direction.

    Args:
        x: First factor
        y: Second factor
        denominator: Divisor
        rounding: Rounding.UP for ceiling, Rounding.DOWN for floor

    Returns:
        The rounded quotient. When denominator is 1 the product is returned
        unchanged.

    Raises:
        DivisionByZero: If denominator == 0
    """
    if denominator == 0:
        raise DivisionByZero(f"mul_div({x}, {y}, 0)")
    if denominator == 1 or x == 0 or y == 0:
        return x * y

    prod = x * y
    if rounding == Rounding.UP:
        return (prod + denominator - 1) // denominator
    return prod // denominator


def mul_shr(x: int, y: int, offset: int) -> int:
    """Compute (x * y) >> offset, rounding down."""
    if x == 0 or y == 0:
        return 0
    return (x * y) >> offset


def shl_div(x: int, y: int, offset: int, rounding: Rounding) -> int:
    """Compute (x << offset) / y with the given rounding.

    Raises:
        DivisionByZero: If y == 0
    """
    if y == 0:
        raise DivisionByZero(f"shl_div({x}, 0)")
    return mul_div(x, 1 << offset, y, rounding)


def isqrt(value: int, max_iterations: int = DEFAULT_ENGINE_CONFIG.sqrt_max_iterations) -> int:
    """Integer square root (floor) by Newton's method.

    Args:
        value: Non-negative integer
        max_iterations: Iteration cap

    Returns:
        floor(sqrt(value))

    Raises:
        ValueError: If value is negative
        SqrtDidNotConverge: If the iteration cap is reached
    """
    if value < 0:
        raise ValueError(f"Square root of negative number: {value}")
    if value < 2:
        return value

    # Initial guess is a power of two above the root, so the sequence
    # decreases monotonically until it reaches the floor.
    x = 1 << ((value.bit_length() + 1) // 2)
    for _ in range(max_iterations):
        y = (x + value // x) // 2
        if y >= x:
            return x
        x = y
    raise SqrtDidNotConverge(f"isqrt({value}) did not converge in {max_iterations} iterations")


def pow_q64(base: int, exponent: int, scaling: bool) -> int:
    """Raise a Q64.64 value to an integer power by binary exponentiation.

    Every product is truncated back to Q64.64, so intermediate precision is
    the same whichever form of result is requested.

    Args:
        base: Q64.64 base value
        exponent: Non-negative integer exponent
        scaling: Return the Q64.64 result when True, else its integer part

    Returns:
        base ** exponent, in Q64.64 when scaling is True

    Raises:
        ExponentTooLarge: If the exponent does not fit in 64 bits
    """
    one = ONE_Q64 if scaling else 1
    if exponent == 0:
        return one
    if base == 0:
        return 0
    if base == ONE_Q64:
        return one
    if exponent.bit_length() > 64:
        raise ExponentTooLarge(f"Exponent {exponent} exceeds 64 bits")

    result = ONE_Q64
    current = base
    exp = exponent
    while exp > 0:
        if exp & 1:
            result = mul_div(result, current, ONE_Q64, Rounding.DOWN)
        exp >>= 1
        if exp:
            current = mul_div(current, current, ONE_Q64, Rounding.DOWN)
    return result if scaling else result >> 64


def to_numerator(bps: int, denominator: int = FEE_DENOMINATOR) -> int:
    """Convert basis points to a fee numerator over FEE_DENOMINATOR."""
    return mul_div(bps, denominator, MAX_BASIS_POINT, Rounding.DOWN)


def bps_to_fee_numerator(bps: int) -> int:
    """Convert basis points to a fee numerator."""
    return to_numerator(bps)


def fee_numerator_to_bps(numerator: int) -> int:
    """Convert a fee numerator back to whole basis points (floor)."""
    return mul_div(numerator, MAX_BASIS_POINT, FEE_DENOMINATOR, Rounding.DOWN)


def to_u64(value: int) -> int:
    """Narrow to u64.

    Raises:
        MathOverflow: If value is negative or exceeds 2^64 - 1
    """
    if value < 0 or value > U64_MAX:
        raise MathOverflow(f"{value} does not fit in u64")
    return value


def to_u128(value: int) -> int:
    """Narrow to u128.

    Raises:
        MathOverflow: If value is negative or exceeds 2^128 - 1
    """
    if value < 0 or value > U128_MAX:
        raise MathOverflow(f"{value} does not fit in u128")
    return value


__all__ = [
    "Rounding",
    "add",
    "sub",
    "div",
    "mul_div",
    "mul_shr",
    "shl_div",
    "isqrt",
    "pow_q64",
    "to_numerator",
    "bps_to_fee_numerator",
    "fee_numerator_to_bps",
    "to_u64",
    "to_u128",
]
