"""Fixed-point and decimal arithmetic for the bonding-curve engine."""

from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_base,
    get_initial_liquidity_from_delta_quote,
    get_liquidity,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)
from bonding_curve.math.safe_math import (
    Rounding,
    isqrt,
    mul_div,
    mul_shr,
    pow_q64,
    shl_div,
    sub,
)

__all__ = [
    "Rounding",
    "isqrt",
    "mul_div",
    "mul_shr",
    "pow_q64",
    "shl_div",
    "sub",
    "get_delta_amount_base_unsigned",
    "get_delta_amount_quote_unsigned",
    "get_initial_liquidity_from_delta_base",
    "get_initial_liquidity_from_delta_quote",
    "get_liquidity",
    "get_next_sqrt_price_from_input",
    "get_next_sqrt_price_from_output",
]
