"""Liquidity and sqrt-price primitives for a single curve segment.

Sqrt prices and liquidity are Q64.64, so a product of the two carries a
2^128 scale that has to be shifted back out. Amounts owed to the pool round
up and amounts paid out round down.
"""

from __future__ import annotations

from bonding_curve.constants import RESOLUTION, U128_MAX
from bonding_curve.errors import InsufficientLiquidity, InvalidState
from bonding_curve.math.safe_math import Rounding, div, mul_div, sub

_SHIFT = RESOLUTION * 2


def get_delta_amount_base_unsigned(
    lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding
) -> int:
    """Base tokens needed to move between two sqrt prices.

    delta_base = L * (upper - lower) / (lower * upper)
    """
    return mul_div(
        liquidity,
        upper_sqrt_price - lower_sqrt_price,
        lower_sqrt_price * upper_sqrt_price,
        rounding,
    )


def get_delta_amount_quote_unsigned(
    lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding
) -> int:
    """Quote tokens needed to move between two sqrt prices.

    delta_quote = L * (upper - lower) / 2^128
    """
    prod = liquidity * (upper_sqrt_price - lower_sqrt_price)
    if rounding == Rounding.UP:
        return (prod + (1 << _SHIFT) - 1) >> _SHIFT
    return prod >> _SHIFT


def get_next_sqrt_price_from_input(
    sqrt_price: int, liquidity: int, amount_in: int, base_for_quote: bool
) -> int:
    """Sqrt price after adding amount_in to the pool.

    Selling base lowers the price and rounds up; buying with quote raises
    the price and rounds down. Both directions keep the price on the side
    that favours the pool.

    Raises:
        InvalidState: If sqrt_price or liquidity is zero
    """
    if sqrt_price == 0 or liquidity == 0:
        raise InvalidState("Sqrt price and liquidity must be nonzero")

    if base_for_quote:
        return _next_sqrt_price_from_base_amount_in_rounding_up(sqrt_price, liquidity, amount_in)
    return _next_sqrt_price_from_quote_amount_in_rounding_down(sqrt_price, liquidity, amount_in)


def get_next_sqrt_price_from_output(
    sqrt_price: int, liquidity: int, amount_out: int, base_for_quote: bool
) -> int:
    """Sqrt price after removing amount_out from the pool.

    Raises:
        InvalidState: If sqrt_price or liquidity is zero
        InsufficientLiquidity: If the segment cannot pay out amount_out
    """
    if sqrt_price == 0 or liquidity == 0:
        raise InvalidState("Sqrt price and liquidity must be nonzero")

    if base_for_quote:
        return _next_sqrt_price_from_quote_amount_out_rounding_down(
            sqrt_price, liquidity, amount_out
        )
    return _next_sqrt_price_from_base_amount_out_rounding_up(sqrt_price, liquidity, amount_out)


def _next_sqrt_price_from_base_amount_in_rounding_up(
    sqrt_price: int, liquidity: int, amount: int
) -> int:
    if amount == 0:
        return sqrt_price

    product = amount * sqrt_price
    if product > U128_MAX:
        # L / (L / p + amount), avoids the oversized product
        return liquidity // (liquidity // sqrt_price + amount)
    return mul_div(liquidity, sqrt_price, liquidity + product, Rounding.UP)


def _next_sqrt_price_from_quote_amount_in_rounding_down(
    sqrt_price: int, liquidity: int, amount: int
) -> int:
    return sqrt_price + (amount << _SHIFT) // liquidity


def _next_sqrt_price_from_quote_amount_out_rounding_down(
    sqrt_price: int, liquidity: int, amount: int
) -> int:
    quotient = ((amount << _SHIFT) + liquidity - 1) // liquidity
    return sub(sqrt_price, quotient)


def _next_sqrt_price_from_base_amount_out_rounding_up(
    sqrt_price: int, liquidity: int, amount: int
) -> int:
    if amount == 0:
        return sqrt_price

    denominator = liquidity - amount * sqrt_price
    if denominator <= 0:
        raise InsufficientLiquidity(f"Segment cannot pay out {amount} base")
    return mul_div(liquidity, sqrt_price, denominator, Rounding.UP)


def get_initial_liquidity_from_delta_quote(
    quote_amount: int, sqrt_min_price: int, sqrt_price: int
) -> int:
    """Liquidity that prices quote_amount across [sqrt_min_price, sqrt_price]."""
    price_delta = sub(sqrt_price, sqrt_min_price)
    return div(quote_amount << _SHIFT, price_delta)


def get_initial_liquidity_from_delta_base(
    base_amount: int, sqrt_max_price: int, sqrt_price: int
) -> int:
    """Liquidity that prices base_amount across [sqrt_price, sqrt_max_price]."""
    price_delta = sub(sqrt_max_price, sqrt_price)
    return div(base_amount * sqrt_price * sqrt_max_price, price_delta)


def get_liquidity(
    base_amount: int, quote_amount: int, min_sqrt_price: int, max_sqrt_price: int
) -> int:
    """Largest liquidity that neither base_amount nor quote_amount can exceed."""
    liquidity_from_base = get_initial_liquidity_from_delta_base(
        base_amount, max_sqrt_price, min_sqrt_price
    )
    liquidity_from_quote = get_initial_liquidity_from_delta_quote(
        quote_amount, min_sqrt_price, max_sqrt_price
    )
    return min(liquidity_from_base, liquidity_from_quote)


__all__ = [
    "get_delta_amount_base_unsigned",
    "get_delta_amount_quote_unsigned",
    "get_next_sqrt_price_from_input",
    "get_next_sqrt_price_from_output",
    "get_initial_liquidity_from_delta_quote",
    "get_initial_liquidity_from_delta_base",
    "get_liquidity",
]
