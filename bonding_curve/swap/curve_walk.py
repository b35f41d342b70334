"""Walking the curve segment by segment.

Segment i covers (curve[i-1].sqrt_price, curve[i].sqrt_price] with
liquidity curve[i].liquidity; the first segment starts at the pool's
sqrt_start_price. Selling base walks the segments downward, buying base
walks them upward. Each walker consumes whole segments until the remaining
amount fits inside one, then solves for the price inside that segment.
"""

from __future__ import annotations

import structlog

from bonding_curve.errors import InsufficientLiquidity
from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)
from bonding_curve.math.safe_math import Rounding, sub
from bonding_curve.models.pool import PoolConfig
from bonding_curve.models.results import SwapAmount

logger = structlog.get_logger()


def calculate_base_to_quote_from_amount_in(
    config: PoolConfig, current_sqrt_price: int, amount_in: int
) -> SwapAmount:
    """Sell amount_in base tokens.

    If the curve runs out at sqrt_start_price the price is clamped there and
    the unsold base is reported in amount_left.
    """
    curve = config.active_curve
    total_output = 0
    current = current_sqrt_price
    amount_left = amount_in

    for i in range(len(curve) - 2, -1, -1):
        lower = curve[i].sqrt_price
        liquidity = curve[i + 1].liquidity
        if lower == 0 or curve[i].liquidity == 0 or lower >= current:
            continue

        max_amount_in = get_delta_amount_base_unsigned(lower, current, liquidity, Rounding.UP)
        if amount_left < max_amount_in:
            next_sqrt_price = get_next_sqrt_price_from_input(current, liquidity, amount_left, True)
            total_output += get_delta_amount_quote_unsigned(
                next_sqrt_price, current, liquidity, Rounding.DOWN
            )
            current = next_sqrt_price
            amount_left = 0
            break

        total_output += get_delta_amount_quote_unsigned(lower, current, liquidity, Rounding.DOWN)
        logger.debug("swap_segment_crossed", index=i + 1, sqrt_price=lower)
        current = lower
        amount_left -= max_amount_in

    if amount_left != 0:
        liquidity = curve[0].liquidity
        next_sqrt_price = get_next_sqrt_price_from_input(current, liquidity, amount_left, True)
        if next_sqrt_price < config.sqrt_start_price:
            next_sqrt_price = config.sqrt_start_price
            consumed = get_delta_amount_base_unsigned(
                next_sqrt_price, current, liquidity, Rounding.UP
            )
            amount_left = max(amount_left - consumed, 0)
        else:
            amount_left = 0
        total_output += get_delta_amount_quote_unsigned(
            next_sqrt_price, current, liquidity, Rounding.DOWN
        )
        current = next_sqrt_price

    return SwapAmount(output_amount=total_output, next_sqrt_price=current, amount_left=amount_left)


def calculate_quote_to_base_from_amount_in(
    config: PoolConfig, current_sqrt_price: int, amount_in: int, stop_sqrt_price: int
) -> SwapAmount:
    """Buy base with amount_in quote tokens, stopping at stop_sqrt_price.

    Quote that would push the price past stop_sqrt_price is reported in
    amount_left.
    """
    if amount_in == 0:
        return SwapAmount(output_amount=0, next_sqrt_price=current_sqrt_price, amount_left=0)

    total_output = 0
    current = current_sqrt_price
    amount_left = amount_in

    for i, segment in enumerate(config.active_curve):
        if segment.liquidity == 0:
            break
        reference = min(stop_sqrt_price, segment.sqrt_price)
        if reference <= current:
            continue

        max_amount_in = get_delta_amount_quote_unsigned(
            current, reference, segment.liquidity, Rounding.UP
        )
        if amount_left < max_amount_in:
            next_sqrt_price = get_next_sqrt_price_from_input(
                current, segment.liquidity, amount_left, False
            )
            total_output += get_delta_amount_base_unsigned(
                current, next_sqrt_price, segment.liquidity, Rounding.DOWN
            )
            current = next_sqrt_price
            amount_left = 0
            break

        total_output += get_delta_amount_base_unsigned(
            current, reference, segment.liquidity, Rounding.DOWN
        )
        logger.debug("swap_segment_crossed", index=i, sqrt_price=reference)
        current = reference
        amount_left -= max_amount_in
        if reference == stop_sqrt_price:
            break

    return SwapAmount(output_amount=total_output, next_sqrt_price=current, amount_left=amount_left)


def calculate_base_to_quote_from_amount_out(
    config: PoolConfig, current_sqrt_price: int, out_amount: int
) -> SwapAmount:
    """Base input needed to receive out_amount quote tokens.

    The returned output_amount is the required input.

    Raises:
        InsufficientLiquidity: If the curve cannot pay out out_amount above
            sqrt_start_price
    """
    curve = config.active_curve
    total_amount_in = 0
    current = current_sqrt_price
    amount_left = out_amount

    for i in range(len(curve) - 2, -1, -1):
        lower = curve[i].sqrt_price
        liquidity = curve[i + 1].liquidity
        if lower == 0 or curve[i].liquidity == 0 or lower >= current:
            continue

        max_amount_out = get_delta_amount_quote_unsigned(lower, current, liquidity, Rounding.DOWN)
        if amount_left < max_amount_out:
            next_sqrt_price = get_next_sqrt_price_from_output(current, liquidity, amount_left, True)
            total_amount_in += get_delta_amount_base_unsigned(
                next_sqrt_price, current, liquidity, Rounding.UP
            )
            current = next_sqrt_price
            amount_left = 0
            break

        total_amount_in += get_delta_amount_base_unsigned(lower, current, liquidity, Rounding.UP)
        logger.debug("swap_segment_crossed", index=i + 1, sqrt_price=lower)
        current = lower
        amount_left -= max_amount_out

    if amount_left != 0:
        liquidity = curve[0].liquidity
        max_amount_out = get_delta_amount_quote_unsigned(
            config.sqrt_start_price, current, liquidity, Rounding.DOWN
        )
        if amount_left > max_amount_out:
            raise InsufficientLiquidity(
                f"Curve can pay out at most {max_amount_out} more quote, requested {amount_left}"
            )
        next_sqrt_price = get_next_sqrt_price_from_output(current, liquidity, amount_left, True)
        if next_sqrt_price < config.sqrt_start_price:
            raise InsufficientLiquidity("Swap would move the price below sqrt_start_price")
        total_amount_in += get_delta_amount_base_unsigned(
            next_sqrt_price, current, liquidity, Rounding.UP
        )
        current = next_sqrt_price

    return SwapAmount(output_amount=total_amount_in, next_sqrt_price=current, amount_left=0)


def calculate_quote_to_base_from_amount_out(
    config: PoolConfig, current_sqrt_price: int, out_amount: int
) -> SwapAmount:
    """Quote input needed to receive out_amount base tokens.

    The returned output_amount is the required input.

    Raises:
        InsufficientLiquidity: If the whole curve cannot pay out out_amount
    """
    total_amount_in = 0
    current = current_sqrt_price
    amount_left = out_amount

    for i, segment in enumerate(config.active_curve):
        if segment.liquidity == 0:
            break
        if segment.sqrt_price <= current:
            continue

        max_amount_out = get_delta_amount_base_unsigned(
            current, segment.sqrt_price, segment.liquidity, Rounding.DOWN
        )
        if amount_left < max_amount_out:
            next_sqrt_price = get_next_sqrt_price_from_output(
                current, segment.liquidity, amount_left, False
            )
            total_amount_in += get_delta_amount_quote_unsigned(
                current, next_sqrt_price, segment.liquidity, Rounding.UP
            )
            current = next_sqrt_price
            amount_left = 0
            break

        total_amount_in += get_delta_amount_quote_unsigned(
            current, segment.sqrt_price, segment.liquidity, Rounding.UP
        )
        logger.debug("swap_segment_crossed", index=i, sqrt_price=segment.sqrt_price)
        current = segment.sqrt_price
        amount_left = sub(amount_left, max_amount_out)

    if amount_left != 0:
        raise InsufficientLiquidity(f"Not enough liquidity for {amount_left} more base")
    return SwapAmount(output_amount=total_amount_in, next_sqrt_price=current, amount_left=0)
