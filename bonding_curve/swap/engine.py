"""Swap execution against a pool snapshot.

Each entry point resolves the fee numerator, applies the fee on the leg
chosen by the fee mode, and walks the curve. When the caller marks a swap
as eligible for the first-swap minimum fee, the strategy's minimum base fee
is used and no schedule, limiter or dynamic fee computation runs.
"""

from __future__ import annotations

import structlog

from bonding_curve.errors import InsufficientLiquidity, InvalidState
from bonding_curve.fees.base_fee import BaseFeeHandler, get_base_fee_handler
from bonding_curve.fees.fee_math import (
    get_fee_on_amount,
    get_included_fee_amount,
    get_total_fee_numerator_from_excluded_fee_amount,
    get_total_fee_numerator_from_included_fee_amount,
    split_fees,
)
from bonding_curve.math.safe_math import sub
from bonding_curve.models.enums import TradeDirection
from bonding_curve.models.pool import PoolConfig, VirtualPool
from bonding_curve.models.results import FeeMode, SwapAmount, SwapResult, SwapResult2
from bonding_curve.swap.curve_walk import (
    calculate_base_to_quote_from_amount_in,
    calculate_base_to_quote_from_amount_out,
    calculate_quote_to_base_from_amount_in,
    calculate_quote_to_base_from_amount_out,
)

logger = structlog.get_logger()


def _fee_numerator_from_included(
    handler: BaseFeeHandler,
    pool: VirtualPool,
    config: PoolConfig,
    amount: int,
    trade_direction: TradeDirection,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool,
) -> int:
    if eligible_for_first_swap_with_min_fee:
        return handler.get_min_base_fee_numerator()
    return get_total_fee_numerator_from_included_fee_amount(
        config.pool_fees,
        pool.volatility_tracker,
        current_point,
        pool.activation_point,
        amount,
        trade_direction,
    )


def _fee_numerator_from_excluded(
    handler: BaseFeeHandler,
    pool: VirtualPool,
    config: PoolConfig,
    amount: int,
    trade_direction: TradeDirection,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool,
) -> int:
    if eligible_for_first_swap_with_min_fee:
        return handler.get_min_base_fee_numerator()
    return get_total_fee_numerator_from_excluded_fee_amount(
        config.pool_fees,
        pool.volatility_tracker,
        current_point,
        pool.activation_point,
        amount,
        trade_direction,
    )


def _walk_exact_in(
    pool: VirtualPool, config: PoolConfig, amount_in: int, trade_direction: TradeDirection
) -> SwapAmount:
    if not config.active_curve:
        raise InvalidState("Pool config has an empty curve")
    if trade_direction == TradeDirection.BASE_TO_QUOTE:
        return calculate_base_to_quote_from_amount_in(config, pool.sqrt_price, amount_in)
    return calculate_quote_to_base_from_amount_in(
        config, pool.sqrt_price, amount_in, config.migration_sqrt_price
    )


def get_swap_result(
    pool: VirtualPool,
    config: PoolConfig,
    amount_in: int,
    fee_mode: FeeMode,
    trade_direction: TradeDirection,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapResult:
    """Exact-in swap.

    Raises:
        InsufficientLiquidity: If the curve cannot absorb the whole input
    """
    handler = get_base_fee_handler(config.pool_fees.base_fee)
    trade_fee_numerator = _fee_numerator_from_included(
        handler, pool, config, amount_in, trade_direction, current_point,
        eligible_for_first_swap_with_min_fee,
    )

    trading_fee = protocol_fee = referral_fee = 0
    actual_amount_in = amount_in
    if fee_mode.fees_on_input:
        fee_result = get_fee_on_amount(trade_fee_numerator, amount_in, fee_mode.has_referral)
        trading_fee = fee_result.trading_fee
        protocol_fee = fee_result.protocol_fee
        referral_fee = fee_result.referral_fee
        actual_amount_in = fee_result.amount

    swap_amount = _walk_exact_in(pool, config, actual_amount_in, trade_direction)
    if swap_amount.amount_left != 0:
        raise InsufficientLiquidity(
            f"Curve cannot absorb {swap_amount.amount_left} of {actual_amount_in} input"
        )

    actual_amount_out = swap_amount.output_amount
    if not fee_mode.fees_on_input:
        fee_result = get_fee_on_amount(
            trade_fee_numerator, swap_amount.output_amount, fee_mode.has_referral
        )
        trading_fee = fee_result.trading_fee
        protocol_fee = fee_result.protocol_fee
        referral_fee = fee_result.referral_fee
        actual_amount_out = fee_result.amount

    return SwapResult(
        actual_input_amount=actual_amount_in,
        output_amount=actual_amount_out,
        next_sqrt_price=swap_amount.next_sqrt_price,
        trading_fee=trading_fee,
        protocol_fee=protocol_fee,
        referral_fee=referral_fee,
    )


def get_swap_result_from_exact_input(
    pool: VirtualPool,
    config: PoolConfig,
    amount_in: int,
    fee_mode: FeeMode,
    trade_direction: TradeDirection,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapResult2:
    """Exact-in swap reported in the v2 result shape.

    Raises:
        InsufficientLiquidity: If the curve cannot absorb the whole input
    """
    result = get_swap_result(
        pool, config, amount_in, fee_mode, trade_direction, current_point,
        eligible_for_first_swap_with_min_fee,
    )
    return SwapResult2(
        amount_left=0,
        included_fee_input_amount=amount_in,
        excluded_fee_input_amount=result.actual_input_amount,
        output_amount=result.output_amount,
        next_sqrt_price=result.next_sqrt_price,
        trading_fee=result.trading_fee,
        protocol_fee=result.protocol_fee,
        referral_fee=result.referral_fee,
    )


def get_swap_result_from_partial_input(
    pool: VirtualPool,
    config: PoolConfig,
    amount_in: int,
    fee_mode: FeeMode,
    trade_direction: TradeDirection,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapResult2:
    """Exact-in swap that fills as much as the curve allows.

    When the curve runs out, the consumed input is re-priced: with fees on
    input, the fee is recomputed on the consumed net amount and grossed up
    into included_fee_input_amount. The unfilled remainder is amount_left.
    """
    handler = get_base_fee_handler(config.pool_fees.base_fee)
    trade_fee_numerator = _fee_numerator_from_included(
        handler, pool, config, amount_in, trade_direction, current_point,
        eligible_for_first_swap_with_min_fee,
    )

    trading_fee = protocol_fee = referral_fee = 0
    actual_amount_in = amount_in
    if fee_mode.fees_on_input:
        fee_result = get_fee_on_amount(trade_fee_numerator, amount_in, fee_mode.has_referral)
        trading_fee = fee_result.trading_fee
        protocol_fee = fee_result.protocol_fee
        referral_fee = fee_result.referral_fee
        actual_amount_in = fee_result.amount

    swap_amount = _walk_exact_in(pool, config, actual_amount_in, trade_direction)

    included_fee_input_amount = amount_in
    if swap_amount.amount_left != 0:
        logger.debug(
            "partial_fill",
            requested=actual_amount_in,
            amount_left=swap_amount.amount_left,
        )
        actual_amount_in = sub(actual_amount_in, swap_amount.amount_left)
        if fee_mode.fees_on_input:
            partial_fee_numerator = _fee_numerator_from_excluded(
                handler, pool, config, actual_amount_in, trade_direction, current_point,
                eligible_for_first_swap_with_min_fee,
            )
            included_fee_input_amount, fee_amount = get_included_fee_amount(
                partial_fee_numerator, actual_amount_in
            )
            trading_fee, protocol_fee, referral_fee = split_fees(
                fee_amount, fee_mode.has_referral
            )
        else:
            included_fee_input_amount = actual_amount_in

    actual_amount_out = swap_amount.output_amount
    if not fee_mode.fees_on_input:
        fee_result = get_fee_on_amount(
            trade_fee_numerator, swap_amount.output_amount, fee_mode.has_referral
        )
        trading_fee = fee_result.trading_fee
        protocol_fee = fee_result.protocol_fee
        referral_fee = fee_result.referral_fee
        actual_amount_out = fee_result.amount

    return SwapResult2(
        amount_left=swap_amount.amount_left,
        included_fee_input_amount=included_fee_input_amount,
        excluded_fee_input_amount=actual_amount_in,
        output_amount=actual_amount_out,
        next_sqrt_price=swap_amount.next_sqrt_price,
        trading_fee=trading_fee,
        protocol_fee=protocol_fee,
        referral_fee=referral_fee,
    )


def get_swap_result_from_exact_output(
    pool: VirtualPool,
    config: PoolConfig,
    amount_out: int,
    fee_mode: FeeMode,
    trade_direction: TradeDirection,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapResult2:
    """Swap for an exact net output amount.

    With fees on output, the requested amount is grossed up before walking
    the curve. With fees on input, the required input is grossed up after.

    Raises:
        InsufficientLiquidity: If the curve cannot pay out the amount, or
            the swap would push the price past migration_sqrt_price
    """
    if not config.active_curve:
        raise InvalidState("Pool config has an empty curve")
    handler = get_base_fee_handler(config.pool_fees.base_fee)

    trading_fee = protocol_fee = referral_fee = 0
    included_fee_out_amount = amount_out
    if not fee_mode.fees_on_input:
        trade_fee_numerator = _fee_numerator_from_excluded(
            handler, pool, config, amount_out, trade_direction, current_point,
            eligible_for_first_swap_with_min_fee,
        )
        included_fee_out_amount, fee_amount = get_included_fee_amount(
            trade_fee_numerator, amount_out
        )
        trading_fee, protocol_fee, referral_fee = split_fees(fee_amount, fee_mode.has_referral)

    if trade_direction == TradeDirection.BASE_TO_QUOTE:
        swap_amount = calculate_base_to_quote_from_amount_out(
            config, pool.sqrt_price, included_fee_out_amount
        )
    else:
        swap_amount = calculate_quote_to_base_from_amount_out(
            config, pool.sqrt_price, included_fee_out_amount
        )

    amount_in = swap_amount.output_amount
    if swap_amount.next_sqrt_price > config.migration_sqrt_price:
        raise InsufficientLiquidity("Swap would push the price past the migration price")

    included_fee_input_amount = amount_in
    if fee_mode.fees_on_input:
        trade_fee_numerator = _fee_numerator_from_excluded(
            handler, pool, config, amount_in, trade_direction, current_point,
            eligible_for_first_swap_with_min_fee,
        )
        included_fee_input_amount, fee_amount = get_included_fee_amount(
            trade_fee_numerator, amount_in
        )
        trading_fee, protocol_fee, referral_fee = split_fees(fee_amount, fee_mode.has_referral)

    return SwapResult2(
        amount_left=0,
        included_fee_input_amount=included_fee_input_amount,
        excluded_fee_input_amount=amount_in,
        output_amount=amount_out,
        next_sqrt_price=swap_amount.next_sqrt_price,
        trading_fee=trading_fee,
        protocol_fee=protocol_fee,
        referral_fee=referral_fee,
    )
