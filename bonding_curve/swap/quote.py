"""Client-facing swap quotes with slippage bounds."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from bonding_curve.constants import MAX_BASIS_POINT
from bonding_curve.errors import InvalidConfiguration, PoolCompleted, ZeroAmount
from bonding_curve.fees.fee_math import get_fee_mode
from bonding_curve.models.enums import SwapMode, TradeDirection
from bonding_curve.models.pool import PoolConfig, VirtualPool
from bonding_curve.models.results import (
    FeeMode,
    SwapQuote2Result,
    SwapQuoteResult,
    SwapResult2,
)
from bonding_curve.swap.engine import (
    get_swap_result,
    get_swap_result_from_exact_input,
    get_swap_result_from_exact_output,
    get_swap_result_from_partial_input,
)

logger = structlog.get_logger()

SwapFn = Callable[[VirtualPool, PoolConfig, int, FeeMode, TradeDirection, int, bool], SwapResult2]


def _prepare(
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    amount: int,
    slippage_bps: int,
    has_referral: bool,
) -> tuple[TradeDirection, FeeMode]:
    if virtual_pool.quote_reserve >= config.migration_quote_threshold:
        raise PoolCompleted(
            f"Quote reserve {virtual_pool.quote_reserve} reached migration threshold "
            f"{config.migration_quote_threshold}"
        )
    if amount == 0:
        raise ZeroAmount("Amount is zero")
    if not 0 <= slippage_bps <= MAX_BASIS_POINT:
        raise InvalidConfiguration(
            "slippage_bps must be between 0 and 10000", "slippage_bps", slippage_bps
        )

    trade_direction = (
        TradeDirection.BASE_TO_QUOTE if swap_base_for_quote else TradeDirection.QUOTE_TO_BASE
    )
    fee_mode = get_fee_mode(config.collect_fee_mode, trade_direction, has_referral)
    return trade_direction, fee_mode


def _minimum_amount_out(output_amount: int, slippage_bps: int) -> int:
    if slippage_bps > 0:
        return output_amount * (MAX_BASIS_POINT - slippage_bps) // MAX_BASIS_POINT
    return output_amount


def _maximum_amount_in(input_amount: int, slippage_bps: int) -> int:
    if slippage_bps > 0:
        return input_amount * (MAX_BASIS_POINT + slippage_bps) // MAX_BASIS_POINT
    return input_amount


def swap_quote(
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    amount_in: int,
    slippage_bps: int = 0,
    has_referral: bool = False,
    current_point: int = 0,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapQuoteResult:
    """Quote an exact-in swap.

    Args:
        virtual_pool: Pool state snapshot
        config: Pool config the pool was created from
        swap_base_for_quote: Sell base for quote if True, else buy base
        amount_in: Input amount in base units
        slippage_bps: Tolerance applied to minimum_amount_out
        has_referral: Whether a referral account takes part of the protocol fee
        current_point: Current slot or timestamp, per the config's activation type
        eligible_for_first_swap_with_min_fee: Charge the minimum base fee

    Raises:
        PoolCompleted: If the pool has reached its migration threshold
        ZeroAmount: If amount_in is zero
        InsufficientLiquidity: If the curve cannot absorb amount_in
    """
    trade_direction, fee_mode = _prepare(
        virtual_pool, config, swap_base_for_quote, amount_in, slippage_bps, has_referral
    )
    result = get_swap_result(
        virtual_pool, config, amount_in, fee_mode, trade_direction, current_point,
        eligible_for_first_swap_with_min_fee,
    )
    logger.debug(
        "swap_quoted",
        mode="exact_in_v1",
        direction=trade_direction.name,
        amount_in=amount_in,
        output_amount=result.output_amount,
    )
    return SwapQuoteResult(
        result=result,
        minimum_amount_out=_minimum_amount_out(result.output_amount, slippage_bps),
    )


def _quote_in(
    swap_fn: SwapFn,
    mode: str,
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    amount_in: int,
    slippage_bps: int,
    has_referral: bool,
    current_point: int,
    eligible_for_first_swap_with_min_fee: bool,
) -> SwapQuote2Result:
    trade_direction, fee_mode = _prepare(
        virtual_pool, config, swap_base_for_quote, amount_in, slippage_bps, has_referral
    )
    result = swap_fn(
        virtual_pool, config, amount_in, fee_mode, trade_direction, current_point,
        eligible_for_first_swap_with_min_fee,
    )
    logger.debug(
        "swap_quoted",
        mode=mode,
        direction=trade_direction.name,
        amount_in=amount_in,
        output_amount=result.output_amount,
        amount_left=result.amount_left,
    )
    return SwapQuote2Result(
        result=result,
        minimum_amount_out=_minimum_amount_out(result.output_amount, slippage_bps),
    )


def swap_quote_exact_in(
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    amount_in: int,
    slippage_bps: int = 0,
    has_referral: bool = False,
    current_point: int = 0,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapQuote2Result:
    """Quote an exact-in swap in the v2 result shape.

    Raises:
        PoolCompleted: If the pool has reached its migration threshold
        ZeroAmount: If amount_in is zero
        InsufficientLiquidity: If the curve cannot absorb amount_in
    """
    return _quote_in(
        get_swap_result_from_exact_input, "exact_in",
        virtual_pool, config, swap_base_for_quote, amount_in, slippage_bps, has_referral,
        current_point, eligible_for_first_swap_with_min_fee,
    )


def swap_quote_partial_fill(
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    amount_in: int,
    slippage_bps: int = 0,
    has_referral: bool = False,
    current_point: int = 0,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapQuote2Result:
    """Quote a swap that fills as much of amount_in as the curve allows.

    Unfilled input is reported in result.amount_left instead of raising.
    """
    return _quote_in(
        get_swap_result_from_partial_input, "partial_fill",
        virtual_pool, config, swap_base_for_quote, amount_in, slippage_bps, has_referral,
        current_point, eligible_for_first_swap_with_min_fee,
    )


def swap_quote_exact_out(
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    amount_out: int,
    slippage_bps: int = 0,
    has_referral: bool = False,
    current_point: int = 0,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapQuote2Result:
    """Quote the input needed for an exact output amount.

    maximum_amount_in bounds the fee-inclusive input by slippage_bps.

    Raises:
        PoolCompleted: If the pool has reached its migration threshold
        ZeroAmount: If amount_out is zero
        InsufficientLiquidity: If the curve cannot pay out amount_out
    """
    trade_direction, fee_mode = _prepare(
        virtual_pool, config, swap_base_for_quote, amount_out, slippage_bps, has_referral
    )
    result = get_swap_result_from_exact_output(
        virtual_pool, config, amount_out, fee_mode, trade_direction, current_point,
        eligible_for_first_swap_with_min_fee,
    )
    logger.debug(
        "swap_quoted",
        mode="exact_out",
        direction=trade_direction.name,
        amount_out=amount_out,
        included_fee_input_amount=result.included_fee_input_amount,
    )
    return SwapQuote2Result(
        result=result,
        maximum_amount_in=_maximum_amount_in(result.included_fee_input_amount, slippage_bps),
    )


def swap_quote_2(
    virtual_pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    swap_mode: SwapMode,
    amount_in: int = 0,
    amount_out: int = 0,
    slippage_bps: int = 0,
    has_referral: bool = False,
    current_point: int = 0,
    eligible_for_first_swap_with_min_fee: bool = False,
) -> SwapQuote2Result:
    """Dispatch to the quote for swap_mode.

    EXACT_IN and PARTIAL_FILL read amount_in; EXACT_OUT reads amount_out.
    """
    if swap_mode == SwapMode.EXACT_IN:
        quote_fn, amount = swap_quote_exact_in, amount_in
    elif swap_mode == SwapMode.PARTIAL_FILL:
        quote_fn, amount = swap_quote_partial_fill, amount_in
    elif swap_mode == SwapMode.EXACT_OUT:
        quote_fn, amount = swap_quote_exact_out, amount_out
    else:
        raise InvalidConfiguration(f"Unknown swap mode: {swap_mode}", "swap_mode", swap_mode)

    return quote_fn(
        virtual_pool,
        config,
        swap_base_for_quote,
        amount,
        slippage_bps,
        has_referral,
        current_point,
        eligible_for_first_swap_with_min_fee,
    )
