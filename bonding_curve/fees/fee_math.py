"""Fee application: total fee numerator, fee on amount, fee split."""

from __future__ import annotations

from bonding_curve.constants import (
    FEE_DENOMINATOR,
    HOST_FEE_PERCENT,
    MAX_FEE_NUMERATOR,
    PROTOCOL_FEE_PERCENT,
)
from bonding_curve.fees.base_fee import (
    get_base_fee_handler,
    get_base_fee_numerator_from_excluded_fee_amount,
    get_base_fee_numerator_from_included_fee_amount,
)
from bonding_curve.fees.dynamic_fee import get_variable_fee_numerator
from bonding_curve.math.safe_math import Rounding, mul_div, sub
from bonding_curve.models.enums import CollectFeeMode, TradeDirection
from bonding_curve.models.pool import DynamicFeeConfig, PoolFeesConfig, VolatilityTracker
from bonding_curve.models.results import FeeMode, FeeOnAmountResult


def get_fee_mode(
    collect_fee_mode: CollectFeeMode | int, trade_direction: TradeDirection, has_referral: bool
) -> FeeMode:
    """Decide which leg of a swap pays the fee.

    Quote-token mode always charges the quote leg: the input when buying,
    the output when selling. Output-token mode always charges the output.
    """
    fees_on_input = False
    fees_on_base_token = False

    if collect_fee_mode == CollectFeeMode.OUTPUT_TOKEN:
        if trade_direction == TradeDirection.QUOTE_TO_BASE:
            fees_on_base_token = True
    elif trade_direction == TradeDirection.QUOTE_TO_BASE:
        fees_on_input = True

    return FeeMode(
        fees_on_input=fees_on_input,
        fees_on_base_token=fees_on_base_token,
        has_referral=has_referral,
    )


def get_total_fee_numerator(
    base_fee_numerator: int, dynamic_fee: DynamicFeeConfig, volatility_tracker: VolatilityTracker
) -> int:
    """Base fee plus variable fee, capped at MAX_FEE_NUMERATOR."""
    variable_fee_numerator = get_variable_fee_numerator(dynamic_fee, volatility_tracker)
    return min(base_fee_numerator + variable_fee_numerator, MAX_FEE_NUMERATOR)


def get_total_fee_numerator_from_included_fee_amount(
    pool_fees: PoolFeesConfig,
    volatility_tracker: VolatilityTracker,
    current_point: int,
    activation_point: int,
    included_fee_amount: int,
    trade_direction: TradeDirection,
) -> int:
    handler = get_base_fee_handler(pool_fees.base_fee)
    base_fee_numerator = get_base_fee_numerator_from_included_fee_amount(
        handler, current_point, activation_point, trade_direction, included_fee_amount
    )
    return get_total_fee_numerator(base_fee_numerator, pool_fees.dynamic_fee, volatility_tracker)


def get_total_fee_numerator_from_excluded_fee_amount(
    pool_fees: PoolFeesConfig,
    volatility_tracker: VolatilityTracker,
    current_point: int,
    activation_point: int,
    excluded_fee_amount: int,
    trade_direction: TradeDirection,
) -> int:
    handler = get_base_fee_handler(pool_fees.base_fee)
    base_fee_numerator = get_base_fee_numerator_from_excluded_fee_amount(
        handler, current_point, activation_point, trade_direction, excluded_fee_amount
    )
    return get_total_fee_numerator(base_fee_numerator, pool_fees.dynamic_fee, volatility_tracker)


def get_excluded_fee_amount(trade_fee_numerator: int, included_fee_amount: int) -> tuple[int, int]:
    """Split a fee-inclusive amount.

    Returns:
        (excluded_fee_amount, trading_fee), with the fee rounded up
    """
    trading_fee = mul_div(included_fee_amount, trade_fee_numerator, FEE_DENOMINATOR, Rounding.UP)
    return sub(included_fee_amount, trading_fee), trading_fee


def get_included_fee_amount(trade_fee_numerator: int, excluded_fee_amount: int) -> tuple[int, int]:
    """Gross up a net amount so that charging the fee leaves it intact.

    Returns:
        (included_fee_amount, fee_amount), with the included amount
        rounded up
    """
    denominator = sub(FEE_DENOMINATOR, trade_fee_numerator)
    included = mul_div(excluded_fee_amount, FEE_DENOMINATOR, denominator, Rounding.UP)
    return included, sub(included, excluded_fee_amount)


def split_fees(fee_amount: int, has_referral: bool) -> tuple[int, int, int]:
    """Split a fee into (trading_fee, protocol_fee, referral_fee).

    The protocol takes PROTOCOL_FEE_PERCENT of the fee and a referrer takes
    HOST_FEE_PERCENT of the protocol's share. Both round down, so the
    remainder stays with the trading fee.
    """
    protocol_fee = mul_div(fee_amount, PROTOCOL_FEE_PERCENT, 100, Rounding.DOWN)
    trading_fee = sub(fee_amount, protocol_fee)
    referral_fee = 0
    if has_referral:
        referral_fee = mul_div(protocol_fee, HOST_FEE_PERCENT, 100, Rounding.DOWN)
    return trading_fee, sub(protocol_fee, referral_fee), referral_fee


def get_fee_on_amount(
    trade_fee_numerator: int, amount: int, has_referral: bool
) -> FeeOnAmountResult:
    """Charge the fee on amount and split it."""
    amount_after_fee, fee = get_excluded_fee_amount(trade_fee_numerator, amount)
    trading_fee, protocol_fee, referral_fee = split_fees(fee, has_referral)
    return FeeOnAmountResult(
        amount=amount_after_fee,
        trading_fee=trading_fee,
        protocol_fee=protocol_fee,
        referral_fee=referral_fee,
    )
