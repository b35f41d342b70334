"""Fee model for the bonding-curve engine.

This module provides:
- Base fee strategies (time-based fee scheduler, volume-based rate limiter)
- The volatility-driven dynamic fee surcharge
- Fee application and the trading/protocol/referral split

Usage:
    from bonding_curve.fees import get_base_fee_handler, get_fee_on_amount

    handler = get_base_fee_handler(pool_config.pool_fees.base_fee)
    min_fee = handler.get_min_base_fee_numerator()
    result = get_fee_on_amount(min_fee, amount, has_referral=False)
"""

from bonding_curve.fees.base_fee import (
    BaseFeeHandler,
    FeeRateLimiter,
    FeeScheduler,
    get_base_fee_handler,
    get_base_fee_numerator_from_excluded_fee_amount,
    get_base_fee_numerator_from_included_fee_amount,
)
from bonding_curve.fees.dynamic_fee import get_variable_fee_numerator, is_dynamic_fee_enabled
from bonding_curve.fees.fee_math import (
    get_excluded_fee_amount,
    get_fee_mode,
    get_fee_on_amount,
    get_included_fee_amount,
    get_total_fee_numerator,
    get_total_fee_numerator_from_excluded_fee_amount,
    get_total_fee_numerator_from_included_fee_amount,
    split_fees,
)
from bonding_curve.fees.fee_scheduler import (
    get_base_fee_numerator_by_period,
    get_fee_scheduler_max_base_fee_numerator,
    get_fee_scheduler_min_base_fee_numerator,
    validate_fee_scheduler,
)
from bonding_curve.fees.rate_limiter import (
    get_checked_amounts,
    get_fee_numerator_from_excluded_amount,
    get_fee_numerator_from_included_amount,
    get_max_index,
    get_max_out_amount_with_min_base_fee,
    get_rate_limiter_excluded_fee_amount,
    is_rate_limiter_applied,
    validate_fee_rate_limiter,
)

__all__ = [
    # Strategies
    "BaseFeeHandler",
    "FeeRateLimiter",
    "FeeScheduler",
    "get_base_fee_handler",
    "get_base_fee_numerator_from_excluded_fee_amount",
    "get_base_fee_numerator_from_included_fee_amount",
    # Fee scheduler
    "get_base_fee_numerator_by_period",
    "get_fee_scheduler_max_base_fee_numerator",
    "get_fee_scheduler_min_base_fee_numerator",
    "validate_fee_scheduler",
    # Rate limiter
    "get_checked_amounts",
    "get_fee_numerator_from_excluded_amount",
    "get_fee_numerator_from_included_amount",
    "get_max_index",
    "get_max_out_amount_with_min_base_fee",
    "get_rate_limiter_excluded_fee_amount",
    "is_rate_limiter_applied",
    "validate_fee_rate_limiter",
    # Dynamic fee
    "get_variable_fee_numerator",
    "is_dynamic_fee_enabled",
    # Fee application
    "get_excluded_fee_amount",
    "get_fee_mode",
    "get_fee_on_amount",
    "get_included_fee_amount",
    "get_total_fee_numerator",
    "get_total_fee_numerator_from_excluded_fee_amount",
    "get_total_fee_numerator_from_included_fee_amount",
    "split_fees",
]
