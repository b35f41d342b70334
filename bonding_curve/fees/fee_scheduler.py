"""Time-based fee scheduler.

The base fee starts at the cliff fee numerator and steps down once per
period until number_of_period periods have elapsed. Linear mode subtracts a
fixed reduction each period; exponential mode multiplies by
(1 - reduction_factor / 10_000) each period.
"""

from __future__ import annotations

from bonding_curve.constants import MAX_BASIS_POINT, MAX_FEE_NUMERATOR, MIN_FEE_NUMERATOR, ONE_Q64
from bonding_curve.errors import InvalidFeeMode, MathError, MathOverflow
from bonding_curve.math.safe_math import pow_q64, sub
from bonding_curve.models.enums import BaseFeeMode


def get_fee_scheduler_max_base_fee_numerator(cliff_fee_numerator: int) -> int:
    """Highest fee the scheduler charges, at period zero."""
    return cliff_fee_numerator


def get_fee_scheduler_min_base_fee_numerator(
    cliff_fee_numerator: int,
    number_of_period: int,
    reduction_factor: int,
    mode: BaseFeeMode | int,
) -> int:
    """Lowest fee the scheduler charges, once every period has elapsed."""
    return get_base_fee_numerator_by_period(
        cliff_fee_numerator, number_of_period, number_of_period, reduction_factor, mode
    )


def get_fee_numerator_on_linear_fee_scheduler(
    cliff_fee_numerator: int, reduction_factor: int, period: int
) -> int:
    """cliff - period * reduction_factor.

    Raises:
        Underflow: If the reduction exceeds the cliff fee
    """
    return sub(cliff_fee_numerator, period * reduction_factor)


def get_fee_numerator_on_exponential_fee_scheduler(
    cliff_fee_numerator: int, reduction_factor: int, period: int
) -> int:
    """cliff * (1 - reduction_factor / 10_000) ** period, in Q64.64."""
    if period == 0:
        return cliff_fee_numerator

    bps = (reduction_factor << 64) // MAX_BASIS_POINT
    base = sub(ONE_Q64, bps)
    result = pow_q64(base, period, scaling=True)
    return (cliff_fee_numerator * result) // ONE_Q64


def get_base_fee_numerator_by_period(
    cliff_fee_numerator: int,
    number_of_period: int,
    period: int,
    reduction_factor: int,
    mode: BaseFeeMode | int,
) -> int:
    """Fee numerator after `period` periods, capped at number_of_period.

    Raises:
        MathOverflow: If the capped period does not fit in u16
        InvalidFeeMode: If mode is not a scheduler mode
    """
    period = min(period, number_of_period)
    if period > 0xFFFF:
        raise MathOverflow(f"Fee scheduler period {period} exceeds u16")

    if mode == BaseFeeMode.FEE_SCHEDULER_LINEAR:
        return get_fee_numerator_on_linear_fee_scheduler(
            cliff_fee_numerator, reduction_factor, period
        )
    if mode == BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL:
        return get_fee_numerator_on_exponential_fee_scheduler(
            cliff_fee_numerator, reduction_factor, period
        )
    raise InvalidFeeMode(f"Invalid fee scheduler mode: {mode}")


def get_base_fee_numerator(
    cliff_fee_numerator: int,
    number_of_period: int,
    period_frequency: int,
    reduction_factor: int,
    mode: BaseFeeMode | int,
    current_point: int,
    activation_point: int,
) -> int:
    """Fee numerator at current_point for a pool activated at activation_point.

    A zero period_frequency disables the schedule and the cliff fee applies.
    Points before activation count as period zero.
    """
    if period_frequency == 0:
        return cliff_fee_numerator

    period = max(current_point - activation_point, 0) // period_frequency
    return get_base_fee_numerator_by_period(
        cliff_fee_numerator, number_of_period, period, reduction_factor, mode
    )


def validate_fee_scheduler(
    number_of_period: int,
    period_frequency: int,
    reduction_factor: int,
    cliff_fee_numerator: int,
    mode: BaseFeeMode | int,
) -> bool:
    """Check a scheduler against the protocol's fee bounds.

    Either all of number_of_period, period_frequency and reduction_factor
    are zero (a flat fee) or none are, and the fee range over the whole
    schedule stays within [MIN_FEE_NUMERATOR, MAX_FEE_NUMERATOR].
    """
    if period_frequency != 0 or number_of_period != 0 or reduction_factor != 0:
        if number_of_period == 0 or period_frequency == 0 or reduction_factor == 0:
            return False

    try:
        min_fee_numerator = get_fee_scheduler_min_base_fee_numerator(
            cliff_fee_numerator, number_of_period, reduction_factor, mode
        )
    except (MathError, InvalidFeeMode):
        return False

    max_fee_numerator = get_fee_scheduler_max_base_fee_numerator(cliff_fee_numerator)
    return min_fee_numerator >= MIN_FEE_NUMERATOR and max_fee_numerator <= MAX_FEE_NUMERATOR
