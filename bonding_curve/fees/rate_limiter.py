"""Volume-based rate limiter fee.

Inside the limiter window, quote-to-base trades pay the cliff fee on the
first reference_amount of input and an extra fee_increment_bps on each
further reference_amount band, up to MAX_FEE_NUMERATOR. The fee for a
trade is the blended rate over all the bands it touches.

Notation used below, all in fee-numerator units:

    c   cliff fee numerator
    i   fee increment numerator
    x0  reference amount (band width)
    d   FEE_DENOMINATOR
"""

from __future__ import annotations

from bonding_curve.constants import (
    FEE_DENOMINATOR,
    MAX_FEE_NUMERATOR,
    MAX_RATE_LIMITER_DURATION_IN_SECONDS,
    MAX_RATE_LIMITER_DURATION_IN_SLOTS,
    MIN_FEE_NUMERATOR,
    U64_MAX,
)
from bonding_curve.errors import DivisionByZero, InvalidState, MathError, MathOverflow
from bonding_curve.math.safe_math import Rounding, isqrt, mul_div, to_numerator
from bonding_curve.models.enums import ActivationType, CollectFeeMode, TradeDirection


def is_zero_rate_limiter(
    reference_amount: int, max_limiter_duration: int, fee_increment_bps: int
) -> bool:
    """True when the limiter is switched off (all parameters zero)."""
    return reference_amount == 0 and max_limiter_duration == 0 and fee_increment_bps == 0


def is_non_zero_rate_limiter(
    reference_amount: int, max_limiter_duration: int, fee_increment_bps: int
) -> bool:
    """True when every limiter parameter is set."""
    return reference_amount != 0 and max_limiter_duration != 0 and fee_increment_bps != 0


def is_rate_limiter_applied(
    current_point: int,
    activation_point: int,
    trade_direction: TradeDirection,
    max_limiter_duration: int,
    reference_amount: int,
    fee_increment_bps: int,
) -> bool:
    """Whether the stepped fee applies to this trade.

    Only quote-to-base trades within max_limiter_duration points of
    activation are limited.
    """
    if is_zero_rate_limiter(reference_amount, max_limiter_duration, fee_increment_bps):
        return False
    if trade_direction == TradeDirection.BASE_TO_QUOTE:
        return False
    return current_point <= activation_point + max_limiter_duration


def get_max_index(cliff_fee_numerator: int, fee_increment_bps: int) -> int:
    """Number of full increments before the fee reaches MAX_FEE_NUMERATOR.

    Raises:
        InvalidState: If the cliff fee already exceeds the maximum
        DivisionByZero: If the increment rounds to a zero numerator
    """
    if cliff_fee_numerator > MAX_FEE_NUMERATOR:
        raise InvalidState("Cliff fee numerator exceeds maximum fee numerator")
    delta_numerator = MAX_FEE_NUMERATOR - cliff_fee_numerator
    fee_increment_numerator = to_numerator(fee_increment_bps, FEE_DENOMINATOR)
    if fee_increment_numerator == 0:
        raise DivisionByZero("Fee increment numerator cannot be zero")
    return delta_numerator // fee_increment_numerator


def get_fee_numerator_from_included_amount(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    included_fee_amount: int,
) -> int:
    """Blended fee numerator for a fee-inclusive input amount.

    With a = whole bands past the first and b = remainder in the next band,
    the total fee numerator is

        x0 * (c + c*a + i*a*(a+1)/2) + b * (c + i*(a+1))

    Bands past max_index are charged MAX_FEE_NUMERATOR.
    """
    if included_fee_amount <= reference_amount:
        return cliff_fee_numerator
    if reference_amount == 0:
        raise DivisionByZero("Rate limiter reference amount is zero")

    c = cliff_fee_numerator
    x0 = reference_amount
    a, b = divmod(included_fee_amount - reference_amount, x0)
    max_index = get_max_index(cliff_fee_numerator, fee_increment_bps)
    i = to_numerator(fee_increment_bps, FEE_DENOMINATOR)

    if a < max_index:
        numerator_1 = c + c * a + i * a * (a + 1) // 2
        numerator_2 = c + i * (a + 1)
        trading_fee_numerator = x0 * numerator_1 + b * numerator_2
    else:
        numerator_1 = c + c * max_index + i * max_index * (max_index + 1) // 2
        left_amount = (a - max_index) * x0 + b
        trading_fee_numerator = x0 * numerator_1 + left_amount * MAX_FEE_NUMERATOR

    trading_fee = (trading_fee_numerator + FEE_DENOMINATOR - 1) // FEE_DENOMINATOR
    return mul_div(trading_fee, FEE_DENOMINATOR, included_fee_amount, Rounding.UP)


def get_rate_limiter_excluded_fee_amount(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    included_fee_amount: int,
) -> int:
    """Net amount left after charging the limiter fee on included_fee_amount."""
    fee_numerator = get_fee_numerator_from_included_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, included_fee_amount
    )
    trading_fee = mul_div(included_fee_amount, fee_numerator, FEE_DENOMINATOR, Rounding.UP)
    return included_fee_amount - trading_fee


def get_max_out_amount_with_min_base_fee(
    cliff_fee_numerator: int, reference_amount: int, fee_increment_bps: int
) -> int:
    """Largest net amount that still pays only the cliff fee."""
    return get_rate_limiter_excluded_fee_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, reference_amount
    )


def get_checked_amounts(
    cliff_fee_numerator: int, reference_amount: int, fee_increment_bps: int
) -> tuple[int, int, bool]:
    """Checkpoint where the fee reaches its cap.

    Returns:
        (checked_excluded_amount, checked_included_amount, is_overflow).
        When the cap lies beyond u64 the checkpoint is taken at U64_MAX and
        is_overflow is True.
    """
    max_index = get_max_index(cliff_fee_numerator, fee_increment_bps)
    max_index_input = (max_index + 1) * reference_amount
    if max_index_input <= U64_MAX:
        checked_excluded = get_rate_limiter_excluded_fee_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, max_index_input
        )
        return checked_excluded, max_index_input, False

    checked_excluded = get_rate_limiter_excluded_fee_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, U64_MAX
    )
    return checked_excluded, U64_MAX, True


def get_fee_numerator_from_excluded_amount(
    cliff_fee_numerator: int,
    reference_amount: int,
    fee_increment_bps: int,
    excluded_fee_amount: int,
) -> int:
    """Blended fee numerator for a fee-exclusive (net) amount.

    Below the cap the included amount solves the quadratic

        i*x^2 - (2*d*x0 + i*x0 - 2*c*x0)*x + 2*ex*d*x0 = 0

    taking the smaller root, then the partial band is grossed up at its
    marginal rate. Above the cap the remainder is grossed up at
    MAX_FEE_NUMERATOR.

    Raises:
        MathOverflow: If the amount lies beyond the u64 checkpoint
        InvalidState: If the solved rate falls below the cliff fee
    """
    excluded_fee_reference_amount = get_rate_limiter_excluded_fee_amount(
        cliff_fee_numerator, reference_amount, fee_increment_bps, reference_amount
    )
    if excluded_fee_amount <= excluded_fee_reference_amount:
        return cliff_fee_numerator

    checked_excluded, checked_included, is_overflow = get_checked_amounts(
        cliff_fee_numerator, reference_amount, fee_increment_bps
    )

    if excluded_fee_amount == checked_excluded:
        return get_fee_numerator_from_included_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, checked_included
        )

    if excluded_fee_amount < checked_excluded:
        i = to_numerator(fee_increment_bps, FEE_DENOMINATOR)
        x0 = reference_amount
        d = FEE_DENOMINATOR
        c = cliff_fee_numerator
        ex = excluded_fee_amount

        x = i
        y = 2 * d * x0 + i * x0 - 2 * c * x0
        z = 2 * ex * d * x0

        discriminant = y * y - 4 * x * z
        included_fee_amount = (y - isqrt(discriminant)) // (2 * x)

        a_plus_one = included_fee_amount // x0
        first_excluded = get_rate_limiter_excluded_fee_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, included_fee_amount
        )
        excluded_remaining = excluded_fee_amount - first_excluded
        remaining_fee_numerator = c + i * a_plus_one
        included_remaining = mul_div(
            excluded_remaining, FEE_DENOMINATOR, FEE_DENOMINATOR - remaining_fee_numerator,
            Rounding.UP,
        )
        included_fee_amount += included_remaining
    else:
        if is_overflow:
            raise MathOverflow("Excluded amount exceeds the u64 rate limiter checkpoint")
        excluded_remaining = excluded_fee_amount - checked_excluded
        included_remaining = mul_div(
            excluded_remaining, FEE_DENOMINATOR, FEE_DENOMINATOR - MAX_FEE_NUMERATOR, Rounding.UP
        )
        included_fee_amount = included_remaining + checked_included

    trading_fee = included_fee_amount - excluded_fee_amount
    fee_numerator = mul_div(trading_fee, FEE_DENOMINATOR, included_fee_amount, Rounding.UP)
    if fee_numerator < cliff_fee_numerator:
        raise InvalidState("Solved fee numerator is below the cliff fee numerator")
    return fee_numerator


def get_rate_limiter_min_base_fee_numerator(cliff_fee_numerator: int) -> int:
    return cliff_fee_numerator


def validate_fee_rate_limiter(
    cliff_fee_numerator: int,
    fee_increment_bps: int,
    max_limiter_duration: int,
    reference_amount: int,
    collect_fee_mode: CollectFeeMode | int,
    activation_type: ActivationType | int,
) -> bool:
    """Check a rate limiter against the protocol's fee bounds.

    The limiter only works with quote-token fee collection. Its parameters
    are either all zero or all set, the window is within the activation
    type's limit, and the fee stays within [MIN_FEE_NUMERATOR,
    MAX_FEE_NUMERATOR] from the first band up to u64 input.
    """
    if collect_fee_mode != CollectFeeMode.QUOTE_TOKEN:
        return False
    if is_zero_rate_limiter(reference_amount, max_limiter_duration, fee_increment_bps):
        return True
    if not is_non_zero_rate_limiter(reference_amount, max_limiter_duration, fee_increment_bps):
        return False

    if activation_type == ActivationType.SLOT:
        max_limiter_duration_limit = MAX_RATE_LIMITER_DURATION_IN_SLOTS
    else:
        max_limiter_duration_limit = MAX_RATE_LIMITER_DURATION_IN_SECONDS
    if max_limiter_duration > max_limiter_duration_limit:
        return False

    fee_increment_numerator = to_numerator(fee_increment_bps, FEE_DENOMINATOR)
    if fee_increment_numerator >= FEE_DENOMINATOR:
        return False
    if cliff_fee_numerator < MIN_FEE_NUMERATOR or cliff_fee_numerator > MAX_FEE_NUMERATOR:
        return False

    try:
        min_fee_numerator = get_fee_numerator_from_included_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, 0
        )
        max_fee_numerator = get_fee_numerator_from_included_amount(
            cliff_fee_numerator, reference_amount, fee_increment_bps, (1 << 63) - 1
        )
    except (MathError, InvalidState):
        return False
    return min_fee_numerator >= MIN_FEE_NUMERATOR and max_fee_numerator <= MAX_FEE_NUMERATOR
