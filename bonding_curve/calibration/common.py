"""Shared steps of curve calibration.

Price conversions, migration amounts, supply accounting over a curve and
the locked-liquidity schedule. Decimal arithmetic runs in the 78-digit
context; integer results are truncated toward zero.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from bonding_curve.config import DEFAULT_ENGINE_CONFIG
from bonding_curve.constants import (
    MAX_BASIS_POINT,
    MAX_SQRT_PRICE,
    MIN_SQRT_PRICE,
    ONE_Q64,
    SWAP_BUFFER_PERCENTAGE,
    U64_MAX,
    U128_MAX,
)
from bonding_curve.errors import InvalidConfiguration, InvalidCurve, MathOverflow
from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_quote,
    get_next_sqrt_price_from_input,
)
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    decimal_sqrt,
    div,
    div_round,
    to_decimal,
    truncate_to_int,
)
from bonding_curve.math.safe_math import Rounding
from bonding_curve.models.config_params import (
    LiquidityVestingInfoParameters,
    LockedVestingParameters,
)
from bonding_curve.models.enums import MigrationOption
from bonding_curve.models.pool import CurveSegment

# Prices


def get_sqrt_price_from_price(
    price: Decimal | float | str, token_base_decimal: int, token_quote_decimal: int
) -> int:
    """Convert a human price (quote per base) to a Q64.64 sqrt price.

    The price is first rescaled to base units:
    sqrt(price / 10^(base_decimal - quote_decimal)) * 2^64.
    """
    scale = Decimal(1).scaleb(token_base_decimal - token_quote_decimal)
    adjusted = div_round(
        to_decimal(price), scale, DEFAULT_ENGINE_CONFIG.price_decimal_places
    )
    sqrt_value = decimal_sqrt(adjusted)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return truncate_to_int(sqrt_value * ONE_Q64)


def get_sqrt_price_from_market_cap(
    market_cap: Decimal | float,
    total_supply: int,
    token_base_decimal: int,
    token_quote_decimal: int,
) -> int:
    """Sqrt price at which total_supply whole tokens are worth market_cap.

    Raises:
        InvalidConfiguration: If total_supply is zero
    """
    if total_supply == 0:
        raise InvalidConfiguration(
            "total supply must be greater than zero", "total_token_supply", total_supply
        )
    price = div(to_decimal(market_cap), Decimal(total_supply))
    return get_sqrt_price_from_price(price, token_base_decimal, token_quote_decimal)


def create_sqrt_prices(
    prices: list[Decimal | float | str], token_base_decimal: int, token_quote_decimal: int
) -> list[int]:
    """Convert a list of human prices to sqrt prices, preserving order."""
    return [
        get_sqrt_price_from_price(price, token_base_decimal, token_quote_decimal)
        for price in prices
    ]


# Migration amounts


def get_migration_quote_amount(
    migration_market_cap: Decimal, percentage_supply_on_migration: Decimal
) -> Decimal:
    """Quote value of the supply share handed to the migrated pool."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        product = migration_market_cap * percentage_supply_on_migration
    return div(product, Decimal(100))


def get_migration_quote_amount_from_migration_quote_threshold(
    migration_quote_threshold: Decimal, migration_fee_percent: int
) -> Decimal:
    """Quote left for the migrated pool after the migration fee."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        product = migration_quote_threshold * (100 - migration_fee_percent)
    return div(product, Decimal(100))


def get_migration_quote_threshold_from_migration_quote_amount(
    migration_quote_amount: Decimal, migration_fee_percent: Decimal | int
) -> Decimal:
    """Inverse of get_migration_quote_amount_from_migration_quote_threshold."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        numerator = migration_quote_amount * 100
        denominator = 100 - to_decimal(migration_fee_percent)
    return div(numerator, denominator)


def get_migration_base_token(
    migration_quote_amount: int, sqrt_migration_price: int, migration_option: int
) -> int:
    """Base tokens deposited next to migration_quote_amount at migration.

    DAMM v1 pools take ceil(quote * 2^128 / sqrt_price^2). DAMM v2 pools
    take the base side of a full-range position holding the quote amount.

    Raises:
        InvalidConfiguration: If migration_option is unknown
    """
    if migration_option == MigrationOption.MET_DAMM:
        price = sqrt_migration_price * sqrt_migration_price
        quote = migration_quote_amount << 128
        return -(-quote // price)
    if migration_option == MigrationOption.MET_DAMM_V2:
        liquidity = get_initial_liquidity_from_delta_quote(
            migration_quote_amount, MIN_SQRT_PRICE, sqrt_migration_price
        )
        return get_delta_amount_base_unsigned(
            sqrt_migration_price, MAX_SQRT_PRICE, liquidity, Rounding.UP
        )
    raise InvalidConfiguration(
        f"Invalid migration option: {migration_option}", "migration_option", migration_option
    )


# Supply accounting over a curve


def get_migration_threshold_price(
    migration_threshold: int, sqrt_start_price: int, curve: list[CurveSegment]
) -> int:
    """Sqrt price reached once migration_threshold quote has been paid in.

    Raises:
        InvalidCurve: If the curve is empty or cannot absorb the threshold
    """
    if not curve:
        raise InvalidCurve("Curve is empty")

    next_sqrt_price = sqrt_start_price
    total_amount = get_delta_amount_quote_unsigned(
        next_sqrt_price, curve[0].sqrt_price, curve[0].liquidity, Rounding.UP
    )
    if total_amount > migration_threshold:
        return get_next_sqrt_price_from_input(
            next_sqrt_price, curve[0].liquidity, migration_threshold, False
        )

    amount_left = migration_threshold - total_amount
    next_sqrt_price = curve[0].sqrt_price
    for segment in curve[1:]:
        max_amount = get_delta_amount_quote_unsigned(
            next_sqrt_price, segment.sqrt_price, segment.liquidity, Rounding.UP
        )
        if max_amount > amount_left:
            next_sqrt_price = get_next_sqrt_price_from_input(
                next_sqrt_price, segment.liquidity, amount_left, False
            )
            amount_left = 0
            break
        amount_left -= max_amount
        next_sqrt_price = segment.sqrt_price

    if amount_left != 0:
        raise InvalidCurve(f"Not enough liquidity: {amount_left} quote left past the curve")
    return next_sqrt_price


def get_base_token_for_swap(
    sqrt_start_price: int, sqrt_migration_price: int, curve: list[CurveSegment]
) -> int:
    """Base tokens sold along the curve between the start and migration prices."""
    total = 0
    lower = sqrt_start_price
    for segment in curve:
        if segment.sqrt_price > sqrt_migration_price:
            total += get_delta_amount_base_unsigned(
                lower, sqrt_migration_price, segment.liquidity, Rounding.UP
            )
            break
        total += get_delta_amount_base_unsigned(
            lower, segment.sqrt_price, segment.liquidity, Rounding.UP
        )
        lower = segment.sqrt_price
    return total


def get_swap_amount_with_buffer(
    swap_base_amount: int, sqrt_start_price: int, curve: list[CurveSegment]
) -> int:
    """swap_base_amount plus a 25% buffer, capped at what the curve can sell."""
    buffered = swap_base_amount + swap_base_amount * SWAP_BUFFER_PERCENTAGE // 100
    max_base_amount_on_curve = get_base_token_for_swap(sqrt_start_price, MAX_SQRT_PRICE, curve)
    return min(buffered, max_base_amount_on_curve)


def get_total_vesting_amount(locked_vesting: LockedVestingParameters) -> int:
    return (
        locked_vesting.amount_per_period * locked_vesting.number_of_period
        + locked_vesting.cliff_unlock_amount
    )


def get_total_token_supply(
    swap_base_amount: int, migration_base_threshold: int, locked_vesting: LockedVestingParameters
) -> int:
    """Circulating plus locked supply.

    Raises:
        MathOverflow: If the total exceeds u64
    """
    total = swap_base_amount + migration_base_threshold + get_total_vesting_amount(locked_vesting)
    if total > U64_MAX:
        raise MathOverflow(f"Total token supply {total} does not fit in u64")
    return total


def get_total_supply_from_curve(
    migration_quote_threshold: int,
    sqrt_start_price: int,
    curve: list[CurveSegment],
    locked_vesting: LockedVestingParameters,
    migration_option: int,
    leftover: int,
    migration_fee_percent: int,
) -> int:
    """Minimum base supply, with swap buffer, that the curve needs.

    Sum of the buffered swap amount, the base deposited at migration, the
    locked vesting and the leftover.
    """
    sqrt_migration_price = get_migration_threshold_price(
        migration_quote_threshold, sqrt_start_price, curve
    )
    swap_base_amount = get_base_token_for_swap(sqrt_start_price, sqrt_migration_price, curve)
    swap_base_amount_buffer = get_swap_amount_with_buffer(
        swap_base_amount, sqrt_start_price, curve
    )
    migration_quote_amount = get_migration_quote_amount_from_migration_quote_threshold(
        Decimal(migration_quote_threshold), migration_fee_percent
    )
    migration_base_amount = get_migration_base_token(
        truncate_to_int(migration_quote_amount), sqrt_migration_price, migration_option
    )
    return (
        swap_base_amount_buffer
        + migration_base_amount
        + get_total_vesting_amount(locked_vesting)
        + leftover
    )


# Supply percentages


def _share_of_supply(amount: int, total_token_supply: int) -> Decimal:
    if total_token_supply == 0:
        raise InvalidConfiguration(
            "total supply must be greater than zero", "total_token_supply", total_token_supply
        )
    return div(Decimal(amount * 100), Decimal(total_token_supply))


def get_percentage_supply_on_migration(
    initial_market_cap: Decimal,
    migration_market_cap: Decimal,
    locked_vesting: LockedVestingParameters,
    total_leftover: int,
    total_token_supply: int,
) -> Decimal:
    """Share of supply (in percent) deposited at migration for a market-cap pair.

    With r = sqrt(initial_mc / migration_mc), v the vesting share and l the
    leftover share: (100 * r - (v + l) * r) / (1 + r).
    """
    sqrt_ratio = decimal_sqrt(div(initial_market_cap, migration_market_cap))
    vesting_percentage = _share_of_supply(
        get_total_vesting_amount(locked_vesting), total_token_supply
    )
    leftover_percentage = _share_of_supply(total_leftover, total_token_supply)

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        numerator = 100 * sqrt_ratio - (vesting_percentage + leftover_percentage) * sqrt_ratio
        denominator = 1 + sqrt_ratio
    return div(numerator, denominator)


def calculate_adjusted_percentage_supply_on_migration(
    initial_market_cap: Decimal,
    migration_market_cap: Decimal,
    migration_fee_percentage: int,
    locked_vesting: LockedVestingParameters,
    total_leftover: int,
    total_token_supply: int,
) -> Decimal:
    """Migration supply share when a migration fee is taken from the quote.

    (r * (1 - f) * (100 - v - l)) / (1 + r * (1 - f)) with f the fee as a
    fraction.
    """
    fee_fraction = div(Decimal(migration_fee_percentage), Decimal(100))
    vesting_percentage = _share_of_supply(
        get_total_vesting_amount(locked_vesting), total_token_supply
    )
    leftover_percentage = _share_of_supply(total_leftover, total_token_supply)
    required_ratio = decimal_sqrt(div(initial_market_cap, migration_market_cap))

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        one_minus_f = 1 - fee_fraction
        available_percentage = 100 - vesting_percentage - leftover_percentage
        numerator = required_ratio * one_minus_f * available_percentage
        denominator = 1 + required_ratio * one_minus_f
    return div(numerator, denominator)


# Locked liquidity


def get_vesting_locked_liquidity_bps_at_n_seconds(
    vesting_info: LiquidityVestingInfoParameters | None, n_seconds: int
) -> int:
    """Share of total LP liquidity, in bps, still locked by a vesting schedule.

    Evaluated against a notional total of U128_MAX so rounding matches the
    on-chain check.
    """
    if vesting_info is None or vesting_info.vesting_percentage == 0:
        return 0

    total_liquidity = U128_MAX
    total_vested_liquidity = total_liquidity * vesting_info.vesting_percentage // 100
    number_of_periods = vesting_info.number_of_periods
    frequency = vesting_info.frequency
    cliff_duration = vesting_info.cliff_duration_from_migration_time

    total_bps_after_cliff = vesting_info.bps_per_period * number_of_periods
    total_vesting_liquidity_after_cliff = (
        total_vested_liquidity * total_bps_after_cliff // MAX_BASIS_POINT
    )

    liquidity_per_period = 0
    if number_of_periods > 0:
        liquidity_per_period = total_vesting_liquidity_after_cliff // number_of_periods
    if liquidity_per_period == 0:
        # Whole vested amount unlocks at the cliff
        number_of_periods = 0
        frequency = 0
        if cliff_duration == 0:
            cliff_duration = 1

    cliff_unlock_liquidity = total_vested_liquidity - liquidity_per_period * number_of_periods

    unlocked = 0
    if n_seconds >= cliff_duration:
        unlocked = cliff_unlock_liquidity
        if frequency > 0 and number_of_periods > 0:
            periods_elapsed = min((n_seconds - cliff_duration) // frequency, number_of_periods)
            unlocked += liquidity_per_period * periods_elapsed

    locked = total_vested_liquidity - unlocked
    return locked * MAX_BASIS_POINT // total_liquidity


def calculate_locked_liquidity_bps_at_time(
    partner_permanent_locked_liquidity_percentage: int,
    creator_permanent_locked_liquidity_percentage: int,
    partner_liquidity_vesting_info: LiquidityVestingInfoParameters | None,
    creator_liquidity_vesting_info: LiquidityVestingInfoParameters | None,
    elapsed_seconds: int,
) -> int:
    """Total LP liquidity, in bps, locked elapsed_seconds after migration."""
    partner_vested = get_vesting_locked_liquidity_bps_at_n_seconds(
        partner_liquidity_vesting_info, elapsed_seconds
    )
    creator_vested = get_vesting_locked_liquidity_bps_at_n_seconds(
        creator_liquidity_vesting_info, elapsed_seconds
    )
    return (
        partner_vested
        + partner_permanent_locked_liquidity_percentage * 100
        + creator_vested
        + creator_permanent_locked_liquidity_percentage * 100
    )
