"""Curve calibration strategies.

Each builder turns business targets (supply, market caps, supply share at
migration) into a complete ConfigParameters. They share the same shape:

1. Derive fees, vesting, pool creation fee and migrated pool fee.
2. Derive the migration sqrt price and the base tokens sold on the curve.
3. Solve the curve body for the strategy.
4. Replay supply accounting over the curve and check it fits total supply.
5. Assemble the config.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal

import structlog

from bonding_curve.calibration.common import (
    calculate_adjusted_percentage_supply_on_migration,
    get_base_token_for_swap,
    get_migration_base_token,
    get_migration_quote_amount,
    get_migration_quote_amount_from_migration_quote_threshold,
    get_migration_quote_threshold_from_migration_quote_amount,
    get_percentage_supply_on_migration,
    get_sqrt_price_from_market_cap,
    get_sqrt_price_from_price,
    get_swap_amount_with_buffer,
    get_total_supply_from_curve,
    get_total_vesting_amount,
)
from bonding_curve.calibration.params import (
    build_migrated_pool_market_cap_fee_scheduler_params,
    get_base_fee_bps_for_dynamic_fee,
    get_base_fee_params,
    get_dynamic_fee_params,
    get_liquidity_vesting_info_from_params,
    get_locked_vesting_params,
    get_migrated_pool_fee_params,
)
from bonding_curve.config import DEFAULT_ENGINE_CONFIG
from bonding_curve.constants import MAX_CURVE_POINT, MAX_SQRT_PRICE
from bonding_curve.errors import (
    InvalidConfiguration,
    InvalidCurve,
    NoValidCurve,
    SupplyOverrun,
)
from bonding_curve.math.curve import get_initial_liquidity_from_delta_base, get_liquidity
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    decimal_root_pow2,
    decimal_sqrt,
    div,
    div_round,
    round_significant,
    to_decimal,
    to_lamports,
    truncate_to_int,
)
from bonding_curve.math.safe_math import to_u64
from bonding_curve.models.build_params import (
    BuildCurveBaseParams,
    BuildCurveParams,
    BuildCurveWithCustomSqrtPricesParams,
    BuildCurveWithLiquidityWeightsParams,
    BuildCurveWithMarketCapParams,
    BuildCurveWithMidPriceParams,
    BuildCurveWithTwoSegmentsParams,
)
from bonding_curve.models.config_params import (
    BaseFeeParameters,
    ConfigParameters,
    LiquidityVestingInfoParameters,
    LockedVestingParameters,
    MigratedPoolFee,
    MigrationFee,
    PoolFeeParameters,
    TokenSupplyParams,
)
from bonding_curve.models.enums import DammV2BaseFeeMode
from bonding_curve.models.pool import CurveSegment

logger = structlog.get_logger()

# Pool creation fee is quoted in whole SOL
_SOL_DECIMALS = 9


@dataclass(frozen=True)
class _SharedParameters:
    """Parameters every strategy derives the same way."""

    base_fee: BaseFeeParameters
    locked_vesting: LockedVestingParameters
    partner_liquidity_vesting_info: LiquidityVestingInfoParameters
    creator_liquidity_vesting_info: LiquidityVestingInfoParameters
    pool_creation_fee: int
    migrated_pool_fee: MigratedPoolFee
    total_supply: int
    total_leftover: int

    @property
    def total_vesting_amount(self) -> int:
        return get_total_vesting_amount(self.locked_vesting)


def _derive_locked_vesting(params: BuildCurveBaseParams) -> LockedVestingParameters:
    vesting = params.locked_vesting_params
    return get_locked_vesting_params(
        vesting.total_locked_vesting_amount,
        vesting.number_of_vesting_period,
        vesting.cliff_unlock_amount,
        vesting.total_vesting_duration,
        vesting.cliff_duration_from_migration_time,
        params.token_base_decimal,
    )


def _derive_shared(params: BuildCurveBaseParams) -> _SharedParameters:
    return _SharedParameters(
        base_fee=get_base_fee_params(
            params.base_fee_params, params.token_quote_decimal, params.activation_type
        ),
        locked_vesting=_derive_locked_vesting(params),
        partner_liquidity_vesting_info=get_liquidity_vesting_info_from_params(
            params.partner_liquidity_vesting_info_params
        ),
        creator_liquidity_vesting_info=get_liquidity_vesting_info_from_params(
            params.creator_liquidity_vesting_info_params
        ),
        pool_creation_fee=to_u64(to_lamports(params.pool_creation_fee, _SOL_DECIMALS)),
        migrated_pool_fee=get_migrated_pool_fee_params(
            params.migration_option, params.migration_fee_option, params.migrated_pool_fee
        ),
        total_supply=to_lamports(params.total_token_supply, params.token_base_decimal),
        total_leftover=to_lamports(params.leftover, params.token_base_decimal),
    )


def _check_supply(total_dynamic_supply: int, total_supply: int, total_leftover: int) -> None:
    """The curve may overdraw total supply only by less than the leftover."""
    if total_dynamic_supply > total_supply:
        overrun = total_dynamic_supply - total_supply
        if overrun >= total_leftover:
            raise SupplyOverrun(
                f"Curve needs {total_dynamic_supply} base tokens but total supply is "
                f"{total_supply}; overrun {overrun} is not covered by leftover {total_leftover}"
            )


def _assemble_config(
    strategy: str,
    params: BuildCurveBaseParams,
    shared: _SharedParameters,
    sqrt_start_price: int,
    curve: list[CurveSegment],
    migration_quote_threshold: int,
) -> ConfigParameters:
    pool_fees = PoolFeeParameters(base_fee=shared.base_fee)
    if params.dynamic_fee_enabled:
        pool_fees = PoolFeeParameters(
            base_fee=shared.base_fee,
            dynamic_fee=get_dynamic_fee_params(
                get_base_fee_bps_for_dynamic_fee(params.base_fee_params)
            ),
        )

    migrated_pool_base_fee_mode = params.migrated_pool_base_fee_mode
    if migrated_pool_base_fee_mode is None:
        migrated_pool_base_fee_mode = DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR

    total_supply = to_u64(shared.total_supply)
    config = ConfigParameters(
        pool_fees=pool_fees,
        collect_fee_mode=int(params.collect_fee_mode),
        migration_option=int(params.migration_option),
        activation_type=int(params.activation_type),
        token_type=int(params.token_type),
        token_decimal=int(params.token_base_decimal),
        partner_liquidity_percentage=params.partner_liquidity_percentage,
        partner_permanent_locked_liquidity_percentage=(
            params.partner_permanent_locked_liquidity_percentage
        ),
        creator_liquidity_percentage=params.creator_liquidity_percentage,
        creator_permanent_locked_liquidity_percentage=(
            params.creator_permanent_locked_liquidity_percentage
        ),
        migration_quote_threshold=to_u64(migration_quote_threshold),
        sqrt_start_price=sqrt_start_price,
        locked_vesting=shared.locked_vesting,
        migration_fee_option=int(params.migration_fee_option),
        token_supply=TokenSupplyParams(
            pre_migration_token_supply=total_supply,
            post_migration_token_supply=total_supply,
        ),
        creator_trading_fee_percentage=params.creator_trading_fee_percentage,
        token_update_authority=params.token_update_authority,
        migration_fee=MigrationFee(
            fee_percentage=params.migration_fee.fee_percentage,
            creator_fee_percentage=params.migration_fee.creator_fee_percentage,
        ),
        migrated_pool_fee=shared.migrated_pool_fee,
        pool_creation_fee=shared.pool_creation_fee,
        partner_liquidity_vesting_info=shared.partner_liquidity_vesting_info,
        creator_liquidity_vesting_info=shared.creator_liquidity_vesting_info,
        migrated_pool_base_fee_mode=int(migrated_pool_base_fee_mode),
        migrated_pool_market_cap_fee_scheduler_params=(
            build_migrated_pool_market_cap_fee_scheduler_params(
                params.migrated_pool_market_cap_fee_scheduler_params,
                params.base_fee_params,
                params.migrated_pool_base_fee_mode,
            )
        ),
        enable_first_swap_with_min_fee=params.enable_first_swap_with_min_fee,
        curve=curve,
    )

    logger.info(
        "curve_built",
        strategy=strategy,
        segments=len(curve),
        sqrt_start_price=sqrt_start_price,
        migration_quote_threshold=migration_quote_threshold,
        total_supply=total_supply,
    )
    return config


# Curve bodies


def get_first_curve(
    migration_sqrt_price: int,
    migration_base_amount: int,
    swap_amount: int,
    migration_quote_threshold: int,
    migration_fee_percent: int,
) -> tuple[int, list[CurveSegment]]:
    """Single segment ending at migration_sqrt_price.

    The start price is chosen so that selling swap_amount (net of the
    migration fee) and depositing migration_base_amount happen at consistent
    prices: sqrt_start = sqrt_migration * migration_base / (swap * (1 - f)).

    Returns:
        (sqrt_start_price, curve)

    Raises:
        InvalidCurve: If no base tokens are left to sell on the curve
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        scaled_swap_amount = Decimal(swap_amount) * (100 - migration_fee_percent)
    denominator = div(scaled_swap_amount, Decimal(100))
    if denominator <= 0:
        raise InvalidCurve(f"Swap amount must be positive, got {swap_amount}")

    sqrt_start_price = truncate_to_int(
        div(Decimal(migration_sqrt_price * migration_base_amount), denominator)
    )
    liquidity = get_liquidity(
        swap_amount, migration_quote_threshold, sqrt_start_price, migration_sqrt_price
    )
    return sqrt_start_price, [
        CurveSegment(sqrt_price=migration_sqrt_price, liquidity=liquidity)
    ]


def get_two_curve(
    migration_sqrt_price: int,
    mid_sqrt_price: int,
    initial_sqrt_price: int,
    swap_amount: int,
    migration_quote_threshold: int,
) -> list[CurveSegment] | None:
    """Two segments split at mid_sqrt_price.

    Solves for (l0, l1) so that the curve sells exactly swap_amount base and
    collects exactly migration_quote_threshold quote:

        l0 * (1/p0 - 1/p1) + l1 * (1/p1 - 1/p2) = swap_amount
        l0 * (p1 - p0)     + l1 * (p2 - p1)     = threshold * 2^128

    Returns:
        The curve, or None when the system is singular or a liquidity
        comes out negative
    """
    places = DEFAULT_ENGINE_CONFIG.two_curve_reciprocal_places
    one = Decimal(1)
    p0 = Decimal(initial_sqrt_price)
    p1 = Decimal(mid_sqrt_price)
    p2 = Decimal(migration_sqrt_price)
    c1 = Decimal(swap_amount)
    c2 = round_significant(
        Decimal(migration_quote_threshold << 128), DEFAULT_ENGINE_CONFIG.significant_digits
    )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        a1 = div_round(one, p0, places) - div_round(one, p1, places)
        b1 = div_round(one, p1, places) - div_round(one, p2, places)
        a2 = p1 - p0
        b2 = p2 - p1

        denom0 = a1 * b2 - a2 * b1
        denom1 = b1 * a2 - b2 * a1
        if denom0 == 0 or denom1 == 0:
            return None
        numerator0 = c1 * b2 - c2 * b1
        numerator1 = c1 * a2 - c2 * a1

    l0 = div(numerator0, denom0)
    l1 = div(numerator1, denom1)
    if l0 < 0 or l1 < 0:
        return None

    return [
        CurveSegment(sqrt_price=mid_sqrt_price, liquidity=truncate_to_int(l0)),
        CurveSegment(sqrt_price=migration_sqrt_price, liquidity=truncate_to_int(l1)),
    ]


def get_mid_sqrt_price_candidates(migration_sqrt_price: int, initial_sqrt_price: int) -> list[int]:
    """Midpoints tried for a two-segment curve, in order.

    The 1/4, 3/4 and 1/2 geometric points between the initial and migration
    sqrt prices.
    """
    quarter = decimal_root_pow2(Decimal(initial_sqrt_price**3 * migration_sqrt_price), 2)
    three_quarter = decimal_root_pow2(Decimal(initial_sqrt_price * migration_sqrt_price**3), 2)
    half = decimal_sqrt(Decimal(migration_sqrt_price * initial_sqrt_price))
    return [truncate_to_int(quarter), truncate_to_int(three_quarter), truncate_to_int(half)]


def _solve_liquidity_scalar(
    sqrt_prices: list[int],
    weights: list[Decimal],
    max_sqrt_price: int,
    migration_fee_percent: int,
    swap_and_migration_amount: int,
) -> Decimal:
    """Scalar l1 such that band i gets weights[i] * l1 of liquidity.

    Band i between p_(i-1) and p_i contributes
    (p_i - p_(i-1)) / (p_i * p_(i-1)) base sold on the curve plus
    (p_i - p_(i-1)) * (1 - f) / p_max^2 base deposited at migration, per unit
    of liquidity.

    Raises:
        InvalidConfiguration: If the weighted factors sum to zero
    """
    places = DEFAULT_ENGINE_CONFIG.weight_decimal_places
    migration_fee_factor = div(Decimal(100 - migration_fee_percent), Decimal(100))
    p_max = Decimal(max_sqrt_price)

    sum_factor = Decimal(0)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        for i, weight in enumerate(weights, start=1):
            upper = Decimal(sqrt_prices[i])
            lower = Decimal(sqrt_prices[i - 1])
            w1 = div_round(upper - lower, upper * lower, places)
            w2 = div_round((upper - lower) * migration_fee_factor, p_max * p_max, places)
            sum_factor += weight * (w1 + w2)

    if sum_factor == 0:
        raise InvalidConfiguration("Liquidity weights sum to zero", "liquidity_weights")

    l1 = div(Decimal(swap_and_migration_amount), sum_factor)
    return round_significant(l1, DEFAULT_ENGINE_CONFIG.scalar_significant_digits)


def _weighted_migration_quote_threshold(
    params: BuildCurveBaseParams,
    swap_and_migration_amount: int,
    sqrt_start_price: int,
    max_sqrt_price: int,
    curve: list[CurveSegment],
) -> int:
    """Quote threshold implied by depositing the unsold base at max_sqrt_price."""
    swap_base_amount = get_base_token_for_swap(sqrt_start_price, max_sqrt_price, curve)
    swap_base_amount_buffer = get_swap_amount_with_buffer(
        swap_base_amount, sqrt_start_price, curve
    )
    migration_amount = swap_and_migration_amount - swap_base_amount_buffer
    if migration_amount < 0:
        raise SupplyOverrun(
            f"Buffered curve sale {swap_base_amount_buffer} exceeds available supply "
            f"{swap_and_migration_amount}"
        )
    migration_quote_amount = (migration_amount * max_sqrt_price * max_sqrt_price) >> 128
    migration_quote_threshold = get_migration_quote_threshold_from_migration_quote_amount(
        Decimal(migration_quote_amount), params.migration_fee.fee_percentage
    )
    return truncate_to_int(migration_quote_threshold)


# Strategies


def _build_curve_internal(
    strategy: str,
    params: BuildCurveBaseParams,
    percentage_supply_on_migration: Decimal,
    migration_quote_threshold: Decimal,
) -> ConfigParameters:
    if percentage_supply_on_migration <= 0:
        raise InvalidConfiguration(
            "percentage_supply_on_migration must be greater than zero",
            "percentage_supply_on_migration",
            percentage_supply_on_migration,
        )
    shared = _derive_shared(params)
    fee_percentage = params.migration_fee.fee_percentage

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        base_on_migration = Decimal(params.total_token_supply) * percentage_supply_on_migration
    migration_base_supply = div(base_on_migration, Decimal(100))

    migration_quote_amount = get_migration_quote_amount_from_migration_quote_threshold(
        migration_quote_threshold, fee_percentage
    )
    migration_price = div_round(
        migration_quote_amount, migration_base_supply, DEFAULT_ENGINE_CONFIG.price_decimal_places
    )
    migration_quote_threshold_in_lamport = to_lamports(
        migration_quote_threshold, params.token_quote_decimal
    )
    migration_sqrt_price = get_sqrt_price_from_price(
        migration_price, params.token_base_decimal, params.token_quote_decimal
    )
    migration_base_amount = get_migration_base_token(
        to_lamports(migration_quote_amount, params.token_quote_decimal),
        migration_sqrt_price,
        params.migration_option,
    )

    swap_amount = (
        shared.total_supply
        - migration_base_amount
        - shared.total_vesting_amount
        - shared.total_leftover
    )
    sqrt_start_price, curve = get_first_curve(
        migration_sqrt_price,
        migration_base_amount,
        swap_amount,
        migration_quote_threshold_in_lamport,
        fee_percentage,
    )

    total_dynamic_supply = get_total_supply_from_curve(
        migration_quote_threshold_in_lamport,
        sqrt_start_price,
        curve,
        shared.locked_vesting,
        params.migration_option,
        shared.total_leftover,
        fee_percentage,
    )
    # Remaining supply rests in a tail segment above the migration price.
    # Rounding can leave the replay a few units over total supply; no tail then.
    remaining_amount = shared.total_supply - total_dynamic_supply
    if remaining_amount > 0:
        last_liquidity = get_initial_liquidity_from_delta_base(
            remaining_amount, MAX_SQRT_PRICE, migration_sqrt_price
        )
        if last_liquidity != 0:
            curve.append(CurveSegment(sqrt_price=MAX_SQRT_PRICE, liquidity=last_liquidity))

    return _assemble_config(
        strategy, params, shared, sqrt_start_price, curve, migration_quote_threshold_in_lamport
    )


def build_curve(params: BuildCurveParams) -> ConfigParameters:
    """Single-segment curve from a supply share and a quote threshold.

    Args:
        params: Base parameters plus percentage_supply_on_migration (percent
            of total supply deposited at migration) and
            migration_quote_threshold (whole quote tokens)

    Raises:
        InvalidConfiguration: If a derived parameter is out of range
        CalibrationError: If the curve cannot be built within total supply
    """
    return _build_curve_internal(
        "single",
        params,
        to_decimal(params.percentage_supply_on_migration),
        to_decimal(params.migration_quote_threshold),
    )


def build_curve_with_market_cap(params: BuildCurveWithMarketCapParams) -> ConfigParameters:
    """Single-segment curve between an initial and a migration market cap.

    The migration supply share is solved so that the curve starts at the
    initial market cap, then the build proceeds as build_curve.
    """
    locked_vesting = _derive_locked_vesting(params)
    total_leftover = to_lamports(params.leftover, params.token_base_decimal)
    total_supply = to_lamports(params.total_token_supply, params.token_base_decimal)
    initial_market_cap = to_decimal(params.initial_market_cap)
    migration_market_cap = to_decimal(params.migration_market_cap)
    fee_percentage = params.migration_fee.fee_percentage

    if fee_percentage > 0:
        percentage_supply_on_migration = calculate_adjusted_percentage_supply_on_migration(
            initial_market_cap,
            migration_market_cap,
            fee_percentage,
            locked_vesting,
            total_leftover,
            total_supply,
        )
    else:
        percentage_supply_on_migration = get_percentage_supply_on_migration(
            initial_market_cap,
            migration_market_cap,
            locked_vesting,
            total_leftover,
            total_supply,
        )

    migration_quote_amount = get_migration_quote_amount(
        migration_market_cap, percentage_supply_on_migration
    )
    migration_quote_threshold = get_migration_quote_threshold_from_migration_quote_amount(
        migration_quote_amount, fee_percentage
    )
    return _build_curve_internal(
        "market_cap", params, percentage_supply_on_migration, migration_quote_threshold
    )


@dataclass(frozen=True)
class _TwoSegmentTargets:
    migration_sqrt_price: int
    initial_sqrt_price: int
    swap_amount: int
    migration_quote_threshold: int


def _two_segment_targets(
    params: BuildCurveBaseParams,
    shared: _SharedParameters,
    initial_market_cap: float,
    migration_market_cap: float,
    percentage_supply_on_migration: Decimal,
) -> _TwoSegmentTargets:
    fee_percentage = params.migration_fee.fee_percentage

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        base_on_migration = Decimal(params.total_token_supply) * percentage_supply_on_migration
    migration_base_supply = div(base_on_migration, Decimal(100))
    if migration_base_supply == 0:
        raise InvalidConfiguration(
            "percentage_supply_on_migration must be greater than zero",
            "percentage_supply_on_migration",
            percentage_supply_on_migration,
        )

    migration_quote_amount = get_migration_quote_amount(
        to_decimal(migration_market_cap), percentage_supply_on_migration
    )
    migration_quote_threshold = get_migration_quote_threshold_from_migration_quote_amount(
        migration_quote_amount, fee_percentage
    )
    migration_price = div(migration_quote_amount, migration_base_supply)

    migration_sqrt_price = get_sqrt_price_from_price(
        migration_price, params.token_base_decimal, params.token_quote_decimal
    )
    migration_base_amount = get_migration_base_token(
        to_lamports(migration_quote_amount, params.token_quote_decimal),
        migration_sqrt_price,
        params.migration_option,
    )
    swap_amount = (
        shared.total_supply
        - migration_base_amount
        - shared.total_vesting_amount
        - shared.total_leftover
    )
    initial_sqrt_price = get_sqrt_price_from_market_cap(
        initial_market_cap,
        params.total_token_supply,
        params.token_base_decimal,
        params.token_quote_decimal,
    )
    return _TwoSegmentTargets(
        migration_sqrt_price=migration_sqrt_price,
        initial_sqrt_price=initial_sqrt_price,
        swap_amount=swap_amount,
        migration_quote_threshold=to_lamports(
            migration_quote_threshold, params.token_quote_decimal
        ),
    )


def _finish_two_segment(
    strategy: str,
    params: BuildCurveBaseParams,
    shared: _SharedParameters,
    targets: _TwoSegmentTargets,
    curve: list[CurveSegment],
) -> ConfigParameters:
    total_dynamic_supply = get_total_supply_from_curve(
        targets.migration_quote_threshold,
        targets.initial_sqrt_price,
        curve,
        shared.locked_vesting,
        params.migration_option,
        shared.total_leftover,
        params.migration_fee.fee_percentage,
    )
    _check_supply(total_dynamic_supply, shared.total_supply, shared.total_leftover)
    return _assemble_config(
        strategy,
        params,
        shared,
        targets.initial_sqrt_price,
        curve,
        targets.migration_quote_threshold,
    )


def build_curve_with_two_segments(params: BuildCurveWithTwoSegmentsParams) -> ConfigParameters:
    """Two-segment curve between two market caps.

    The split point is not given: the 1/4, 3/4 and 1/2 geometric midpoints
    are tried in that order and the first one with a nonsingular,
    nonnegative solution wins.

    Raises:
        NoValidCurve: If none of the candidate midpoints works
    """
    shared = _derive_shared(params)
    targets = _two_segment_targets(
        params,
        shared,
        params.initial_market_cap,
        params.migration_market_cap,
        to_decimal(params.percentage_supply_on_migration),
    )

    curve = None
    candidates = get_mid_sqrt_price_candidates(
        targets.migration_sqrt_price, targets.initial_sqrt_price
    )
    for mid_sqrt_price in candidates:
        curve = get_two_curve(
            targets.migration_sqrt_price,
            mid_sqrt_price,
            targets.initial_sqrt_price,
            targets.swap_amount,
            targets.migration_quote_threshold,
        )
        if curve is not None:
            break
        logger.debug("two_curve_candidate_rejected", mid_sqrt_price=mid_sqrt_price)

    if curve is None:
        raise NoValidCurve(f"No valid two-segment curve for midpoints {candidates}")
    return _finish_two_segment("two_segments", params, shared, targets, curve)


def build_curve_with_mid_price(params: BuildCurveWithMidPriceParams) -> ConfigParameters:
    """Two-segment curve split at a caller-chosen price.

    Raises:
        NoValidCurve: If the system has no nonnegative solution at mid_price
    """
    shared = _derive_shared(params)
    targets = _two_segment_targets(
        params,
        shared,
        params.initial_market_cap,
        params.migration_market_cap,
        Decimal(params.percentage_supply_on_migration),
    )
    mid_sqrt_price = get_sqrt_price_from_price(
        Decimal(params.mid_price), params.token_base_decimal, params.token_quote_decimal
    )
    curve = get_two_curve(
        targets.migration_sqrt_price,
        mid_sqrt_price,
        targets.initial_sqrt_price,
        targets.swap_amount,
        targets.migration_quote_threshold,
    )
    if curve is None:
        raise NoValidCurve(f"No valid two-segment curve at mid price {params.mid_price}")
    return _finish_two_segment("mid_price", params, shared, targets, curve)


def _finish_weighted(
    strategy: str,
    params: BuildCurveBaseParams,
    shared: _SharedParameters,
    swap_and_migration_amount: int,
    sqrt_start_price: int,
    max_sqrt_price: int,
    curve: list[CurveSegment],
) -> ConfigParameters:
    migration_quote_threshold = _weighted_migration_quote_threshold(
        params, swap_and_migration_amount, sqrt_start_price, max_sqrt_price, curve
    )
    total_dynamic_supply = get_total_supply_from_curve(
        migration_quote_threshold,
        sqrt_start_price,
        curve,
        shared.locked_vesting,
        params.migration_option,
        shared.total_leftover,
        params.migration_fee.fee_percentage,
    )
    _check_supply(total_dynamic_supply, shared.total_supply, shared.total_leftover)
    return _assemble_config(
        strategy, params, shared, sqrt_start_price, curve, migration_quote_threshold
    )


def build_curve_with_liquidity_weights(
    params: BuildCurveWithLiquidityWeightsParams,
) -> ConfigParameters:
    """Sixteen geometrically spaced bands with relative liquidity weights.

    Band boundaries split [initial, migration] sqrt prices into 16 equal
    ratios. Weight i scales the liquidity of band i.

    Raises:
        InvalidConfiguration: If there are not exactly 16 weights
    """
    if len(params.liquidity_weights) != MAX_CURVE_POINT:
        raise InvalidConfiguration(
            f"liquidity_weights must have {MAX_CURVE_POINT} entries, "
            f"got {len(params.liquidity_weights)}",
            "liquidity_weights",
            params.liquidity_weights,
        )
    shared = _derive_shared(params)

    p_min = get_sqrt_price_from_market_cap(
        params.initial_market_cap,
        params.total_token_supply,
        params.token_base_decimal,
        params.token_quote_decimal,
    )
    p_max = get_sqrt_price_from_market_cap(
        params.migration_market_cap,
        params.total_token_supply,
        params.token_base_decimal,
        params.token_quote_decimal,
    )
    ratio = decimal_root_pow2(div(Decimal(p_max), Decimal(p_min)), 4)

    sqrt_prices = [p_min]
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        for _ in range(MAX_CURVE_POINT):
            sqrt_prices.append(truncate_to_int(ratio * sqrt_prices[-1]))

    swap_and_migration_amount = (
        shared.total_supply - shared.total_vesting_amount - shared.total_leftover
    )
    weights = [to_decimal(weight) for weight in params.liquidity_weights]
    l1 = _solve_liquidity_scalar(
        sqrt_prices,
        weights,
        p_max,
        params.migration_fee.fee_percentage,
        swap_and_migration_amount,
    )

    # Last band ends exactly at the migration price
    upper_prices = sqrt_prices[1:MAX_CURVE_POINT] + [p_max]
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        curve = [
            CurveSegment(sqrt_price=upper, liquidity=truncate_to_int(l1 * weight))
            for upper, weight in zip(upper_prices, weights)
        ]

    return _finish_weighted(
        "liquidity_weights", params, shared, swap_and_migration_amount, p_min, p_max, curve
    )


def build_curve_with_custom_sqrt_prices(
    params: BuildCurveWithCustomSqrtPricesParams,
) -> ConfigParameters:
    """Curve over caller-supplied band boundaries.

    sqrt_prices[0] is the start price and sqrt_prices[-1] the migration
    price. Without weights every band gets the same liquidity.

    Raises:
        InvalidConfiguration: If fewer than two prices are given, prices are
            not strictly increasing, or the weight count does not match
    """
    sqrt_prices = params.sqrt_prices
    if len(sqrt_prices) < 2:
        raise InvalidConfiguration(
            "sqrt_prices must have at least 2 elements", "sqrt_prices", sqrt_prices
        )
    for lower, upper in zip(sqrt_prices, sqrt_prices[1:]):
        if upper <= lower:
            raise InvalidConfiguration(
                "sqrt_prices must be strictly increasing", "sqrt_prices", sqrt_prices
            )

    num_segments = len(sqrt_prices) - 1
    liquidity_weights = params.liquidity_weights
    if not liquidity_weights:
        liquidity_weights = [1] * num_segments
    elif len(liquidity_weights) != num_segments:
        raise InvalidConfiguration(
            "liquidity_weights length must equal len(sqrt_prices) - 1",
            "liquidity_weights",
            liquidity_weights,
        )

    shared = _derive_shared(params)
    p_min = sqrt_prices[0]
    p_max = sqrt_prices[-1]
    swap_and_migration_amount = (
        shared.total_supply - shared.total_vesting_amount - shared.total_leftover
    )
    weights = [Decimal(weight) for weight in liquidity_weights]
    l1 = _solve_liquidity_scalar(
        sqrt_prices,
        weights,
        p_max,
        params.migration_fee.fee_percentage,
        swap_and_migration_amount,
    )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        curve = [
            CurveSegment(sqrt_price=upper, liquidity=truncate_to_int(l1 * weight))
            for upper, weight in zip(sqrt_prices[1:], weights)
        ]

    return _finish_weighted(
        "custom_sqrt_prices", params, shared, swap_and_migration_amount, p_min, p_max, curve
    )
