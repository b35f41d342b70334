"""Derivation of on-chain config parameters from business-level inputs.

Each function turns whole-token amounts, basis points and durations into
the integer fields the program stores, rejecting inputs the program would
refuse.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

import structlog

from bonding_curve.constants import (
    BIN_STEP_BPS_DEFAULT,
    BIN_STEP_BPS_U128_DEFAULT,
    DYNAMIC_FEE_DECAY_PERIOD_DEFAULT,
    DYNAMIC_FEE_FILTER_PERIOD_DEFAULT,
    DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT,
    DYNAMIC_FEE_ROUNDING_OFFSET,
    DYNAMIC_FEE_SCALING_FACTOR,
    FEE_DENOMINATOR,
    MAX_BASIS_POINT,
    MAX_FEE_BPS,
    MAX_FEE_NUMERATOR,
    MAX_LOCK_DURATION_IN_SECONDS,
    MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT,
    MAX_RATE_LIMITER_DURATION_IN_SECONDS,
    MAX_RATE_LIMITER_DURATION_IN_SLOTS,
    MIN_FEE_BPS,
    MIN_FEE_NUMERATOR,
    ONE_Q64,
    U16_MAX,
    U32_MAX,
)
from bonding_curve.errors import InvalidConfiguration, MathOverflow
from bonding_curve.math.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    decimal_pow,
    decimal_sqrt,
    div,
    to_lamports,
    truncate_to_int,
)
from bonding_curve.math.safe_math import bps_to_fee_numerator, to_u64
from bonding_curve.models.build_params import (
    BaseFeeParams,
    LiquidityVestingInfoParams,
    MigratedPoolFeeParams,
    MigratedPoolMarketCapFeeSchedulerParams,
)
from bonding_curve.models.config_params import (
    BaseFeeParameters,
    DynamicFeeParameters,
    LiquidityVestingInfoParameters,
    LockedVestingParameters,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParameters,
)
from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    DammV2BaseFeeMode,
    MigrationFeeOption,
    MigrationOption,
)

logger = structlog.get_logger()


def _exponential_reduction_factor(
    max_base_fee_numerator: int, min_base_fee_numerator: int, number_of_period: int
) -> int:
    """10000 * (1 - (min / max) ^ (1 / number_of_period)), truncated."""
    ratio = div(Decimal(min_base_fee_numerator), Decimal(max_base_fee_numerator))
    decay_base = decimal_pow(ratio, div(Decimal(1), Decimal(number_of_period)))
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return truncate_to_int(MAX_BASIS_POINT * (1 - decay_base))


def _lamports_u64(amount: int, token_decimal: int) -> int:
    return to_u64(to_lamports(amount, token_decimal))


def _to_u32(value: int, field: str) -> int:
    if value < 0 or value > U32_MAX:
        raise MathOverflow(f"{field} {value} does not fit in u32")
    return value


# Base fee


def get_fee_scheduler_params(
    starting_base_fee_bps: int,
    ending_base_fee_bps: int,
    base_fee_mode: BaseFeeMode,
    number_of_period: int,
    total_duration: int,
) -> BaseFeeParameters:
    """Fee scheduler decaying from starting_base_fee_bps to ending_base_fee_bps.

    Equal start and end fees produce a flat fee and require zero periods and
    zero duration.

    Raises:
        InvalidConfiguration: If the bounds, period count or duration are
            out of range
    """
    if starting_base_fee_bps == ending_base_fee_bps:
        if number_of_period != 0 or total_duration != 0:
            raise InvalidConfiguration(
                "number_of_period and total_duration must both be zero for a flat fee",
                "number_of_period",
                number_of_period,
            )
        return BaseFeeParameters(
            cliff_fee_numerator=bps_to_fee_numerator(starting_base_fee_bps),
            base_fee_mode=BaseFeeMode.FEE_SCHEDULER_LINEAR,
        )

    if number_of_period == 0:
        raise InvalidConfiguration(
            "number_of_period must be greater than zero", "number_of_period", number_of_period
        )
    if starting_base_fee_bps > MAX_FEE_BPS:
        raise InvalidConfiguration(
            f"starting_base_fee_bps ({starting_base_fee_bps}) exceeds maximum {MAX_FEE_BPS}",
            "starting_fee_bps",
            starting_base_fee_bps,
        )
    if ending_base_fee_bps < MIN_FEE_BPS:
        raise InvalidConfiguration(
            f"ending_base_fee_bps ({ending_base_fee_bps}) is below minimum {MIN_FEE_BPS}",
            "ending_fee_bps",
            ending_base_fee_bps,
        )
    if ending_base_fee_bps > starting_base_fee_bps:
        raise InvalidConfiguration(
            "ending_base_fee_bps must be <= starting_base_fee_bps",
            "ending_fee_bps",
            ending_base_fee_bps,
        )
    if total_duration == 0:
        raise InvalidConfiguration(
            "total_duration must be greater than zero", "total_duration", total_duration
        )
    if number_of_period > U16_MAX:
        raise InvalidConfiguration(
            "number_of_period overflows u16", "number_of_period", number_of_period
        )

    max_base_fee_numerator = bps_to_fee_numerator(starting_base_fee_bps)
    min_base_fee_numerator = bps_to_fee_numerator(ending_base_fee_bps)
    period_frequency = total_duration // number_of_period

    if base_fee_mode == BaseFeeMode.FEE_SCHEDULER_LINEAR:
        reduction_factor = (max_base_fee_numerator - min_base_fee_numerator) // number_of_period
    else:
        reduction_factor = _exponential_reduction_factor(
            max_base_fee_numerator, min_base_fee_numerator, number_of_period
        )

    return BaseFeeParameters(
        cliff_fee_numerator=max_base_fee_numerator,
        first_factor=number_of_period,
        second_factor=period_frequency,
        third_factor=to_u64(reduction_factor),
        base_fee_mode=base_fee_mode,
    )


def get_rate_limiter_params(
    base_fee_bps: int,
    fee_increment_bps: int,
    reference_amount: int,
    max_limiter_duration: int,
    token_quote_decimal: int,
    activation_type: ActivationType,
) -> BaseFeeParameters:
    """Rate limiter charging base_fee_bps plus fee_increment_bps per reference amount.

    reference_amount is in whole quote tokens and is stored in base units.

    Raises:
        InvalidConfiguration: If any parameter is zero or out of range
    """
    cliff_fee_numerator = bps_to_fee_numerator(base_fee_bps)
    fee_increment_numerator = bps_to_fee_numerator(fee_increment_bps)

    if (
        base_fee_bps == 0
        or fee_increment_bps == 0
        or reference_amount == 0
        or max_limiter_duration == 0
    ):
        raise InvalidConfiguration("All rate limiter parameters must be greater than zero")
    if base_fee_bps > MAX_FEE_BPS:
        raise InvalidConfiguration(
            f"base_fee_bps ({base_fee_bps}) exceeds maximum {MAX_FEE_BPS}",
            "base_fee_bps",
            base_fee_bps,
        )
    if base_fee_bps < MIN_FEE_BPS:
        raise InvalidConfiguration(
            f"base_fee_bps ({base_fee_bps}) is below minimum {MIN_FEE_BPS}",
            "base_fee_bps",
            base_fee_bps,
        )
    if fee_increment_bps > MAX_FEE_BPS:
        raise InvalidConfiguration(
            f"fee_increment_bps ({fee_increment_bps}) exceeds maximum {MAX_FEE_BPS}",
            "fee_increment_bps",
            fee_increment_bps,
        )
    if fee_increment_numerator >= FEE_DENOMINATOR:
        raise InvalidConfiguration(
            "fee increment numerator must be less than FEE_DENOMINATOR",
            "fee_increment_bps",
            fee_increment_bps,
        )

    max_index = (MAX_FEE_NUMERATOR - cliff_fee_numerator) // fee_increment_numerator
    if max_index < 1:
        raise InvalidConfiguration(
            "fee increment is too large for the given base fee",
            "fee_increment_bps",
            fee_increment_bps,
        )
    if not MIN_FEE_NUMERATOR <= cliff_fee_numerator <= MAX_FEE_NUMERATOR:
        raise InvalidConfiguration(
            "base fee must be between minimum and maximum", "base_fee_bps", base_fee_bps
        )

    if activation_type == ActivationType.SLOT:
        max_duration = MAX_RATE_LIMITER_DURATION_IN_SLOTS
    else:
        max_duration = MAX_RATE_LIMITER_DURATION_IN_SECONDS
    if max_limiter_duration > max_duration:
        raise InvalidConfiguration(
            f"max limiter duration exceeds maximum allowed value of {max_duration}",
            "max_limiter_duration",
            max_limiter_duration,
        )

    return BaseFeeParameters(
        cliff_fee_numerator=cliff_fee_numerator,
        first_factor=fee_increment_bps,
        second_factor=max_limiter_duration,
        third_factor=_lamports_u64(reference_amount, token_quote_decimal),
        base_fee_mode=BaseFeeMode.RATE_LIMITER,
    )


def get_base_fee_params(
    base_fee_params: BaseFeeParams, token_quote_decimal: int, activation_type: ActivationType
) -> BaseFeeParameters:
    """Dispatch on base_fee_mode to the scheduler or rate limiter derivation.

    Raises:
        InvalidConfiguration: If the parameters for the chosen mode are missing
    """
    if base_fee_params.base_fee_mode == BaseFeeMode.RATE_LIMITER:
        param = base_fee_params.rate_limiter_param
        if param is None:
            raise InvalidConfiguration(
                "rate limiter parameters are required for RateLimiter mode",
                "rate_limiter_param",
            )
        return get_rate_limiter_params(
            param.base_fee_bps,
            param.fee_increment_bps,
            param.reference_amount,
            param.max_limiter_duration,
            token_quote_decimal,
            activation_type,
        )

    scheduler = base_fee_params.fee_scheduler_param
    if scheduler is None:
        raise InvalidConfiguration(
            "fee scheduler parameters are required for FeeScheduler mode",
            "fee_scheduler_param",
        )
    return get_fee_scheduler_params(
        scheduler.starting_fee_bps,
        scheduler.ending_fee_bps,
        base_fee_params.base_fee_mode,
        scheduler.number_of_period,
        scheduler.total_duration,
    )


def get_starting_base_fee_bps(base_fee_params: BaseFeeParams) -> int:
    """Fee the migrated pool's market-cap scheduler starts from.

    The rate limiter's base fee, or the fee scheduler's ending fee.
    """
    if base_fee_params.base_fee_mode == BaseFeeMode.RATE_LIMITER:
        param = base_fee_params.rate_limiter_param
        return param.base_fee_bps if param is not None else 0
    scheduler = base_fee_params.fee_scheduler_param
    return scheduler.ending_fee_bps if scheduler is not None else 0


# Dynamic fee


def get_dynamic_fee_params(
    base_fee_bps: int, max_price_change_percentage: int = MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT
) -> DynamicFeeParameters:
    """Dynamic fee whose surcharge peaks at max_price_change_percentage of the base fee.

    The volatility accumulator is capped at the bin distance of the given
    price move, and variable_fee_control is chosen so that the capped
    accumulator yields the peak surcharge.

    Raises:
        InvalidConfiguration: If max_price_change_percentage exceeds the default cap
        MathOverflow: If a derived value does not fit in u32
    """
    if max_price_change_percentage > MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT:
        raise InvalidConfiguration(
            f"max_price_change_percentage ({max_price_change_percentage}) must be <= "
            f"{MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT}",
            "max_price_change_percentage",
            max_price_change_percentage,
        )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        price_ratio = div(Decimal(max_price_change_percentage), Decimal(MAX_BASIS_POINT)) + 1
        sqrt_price_ratio_q64 = truncate_to_int(decimal_sqrt(price_ratio) * ONE_Q64)

    delta_bin_id = (sqrt_price_ratio_q64 - ONE_Q64) // BIN_STEP_BPS_U128_DEFAULT * 2
    max_volatility_accumulator = delta_bin_id * MAX_BASIS_POINT
    square_vfa_bin = (max_volatility_accumulator * BIN_STEP_BPS_DEFAULT) ** 2
    if square_vfa_bin == 0:
        raise InvalidConfiguration(
            "max_price_change_percentage too small for a nonzero volatility range",
            "max_price_change_percentage",
            max_price_change_percentage,
        )

    max_dynamic_fee_numerator = (
        bps_to_fee_numerator(base_fee_bps) * max_price_change_percentage // 100
    )
    v_fee = max_dynamic_fee_numerator * DYNAMIC_FEE_SCALING_FACTOR - DYNAMIC_FEE_ROUNDING_OFFSET
    variable_fee_control = v_fee // square_vfa_bin

    return DynamicFeeParameters(
        bin_step=BIN_STEP_BPS_DEFAULT,
        bin_step_u128=BIN_STEP_BPS_U128_DEFAULT,
        filter_period=DYNAMIC_FEE_FILTER_PERIOD_DEFAULT,
        decay_period=DYNAMIC_FEE_DECAY_PERIOD_DEFAULT,
        reduction_factor=DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT,
        max_volatility_accumulator=_to_u32(
            max_volatility_accumulator, "max_volatility_accumulator"
        ),
        variable_fee_control=_to_u32(variable_fee_control, "variable_fee_control"),
    )


def get_base_fee_bps_for_dynamic_fee(base_fee_params: BaseFeeParams) -> int:
    """Base fee the dynamic surcharge is sized against."""
    return get_starting_base_fee_bps(base_fee_params)


# Vesting


def get_locked_vesting_params(
    total_locked_vesting_amount: int,
    number_of_vesting_period: int,
    cliff_unlock_amount: int,
    total_vesting_duration: int,
    cliff_duration_from_migration_time: int,
    token_base_decimal: int,
) -> LockedVestingParameters:
    """Creator vesting in base units.

    Amounts are whole tokens. Rounding dust from the per-period split is
    added to the cliff unlock. When everything unlocks at the cliff, one
    token is moved into a single one-point period since the program needs
    at least one period.

    Raises:
        InvalidConfiguration: If the periods or duration are zero, or the
            cliff unlock exceeds the total
    """
    if total_locked_vesting_amount == 0:
        return LockedVestingParameters()

    if total_locked_vesting_amount == cliff_unlock_amount:
        return LockedVestingParameters(
            amount_per_period=_lamports_u64(1, token_base_decimal),
            cliff_duration_from_migration_time=cliff_duration_from_migration_time,
            frequency=1,
            number_of_period=1,
            cliff_unlock_amount=_lamports_u64(total_locked_vesting_amount - 1, token_base_decimal),
        )

    if number_of_vesting_period == 0:
        raise InvalidConfiguration(
            "number_of_vesting_period must be greater than zero",
            "number_of_vesting_period",
            number_of_vesting_period,
        )
    if total_vesting_duration == 0:
        raise InvalidConfiguration(
            "total_vesting_duration must be greater than zero",
            "total_vesting_duration",
            total_vesting_duration,
        )
    if cliff_unlock_amount > total_locked_vesting_amount:
        raise InvalidConfiguration(
            "cliff unlock amount cannot be greater than total locked vesting amount",
            "cliff_unlock_amount",
            cliff_unlock_amount,
        )

    amount_per_period = (
        total_locked_vesting_amount - cliff_unlock_amount
    ) // number_of_vesting_period
    remainder = total_locked_vesting_amount - (
        cliff_unlock_amount + amount_per_period * number_of_vesting_period
    )
    period_frequency = total_vesting_duration // number_of_vesting_period

    return LockedVestingParameters(
        amount_per_period=_lamports_u64(amount_per_period, token_base_decimal),
        cliff_duration_from_migration_time=cliff_duration_from_migration_time,
        frequency=period_frequency,
        number_of_period=number_of_vesting_period,
        cliff_unlock_amount=_lamports_u64(cliff_unlock_amount + remainder, token_base_decimal),
    )


def get_liquidity_vesting_info_params(
    vesting_percentage: int,
    bps_per_period: int,
    number_of_periods: int,
    cliff_duration_from_migration_time: int,
    total_duration: int,
) -> LiquidityVestingInfoParameters:
    """LP vesting schedule with frequency derived from total_duration.

    Raises:
        InvalidConfiguration: If the schedule is inconsistent or exceeds the
            maximum lock duration
    """
    if vesting_percentage > 100:
        raise InvalidConfiguration(
            "vesting_percentage must be between 0 and 100",
            "vesting_percentage",
            vesting_percentage,
        )

    if vesting_percentage == 0:
        if (
            bps_per_period != 0
            or number_of_periods != 0
            or cliff_duration_from_migration_time != 0
            or total_duration != 0
        ):
            raise InvalidConfiguration(
                "if vesting_percentage is 0, all other parameters must be 0",
                "vesting_percentage",
                vesting_percentage,
            )
        return LiquidityVestingInfoParameters()

    if number_of_periods == 0:
        raise InvalidConfiguration(
            "number_of_periods must be greater than zero when vesting_percentage > 0",
            "number_of_periods",
            number_of_periods,
        )
    if total_duration == 0:
        raise InvalidConfiguration(
            "total_duration must be greater than zero", "total_duration", total_duration
        )
    if bps_per_period > MAX_BASIS_POINT:
        raise InvalidConfiguration(
            f"bps_per_period must be between 0 and {MAX_BASIS_POINT}",
            "bps_per_period",
            bps_per_period,
        )

    frequency = total_duration // number_of_periods
    if frequency == 0:
        raise InvalidConfiguration(
            "frequency must be greater than zero", "total_duration", total_duration
        )
    if bps_per_period * number_of_periods > MAX_BASIS_POINT:
        raise InvalidConfiguration(
            f"total bps must not exceed {MAX_BASIS_POINT}", "bps_per_period", bps_per_period
        )
    total_vesting_duration = cliff_duration_from_migration_time + number_of_periods * frequency
    if total_vesting_duration > MAX_LOCK_DURATION_IN_SECONDS:
        raise InvalidConfiguration(
            f"total vesting duration must not exceed {MAX_LOCK_DURATION_IN_SECONDS}",
            "total_duration",
            total_duration,
        )
    if frequency > U32_MAX:
        raise InvalidConfiguration("frequency overflows u32", "total_duration", total_duration)

    return LiquidityVestingInfoParameters(
        vesting_percentage=vesting_percentage,
        bps_per_period=bps_per_period,
        number_of_periods=number_of_periods,
        cliff_duration_from_migration_time=cliff_duration_from_migration_time,
        frequency=frequency,
    )


def get_liquidity_vesting_info_from_params(
    params: LiquidityVestingInfoParams | None,
) -> LiquidityVestingInfoParameters:
    """get_liquidity_vesting_info_params for an optional request model."""
    if params is None:
        return LiquidityVestingInfoParameters()
    return get_liquidity_vesting_info_params(
        params.vesting_percentage,
        params.bps_per_period,
        params.number_of_periods,
        params.cliff_duration_from_migration_time,
        params.total_duration,
    )


# Migrated pool


def get_migrated_pool_fee_params(
    migration_option: MigrationOption,
    migration_fee_option: MigrationFeeOption,
    migrated_pool_fee: MigratedPoolFeeParams | None,
) -> MigratedPoolFee:
    """Migrated pool fee; only customizable DAMM v2 migrations carry one."""
    if (
        migration_option == MigrationOption.MET_DAMM_V2
        and migration_fee_option == MigrationFeeOption.CUSTOMIZABLE
        and migrated_pool_fee is not None
    ):
        return MigratedPoolFee(
            collect_fee_mode=migrated_pool_fee.collect_fee_mode,
            dynamic_fee=migrated_pool_fee.dynamic_fee,
            pool_fee_bps=migrated_pool_fee.pool_fee_bps,
        )
    return MigratedPoolFee()


def get_migrated_pool_market_cap_fee_scheduler_params(
    starting_base_fee_bps: int,
    ending_base_fee_bps: int,
    damm_v2_base_fee_mode: DammV2BaseFeeMode,
    number_of_period: int,
    sqrt_price_step_bps: int,
    scheduler_expiration_duration: int,
) -> MigratedPoolMarketCapFeeSchedulerParameters:
    """Market-cap fee schedule for the migrated DAMM v2 pool.

    Time-scheduler modes need no market-cap schedule and get the empty one.

    Raises:
        InvalidConfiguration: For the rate limiter mode, or when the schedule
            bounds or steps are invalid
    """
    if damm_v2_base_fee_mode in (
        DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR,
        DammV2BaseFeeMode.FEE_TIME_SCHEDULER_EXPONENTIAL,
    ):
        return MigratedPoolMarketCapFeeSchedulerParameters()

    if damm_v2_base_fee_mode == DammV2BaseFeeMode.RATE_LIMITER:
        raise InvalidConfiguration(
            "RateLimiter is not supported for DAMM v2 migration",
            "migrated_pool_base_fee_mode",
            damm_v2_base_fee_mode,
        )
    if number_of_period == 0:
        raise InvalidConfiguration(
            "number_of_period must be greater than zero", "number_of_period", number_of_period
        )
    if starting_base_fee_bps <= ending_base_fee_bps:
        raise InvalidConfiguration(
            f"starting_base_fee_bps ({starting_base_fee_bps}) must be greater than "
            f"ending_base_fee_bps ({ending_base_fee_bps})",
            "ending_base_fee_bps",
            ending_base_fee_bps,
        )
    if starting_base_fee_bps > MAX_FEE_BPS:
        raise InvalidConfiguration(
            f"starting_base_fee_bps ({starting_base_fee_bps}) exceeds maximum allowed",
            "starting_base_fee_bps",
            starting_base_fee_bps,
        )
    if sqrt_price_step_bps == 0 or scheduler_expiration_duration == 0:
        raise InvalidConfiguration(
            "number_of_period, sqrt_price_step_bps and scheduler_expiration_duration "
            "must be greater than zero"
        )

    max_base_fee_numerator = bps_to_fee_numerator(starting_base_fee_bps)
    min_base_fee_numerator = bps_to_fee_numerator(ending_base_fee_bps)
    if damm_v2_base_fee_mode == DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR:
        reduction_factor = (max_base_fee_numerator - min_base_fee_numerator) // number_of_period
    else:
        reduction_factor = _exponential_reduction_factor(
            max_base_fee_numerator, min_base_fee_numerator, number_of_period
        )

    return MigratedPoolMarketCapFeeSchedulerParameters(
        number_of_period=number_of_period,
        sqrt_price_step_bps=sqrt_price_step_bps,
        scheduler_expiration_duration=scheduler_expiration_duration,
        reduction_factor=to_u64(reduction_factor),
    )


def build_migrated_pool_market_cap_fee_scheduler_params(
    params: MigratedPoolMarketCapFeeSchedulerParams | None,
    base_fee_params: BaseFeeParams,
    migrated_pool_base_fee_mode: DammV2BaseFeeMode | None,
) -> MigratedPoolMarketCapFeeSchedulerParameters:
    """Resolve an optional market-cap schedule request.

    The schedule starts from the launch pool's starting fee (see
    get_starting_base_fee_bps). A missing mode means the linear time
    scheduler.
    """
    if params is None:
        return MigratedPoolMarketCapFeeSchedulerParameters()
    mode = migrated_pool_base_fee_mode
    if mode is None:
        mode = DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR
    logger.debug("migrated_pool_fee_schedule", mode=DammV2BaseFeeMode(mode).name)
    return get_migrated_pool_market_cap_fee_scheduler_params(
        get_starting_base_fee_bps(base_fee_params),
        params.ending_base_fee_bps,
        mode,
        params.number_of_period,
        params.sqrt_price_step_bps,
        params.scheduler_expiration_duration,
    )
