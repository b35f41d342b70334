"""Validation of config parameters before pool config creation.

Each validate_* predicate checks one group of rules and returns a bool.
validate_config_parameters() runs them in the program's order and raises
InvalidConfiguration naming the first rule that fails, so a config that
passes here is one the program accepts.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from bonding_curve.calibration.common import (
    calculate_locked_liquidity_bps_at_time,
    get_base_token_for_swap,
    get_migration_base_token,
    get_migration_quote_amount_from_migration_quote_threshold,
    get_migration_threshold_price,
    get_swap_amount_with_buffer,
    get_total_token_supply,
)
from bonding_curve.constants import (
    BIN_STEP_BPS_DEFAULT,
    BIN_STEP_BPS_U128_DEFAULT,
    MAX_BASIS_POINT,
    MAX_CREATOR_MIGRATION_FEE_PERCENTAGE,
    MAX_CURVE_POINT,
    MAX_MIGRATED_POOL_FEE_BPS,
    MAX_MIGRATION_FEE_PERCENTAGE,
    MAX_POOL_CREATION_FEE,
    MAX_SQRT_PRICE,
    MIN_FEE_NUMERATOR,
    MIN_LOCKED_LIQUIDITY_BPS,
    MIN_MIGRATED_POOL_FEE_BPS,
    MIN_POOL_CREATION_FEE,
    MIN_SQRT_PRICE,
    SECONDS_PER_DAY,
    U24_MAX,
)
from bonding_curve.errors import InvalidConfiguration, InvalidCurve, MathError, ZeroAmount
from bonding_curve.fees.fee_scheduler import validate_fee_scheduler
from bonding_curve.fees.rate_limiter import validate_fee_rate_limiter
from bonding_curve.math.decimal_utils import truncate_to_int
from bonding_curve.models.config_params import (
    ConfigParameters,
    DynamicFeeParameters,
    LiquidityVestingInfoParameters,
    LockedVestingParameters,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParameters,
    MigrationFee,
    PoolFeeParameters,
    TokenSupplyParams,
)
from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
)
from bonding_curve.models.pool import CurveSegment

logger = structlog.get_logger()

# Base58 of the all-zero public key
DEFAULT_PUBKEY = "11111111111111111111111111111111"


def _is_valid_enum(enum_cls, value: int) -> bool:
    return value in {member.value for member in enum_cls}


# Fees


def validate_dynamic_fee(dynamic_fee: DynamicFeeParameters | None) -> bool:
    """Dynamic fee uses the default bin step and stays within u24 knobs."""
    if dynamic_fee is None:
        return True
    if dynamic_fee.bin_step != BIN_STEP_BPS_DEFAULT:
        return False
    if dynamic_fee.bin_step_u128 != BIN_STEP_BPS_U128_DEFAULT:
        return False
    if dynamic_fee.filter_period >= dynamic_fee.decay_period:
        return False
    if dynamic_fee.reduction_factor > MAX_BASIS_POINT:
        return False
    if dynamic_fee.variable_fee_control > U24_MAX:
        return False
    return dynamic_fee.max_volatility_accumulator <= U24_MAX


def validate_pool_fees(
    pool_fees: PoolFeeParameters, collect_fee_mode: int, activation_type: int
) -> bool:
    """Base fee is within bounds for its strategy, dynamic fee is well formed."""
    base_fee = pool_fees.base_fee
    if base_fee.cliff_fee_numerator < MIN_FEE_NUMERATOR:
        return False

    if base_fee.base_fee_mode in (
        BaseFeeMode.FEE_SCHEDULER_LINEAR,
        BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL,
    ):
        if not validate_fee_scheduler(
            base_fee.first_factor,
            base_fee.second_factor,
            base_fee.third_factor,
            base_fee.cliff_fee_numerator,
            base_fee.base_fee_mode,
        ):
            return False
    elif base_fee.base_fee_mode == BaseFeeMode.RATE_LIMITER:
        if not validate_fee_rate_limiter(
            base_fee.cliff_fee_numerator,
            base_fee.first_factor,
            base_fee.second_factor,
            base_fee.third_factor,
            collect_fee_mode,
            activation_type,
        ):
            return False
    else:
        return False

    return validate_dynamic_fee(pool_fees.dynamic_fee)


def validate_collect_fee_mode(collect_fee_mode: int) -> bool:
    return _is_valid_enum(CollectFeeMode, collect_fee_mode)


def validate_migration_fee(migration_fee: MigrationFee) -> bool:
    """Migration fee is at most 99% and the creator's share at most 100%."""
    return (
        migration_fee.fee_percentage <= MAX_MIGRATION_FEE_PERCENTAGE
        and migration_fee.creator_fee_percentage <= MAX_CREATOR_MIGRATION_FEE_PERCENTAGE
    )


def validate_pool_creation_fee(pool_creation_fee: int) -> bool:
    """Pool creation fee is either off or within the protocol's range."""
    if pool_creation_fee == 0:
        return True
    return MIN_POOL_CREATION_FEE <= pool_creation_fee <= MAX_POOL_CREATION_FEE


# Token and migration options


def validate_token_update_authority(option: int) -> bool:
    return _is_valid_enum(TokenUpdateAuthorityOption, option)


def validate_migration_and_token_type(migration_option: int, token_type: int) -> bool:
    """DAMM v1 cannot hold Token-2022 mints."""
    if migration_option == MigrationOption.MET_DAMM:
        return token_type == TokenType.SPL
    return True


def validate_activation_type(activation_type: int) -> bool:
    return _is_valid_enum(ActivationType, activation_type)


def validate_migration_fee_option(migration_fee_option: int, migration_option: int) -> bool:
    """Customizable migrated pool fees are a DAMM v2 feature."""
    if migration_fee_option == MigrationFeeOption.CUSTOMIZABLE:
        return migration_option == MigrationOption.MET_DAMM_V2
    return _is_valid_enum(MigrationFeeOption, migration_fee_option)


def validate_token_decimals(token_decimal: int) -> bool:
    return TokenDecimal.SIX <= token_decimal <= TokenDecimal.NINE


# Liquidity split and vesting


def validate_lp_percentages(
    partner_liquidity_percentage: int,
    partner_permanent_locked_liquidity_percentage: int,
    creator_liquidity_percentage: int,
    creator_permanent_locked_liquidity_percentage: int,
    partner_vesting_percentage: int = 0,
    creator_vesting_percentage: int = 0,
) -> bool:
    """LP shares handed out at migration partition exactly 100%."""
    total = (
        partner_liquidity_percentage
        + partner_permanent_locked_liquidity_percentage
        + creator_liquidity_percentage
        + creator_permanent_locked_liquidity_percentage
        + partner_vesting_percentage
        + creator_vesting_percentage
    )
    return total == 100


def validate_liquidity_vesting_info(vesting_info: LiquidityVestingInfoParameters) -> bool:
    """An LP vesting schedule that vests anything must have a frequency."""
    if vesting_info.is_zero:
        return True
    if vesting_info.vesting_percentage > 100:
        return False
    return not (vesting_info.vesting_percentage > 0 and vesting_info.frequency == 0)


def validate_minimum_locked_liquidity(
    partner_permanent_locked_liquidity_percentage: int,
    creator_permanent_locked_liquidity_percentage: int,
    partner_liquidity_vesting_info: LiquidityVestingInfoParameters | None,
    creator_liquidity_vesting_info: LiquidityVestingInfoParameters | None,
) -> bool:
    """At least 10% of LP liquidity is still locked one day after migration."""
    locked_bps_at_day_1 = calculate_locked_liquidity_bps_at_time(
        partner_permanent_locked_liquidity_percentage,
        creator_permanent_locked_liquidity_percentage,
        partner_liquidity_vesting_info,
        creator_liquidity_vesting_info,
        SECONDS_PER_DAY,
    )
    return locked_bps_at_day_1 >= MIN_LOCKED_LIQUIDITY_BPS


def validate_locked_vesting(locked_vesting: LockedVestingParameters) -> bool:
    """Creator vesting, when configured, has a frequency and releases something."""
    if locked_vesting.is_default:
        return True
    return locked_vesting.frequency != 0 and locked_vesting.total_amount != 0


# Migrated pool


def validate_migrated_pool_fee(
    migrated_pool_fee: MigratedPoolFee,
    migration_option: int | None = None,
    migration_fee_option: int | None = None,
) -> bool:
    """Custom migrated pool fees are only set for customizable DAMM v2 migrations."""
    if migration_option is not None and migration_fee_option is not None:
        if migration_option == MigrationOption.MET_DAMM:
            return migrated_pool_fee.is_empty
        if (
            migration_option == MigrationOption.MET_DAMM_V2
            and migration_fee_option != MigrationFeeOption.CUSTOMIZABLE
        ):
            return migrated_pool_fee.is_empty

    if migrated_pool_fee.is_empty:
        return True
    if not MIN_MIGRATED_POOL_FEE_BPS <= migrated_pool_fee.pool_fee_bps <= MAX_MIGRATED_POOL_FEE_BPS:
        return False
    if not validate_collect_fee_mode(migrated_pool_fee.collect_fee_mode):
        return False
    return _is_valid_enum(DammV2DynamicFeeMode, migrated_pool_fee.dynamic_fee)


def validate_migrated_pool_base_fee_mode(
    migrated_pool_base_fee_mode: int,
    market_cap_fee_scheduler_params: MigratedPoolMarketCapFeeSchedulerParameters,
    migration_option: int | None = None,
) -> bool:
    """Migrated DAMM v2 pools take a fixed time-scheduler fee or a market-cap schedule.

    The rate limiter is not available after migration. Market-cap schedules
    either are fixed or set all of period count, price step and expiration.
    """
    if migration_option is not None and migration_option != MigrationOption.MET_DAMM_V2:
        return True

    params = market_cap_fee_scheduler_params
    if migrated_pool_base_fee_mode in (
        DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR,
        DammV2BaseFeeMode.FEE_TIME_SCHEDULER_EXPONENTIAL,
    ):
        return params.is_fixed_fee
    if migrated_pool_base_fee_mode in (
        DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR,
        DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL,
    ):
        if params.is_fixed_fee:
            return True
        return (
            params.number_of_period > 0
            and params.sqrt_price_step_bps > 0
            and params.scheduler_expiration_duration > 0
        )
    # Rate limiter and unknown modes
    return False


# Curve and supply


def validate_curve(curve: list[CurveSegment], sqrt_start_price: int) -> bool:
    """Curve has 1..16 segments, strictly increasing above the start price.

    Every segment carries liquidity and no bound exceeds MAX_SQRT_PRICE.
    """
    if not curve or len(curve) > MAX_CURVE_POINT:
        return False

    previous_sqrt_price = sqrt_start_price
    for segment in curve:
        if segment.sqrt_price <= previous_sqrt_price or segment.liquidity <= 0:
            return False
        previous_sqrt_price = segment.sqrt_price
    return curve[-1].sqrt_price <= MAX_SQRT_PRICE


def validate_token_supply(
    token_supply: TokenSupplyParams | None,
    leftover_receiver: str | None,
    swap_base_amount: int,
    migration_base_amount: int,
    locked_vesting: LockedVestingParameters,
    swap_base_amount_buffer: int,
) -> bool:
    """Declared supply covers the curve, migration deposit and vesting.

    Post-migration supply covers the unbuffered requirement and pre-migration
    supply covers the buffered one. A leftover receiver is required to take
    whatever is not sold.
    """
    if token_supply is None:
        return True
    if not leftover_receiver or leftover_receiver == DEFAULT_PUBKEY:
        return False

    try:
        min_with_buffer = get_total_token_supply(
            swap_base_amount_buffer, migration_base_amount, locked_vesting
        )
        min_without_buffer = get_total_token_supply(
            swap_base_amount, migration_base_amount, locked_vesting
        )
    except MathError:
        return False

    pre = token_supply.pre_migration_token_supply
    post = token_supply.post_migration_token_supply
    return min_without_buffer <= post <= pre and min_with_buffer <= pre


def validate_swap_amount(amount_in: int) -> None:
    """Raise ZeroAmount unless amount_in is positive."""
    if amount_in <= 0:
        raise ZeroAmount(f"Swap amount must be greater than 0, got {amount_in}")


# Aggregate


def _reject(message: str, field: str | None = None, value=None) -> InvalidConfiguration:
    logger.warning("config_rejected", reason=message, field=field, value=value)
    return InvalidConfiguration(message, field, value)


def _sqrt_migration_price(config: ConfigParameters) -> int:
    try:
        return get_migration_threshold_price(
            config.migration_quote_threshold, config.sqrt_start_price, config.curve
        )
    except (InvalidCurve, MathError) as err:
        raise _reject(f"Invalid curve: {err}", "curve") from err


def _replay_token_supply(
    config: ConfigParameters, leftover_receiver: str | None, sqrt_migration_price: int
) -> bool:
    try:
        swap_base_amount = get_base_token_for_swap(
            config.sqrt_start_price, sqrt_migration_price, config.curve
        )
        migration_quote_amount = get_migration_quote_amount_from_migration_quote_threshold(
            Decimal(config.migration_quote_threshold), config.migration_fee.fee_percentage
        )
        migration_base_amount = get_migration_base_token(
            truncate_to_int(migration_quote_amount),
            sqrt_migration_price,
            config.migration_option,
        )
        swap_base_amount_buffer = get_swap_amount_with_buffer(
            swap_base_amount, config.sqrt_start_price, config.curve
        )
    except (InvalidConfiguration, MathError) as err:
        raise _reject(f"Invalid token supply: {err}", "token_supply") from err

    return validate_token_supply(
        config.token_supply,
        leftover_receiver,
        swap_base_amount,
        migration_base_amount,
        config.locked_vesting,
        swap_base_amount_buffer,
    )


def validate_config_parameters(
    config: ConfigParameters, leftover_receiver: str | None = None
) -> None:
    """Check a full config the way the program does on creation.

    Args:
        config: Parameters to submit
        leftover_receiver: Base58 address receiving unsold supply; required
            when config.token_supply is set

    Raises:
        InvalidConfiguration: For the first rule the config breaks
    """
    if not validate_pool_fees(config.pool_fees, config.collect_fee_mode, config.activation_type):
        raise _reject("Invalid pool fees", "pool_fees")
    if not validate_collect_fee_mode(config.collect_fee_mode):
        raise _reject("Invalid collect fee mode", "collect_fee_mode", config.collect_fee_mode)
    if not validate_token_update_authority(config.token_update_authority):
        raise _reject(
            "Invalid option for token update authority",
            "token_update_authority",
            config.token_update_authority,
        )
    if not validate_migration_and_token_type(config.migration_option, config.token_type):
        raise _reject("Token type must be SPL for DAMM migration", "token_type", config.token_type)
    if not validate_activation_type(config.activation_type):
        raise _reject("Invalid activation type", "activation_type", config.activation_type)
    if not validate_migration_fee_option(config.migration_fee_option, config.migration_option):
        raise _reject(
            "Invalid migration fee option", "migration_fee_option", config.migration_fee_option
        )
    if not validate_migration_fee(config.migration_fee):
        raise _reject("Migration fee percentage out of range", "migration_fee")
    if config.creator_trading_fee_percentage > 100:
        raise _reject(
            "Creator trading fee percentage must be between 0 and 100",
            "creator_trading_fee_percentage",
            config.creator_trading_fee_percentage,
        )
    if not validate_token_decimals(config.token_decimal):
        raise _reject("Token decimal must be between 6 and 9", "token_decimal", config.token_decimal)

    partner_vesting = config.partner_liquidity_vesting_info
    creator_vesting = config.creator_liquidity_vesting_info
    if not validate_lp_percentages(
        config.partner_liquidity_percentage,
        config.partner_permanent_locked_liquidity_percentage,
        config.creator_liquidity_percentage,
        config.creator_permanent_locked_liquidity_percentage,
        partner_vesting.vesting_percentage,
        creator_vesting.vesting_percentage,
    ):
        raise _reject("Sum of LP percentages must equal 100", "liquidity_percentages")
    if not validate_pool_creation_fee(config.pool_creation_fee):
        raise _reject("Invalid pool creation fee", "pool_creation_fee", config.pool_creation_fee)

    if config.migration_option == MigrationOption.MET_DAMM:
        if not partner_vesting.is_zero or not creator_vesting.is_zero:
            raise _reject(
                "Liquidity vesting is not supported for DAMM migration", "liquidity_vesting_info"
            )
    elif config.migration_option == MigrationOption.MET_DAMM_V2:
        if not validate_liquidity_vesting_info(partner_vesting):
            raise _reject(
                "Invalid partner liquidity vesting info", "partner_liquidity_vesting_info"
            )
        if not validate_liquidity_vesting_info(creator_vesting):
            raise _reject(
                "Invalid creator liquidity vesting info", "creator_liquidity_vesting_info"
            )

    sqrt_migration_price = _sqrt_migration_price(config)
    if sqrt_migration_price >= MAX_SQRT_PRICE:
        raise _reject(
            "Migration sqrt price exceeds maximum", "migration_sqrt_price", sqrt_migration_price
        )

    if not validate_minimum_locked_liquidity(
        config.partner_permanent_locked_liquidity_percentage,
        config.creator_permanent_locked_liquidity_percentage,
        partner_vesting,
        creator_vesting,
    ):
        locked_bps = calculate_locked_liquidity_bps_at_time(
            config.partner_permanent_locked_liquidity_percentage,
            config.creator_permanent_locked_liquidity_percentage,
            partner_vesting,
            creator_vesting,
            SECONDS_PER_DAY,
        )
        raise _reject(
            f"Invalid migration locked liquidity: {locked_bps}", "locked_liquidity", locked_bps
        )

    if config.migration_quote_threshold == 0:
        raise _reject(
            "Migration quote threshold must be greater than 0", "migration_quote_threshold", 0
        )
    if not MIN_SQRT_PRICE <= config.sqrt_start_price < MAX_SQRT_PRICE:
        raise _reject("Invalid sqrt start price", "sqrt_start_price", config.sqrt_start_price)
    if not validate_migrated_pool_fee(
        config.migrated_pool_fee, config.migration_option, config.migration_fee_option
    ):
        raise _reject("Invalid migrated pool fee parameters", "migrated_pool_fee")
    if config.migration_option == MigrationOption.MET_DAMM_V2:
        if not validate_migrated_pool_base_fee_mode(
            config.migrated_pool_base_fee_mode,
            config.migrated_pool_market_cap_fee_scheduler_params,
            config.migration_option,
        ):
            raise _reject(
                "Invalid migrated pool base fee mode",
                "migrated_pool_base_fee_mode",
                config.migrated_pool_base_fee_mode,
            )
    if not validate_curve(config.curve, config.sqrt_start_price):
        raise _reject("Invalid curve", "curve")
    if not validate_locked_vesting(config.locked_vesting):
        raise _reject("Invalid vesting parameters", "locked_vesting")

    if config.token_supply is not None:
        if not _replay_token_supply(config, leftover_receiver, sqrt_migration_price):
            raise _reject("Invalid token supply", "token_supply")

    logger.debug(
        "config_validated",
        segments=len(config.curve),
        migration_quote_threshold=config.migration_quote_threshold,
    )
